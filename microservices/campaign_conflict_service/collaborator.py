"""
Guarded calls to the campaign store.

Every store round-trip goes through ``call_store`` so timeouts, driver
errors and unparseable rows all surface as one CollaboratorError
subclass, chained to the original cause.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Type, TypeVar

from .protocols import (
    CampaignConflictError,
    CollaboratorError,
    MalformedRecordError,
    ValidationMonitorProtocol,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_store(
    awaitable: Awaitable[T],
    *,
    operation: str,
    error_cls: Type[CollaboratorError],
    timeout: Optional[float] = None,
    monitor: Optional[ValidationMonitorProtocol] = None,
) -> T:
    """
    Await a store call, converting failures into ``error_cls``.

    Args:
        awaitable: Pending store coroutine
        operation: Store operation name, used in messages
        error_cls: CollaboratorError subclass to raise
        timeout: Seconds before the call counts as failed (None waits forever)
        monitor: Receives a data-quality issue when a stored row is malformed

    Raises:
        error_cls: On timeout, driver error or malformed record
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Store call {operation} timed out after {timeout}s")
        raise error_cls(f"{operation} timed out after {timeout}s", operation=operation) from e
    except MalformedRecordError as e:
        logger.error(f"Store call {operation} returned a malformed {e.entity}: {e}")
        if monitor is not None:
            await monitor.record_data_quality_issue(
                issue_type="invalid_format",
                description=str(e),
                severity="high",
                entity=e.entity,
                entity_id=e.entity_id,
            )
        raise error_cls(f"{operation} returned malformed data: {e}", operation=operation) from e
    except CampaignConflictError:
        raise
    except Exception as e:
        logger.error(f"Store call {operation} failed: {e}")
        raise error_cls(f"{operation} failed: {e}", operation=operation) from e


__all__ = ["call_store"]
