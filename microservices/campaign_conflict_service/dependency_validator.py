"""
Campaign Dependency Validator

Validates proposed execution orders against stored dependency and
exclusivity records, and manages those records through a per-instance
read-through / write-through cache.

Reads and writes of the same campaign id are serialized on a per-key
asyncio.Lock, so a reader never sees a record the store has not
accepted yet.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from core.config.conflict_config import ConflictConfig

from .collaborator import call_store
from .dependency_graph import DependencyGraph, soft_order_warnings
from .models import CampaignDependency, ExecutionOrderResult
from .monitoring import ValidationMonitor
from .protocols import (
    CampaignStoreProtocol,
    CollaboratorError,
    DependencyCycleError,
    DependencyFetchError,
    DependencyIntegrityError,
    DependencyWriteError,
    ErrorCode,
    ValidationMonitorProtocol,
)

logger = logging.getLogger(__name__)


class CampaignDependencyValidator:
    """Execution-order validation over campaign dependency records"""

    SERVICE_NAME = "CampaignDependencyValidator"

    def __init__(
        self,
        store: CampaignStoreProtocol,
        monitor: Optional[ValidationMonitorProtocol] = None,
        config: Optional[ConflictConfig] = None,
    ):
        self.store = store
        self.monitor = monitor or ValidationMonitor()
        self.config = config or ConflictConfig()
        self._cache: Dict[str, CampaignDependency] = {}
        # Per-key locks live only while a caller holds or waits on them
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def _key_lock(self, campaign_id: str):
        lock = self._locks.get(campaign_id)
        if lock is None:
            lock = self._locks[campaign_id] = asyncio.Lock()
        self._lock_users[campaign_id] = self._lock_users.get(campaign_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[campaign_id] -= 1
            if not self._lock_users[campaign_id]:
                del self._lock_users[campaign_id]
                del self._locks[campaign_id]

    # ====================
    # Record Access
    # ====================

    async def get_campaign_dependencies(self, campaign_id: str) -> Optional[CampaignDependency]:
        """
        Cached dependency record for a campaign.

        Absent records are not cached; the next lookup asks the store again.

        Raises:
            DependencyFetchError: If the store call fails or times out
            DependencyIntegrityError: If the stored record is inconsistent
        """
        async with self._key_lock(campaign_id):
            cached = self._cache.get(campaign_id)
            if cached is not None:
                return cached

            try:
                record = await call_store(
                    self.store.fetch_dependency(campaign_id),
                    operation="fetch_dependency",
                    error_cls=DependencyFetchError,
                    timeout=self.config.store_timeout_seconds,
                    monitor=self.monitor,
                )
            except CollaboratorError as e:
                await self._report(
                    "get_campaign_dependencies", str(e), ErrorCode.FETCH_DEPENDENCY_FAILED
                )
                raise

            if record is None:
                return None

            problems = record.integrity_violations()
            if problems:
                message = "; ".join(problems)
                await self.monitor.record_data_quality_issue(
                    issue_type="inconsistent_data",
                    description=message,
                    severity="high",
                    entity="campaign_dependency",
                    entity_id=campaign_id,
                )
                await self._report(
                    "get_campaign_dependencies", message, ErrorCode.DEPENDENCY_INTEGRITY_VIOLATION
                )
                raise DependencyIntegrityError(message, campaign_id=campaign_id)

            self._cache[campaign_id] = record
            return record

    async def set_campaign_dependencies(
        self,
        campaign_id: str,
        depends_on: Optional[List[str]] = None,
        exclusive_with: Optional[List[str]] = None,
        required_before: Optional[List[str]] = None,
        required_after: Optional[List[str]] = None,
    ) -> CampaignDependency:
        """
        Persist a campaign's dependency record, then update the cache.

        Raises:
            DependencyIntegrityError: If the record breaks its invariants (nothing is written)
            DependencyWriteError: If the store rejects the write
        """
        record = CampaignDependency(
            campaign_id=campaign_id,
            depends_on=depends_on,
            exclusive_with=exclusive_with,
            required_before=required_before,
            required_after=required_after,
            updated_at=datetime.now(timezone.utc),
        )
        problems = record.integrity_violations()
        if problems:
            message = "; ".join(problems)
            await self._report(
                "set_campaign_dependencies", message, ErrorCode.DEPENDENCY_INTEGRITY_VIOLATION
            )
            raise DependencyIntegrityError(message, campaign_id=campaign_id)

        async with self._key_lock(campaign_id):
            try:
                await call_store(
                    self.store.upsert_dependency(record),
                    operation="upsert_dependency",
                    error_cls=DependencyWriteError,
                    timeout=self.config.store_timeout_seconds,
                    monitor=self.monitor,
                )
            except CollaboratorError as e:
                await self._report(
                    "set_campaign_dependencies", str(e), ErrorCode.UPSERT_DEPENDENCY_FAILED
                )
                raise
            self._cache[campaign_id] = record

        logger.info(
            f"Dependencies set for {campaign_id}: "
            f"{len(record.depends_on)} depends_on, {len(record.exclusive_with)} exclusive_with"
        )
        await self.monitor.record_pattern_success(
            service=self.SERVICE_NAME,
            pattern="set_dependencies",
            operation="set_campaign_dependencies",
        )
        return record

    def clear_cache(self, campaign_id: Optional[str] = None) -> None:
        """Drop one cached record, or all of them"""
        if campaign_id is None:
            self._cache.clear()
        else:
            self._cache.pop(campaign_id, None)

    @property
    def cached_campaign_ids(self) -> List[str]:
        return list(self._cache)

    # ====================
    # Execution Order
    # ====================

    async def check_execution_order(self, campaign_ids: Sequence[str]) -> ExecutionOrderResult:
        """
        Check a proposed execution order.

        Returns the first violated constraint (if any) and warnings for
        required_before / required_after hints the order contradicts.

        Raises:
            DependencyFetchError: If a record cannot be loaded
            DependencyIntegrityError: If a record is inconsistent
            DependencyCycleError: If the listed campaigns' dependencies form a cycle
        """
        order = list(campaign_ids)
        unique_ids = list(dict.fromkeys(order))

        records = []
        for campaign_id in unique_ids:
            record = await self.get_campaign_dependencies(campaign_id)
            if record is not None:
                records.append(record)

        graph = DependencyGraph.from_records(records)

        cycle = graph.find_cycle(unique_ids)
        if cycle:
            error = DependencyCycleError(cycle)
            await self._report("check_execution_order", str(error), ErrorCode.DEPENDENCY_INTEGRITY_VIOLATION)
            raise error

        violation = graph.find_violation(order)
        warnings = soft_order_warnings(records, order)

        if violation:
            logger.info(f"Execution order rejected: {violation.message}")
        return ExecutionOrderResult(
            is_valid=violation is None,
            violation=violation,
            warnings=warnings,
        )

    async def validate_execution_order(self, campaign_ids: Sequence[str]) -> bool:
        """True when the order satisfies every dependency and exclusivity record"""
        result = await self.check_execution_order(campaign_ids)
        return result.is_valid

    async def _report(self, operation: str, message: str, code: ErrorCode) -> None:
        await self.monitor.record_validation_error(
            context=f"{self.SERVICE_NAME}.{operation}",
            error_message=message,
            error_code=code.value,
        )


__all__ = ["CampaignDependencyValidator"]
