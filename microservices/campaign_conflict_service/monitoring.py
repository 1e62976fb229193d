"""
Validation Monitor

Counts, logs and publishes validation outcomes. Every record is written
to the log first; publishing through the event publisher is
best-effort and never raises into the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .events.publishers import ConflictEventPublisher
from .models import MonitorMetrics

logger = logging.getLogger(__name__)

LOG_PREFIX = "[VALIDATION_MONITOR]"

_QUALITY_LOG_LEVELS = {
    "critical": logging.ERROR,
    "high": logging.ERROR,
    "medium": logging.WARNING,
    "low": logging.INFO,
}


class ValidationMonitor:
    """Monitoring collaborator for the conflict engine"""

    def __init__(self, publisher: Optional[ConflictEventPublisher] = None):
        self.publisher = publisher
        self._metrics = MonitorMetrics()

    def _touch(self) -> None:
        self._metrics.last_updated = datetime.now(timezone.utc)

    async def record_validation_error(
        self, context: str, error_message: str, error_code: str
    ) -> None:
        self._metrics.validation_errors += 1
        self._touch()
        logger.error(f"{LOG_PREFIX} Validation error in {context} [{error_code}]: {error_message}")

        if self.publisher:
            await self.publisher.publish_validation_failed(
                context=context,
                error_message=error_message,
                error_code=error_code,
            )

    async def record_pattern_success(
        self, service: str, pattern: str, operation: str
    ) -> None:
        self._metrics.successes += 1
        self._touch()
        logger.info(f"{LOG_PREFIX} Successful pattern usage in {service}.{operation} ({pattern})")

        if self.publisher:
            await self.publisher.publish_pattern_succeeded(
                service=service,
                pattern=pattern,
                operation=operation,
            )

    async def record_data_quality_issue(
        self,
        issue_type: str,
        description: str,
        severity: str,
        entity: str,
        entity_id: Optional[str] = None,
    ) -> None:
        self._metrics.data_quality_issues += 1
        self._touch()
        level = _QUALITY_LOG_LEVELS.get(severity, logging.WARNING)
        logger.log(
            level,
            f"{LOG_PREFIX} {severity.upper()} data quality issue ({issue_type}) "
            f"on {entity} {entity_id or '-'}: {description}",
        )

        if self.publisher:
            await self.publisher.publish_data_quality_issue(
                issue_type=issue_type,
                description=description,
                severity=severity,
                affected_entity=entity,
                entity_id=entity_id,
            )

    def get_metrics(self) -> MonitorMetrics:
        """Snapshot of the counters"""
        return self._metrics.model_copy()

    def reset_metrics(self) -> None:
        self._metrics = MonitorMetrics()
        logger.info(f"{LOG_PREFIX} Metrics reset")


__all__ = ["ValidationMonitor", "LOG_PREFIX"]
