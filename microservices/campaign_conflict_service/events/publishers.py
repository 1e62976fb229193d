"""
Campaign Conflict Event Publishers

Publishes monitoring events to NATS.
"""

import logging
from typing import Any, Dict, Optional

from core.nats_client import create_event

from ..protocols import EventBusProtocol
from .models import (
    ConflictEventType,
    DataQualityIssueEventData,
    PatternSucceededEventData,
    ValidationFailedEventData,
)

logger = logging.getLogger(__name__)


class ConflictEventPublisher:
    """Publisher for campaign conflict service events"""

    def __init__(self, event_bus: Optional[EventBusProtocol] = None):
        self.event_bus = event_bus
        self.source = "campaign_conflict_service"

    async def publish(
        self,
        event_type: ConflictEventType,
        data: Dict[str, Any],
    ) -> bool:
        """
        Publish an event to NATS.

        Args:
            event_type: The event type enum
            data: Event data payload

        Returns:
            True if published successfully, False otherwise
        """
        if not self.event_bus:
            logger.debug(f"Event bus not configured, skipping publish: {event_type.value}")
            return False

        try:
            event = create_event(
                event_type=event_type.value,
                source=self.source,
                data=data,
            )
            published = await self.event_bus.publish_event(event)
            if published is False:
                logger.warning(f"Event bus rejected event: {event_type.value}")
                return False

            logger.debug(f"Published event: {event_type.value}")
            return True

        except Exception as e:
            logger.error(f"Failed to publish event {event_type.value}: {e}")
            return False

    async def publish_validation_failed(
        self,
        context: str,
        error_message: str,
        error_code: str,
    ) -> bool:
        """Publish campaign_conflict.validation.failed event"""
        data = ValidationFailedEventData(
            context=context,
            error_message=error_message,
            error_code=error_code,
        )
        return await self.publish(
            ConflictEventType.VALIDATION_FAILED, data.model_dump(mode="json")
        )

    async def publish_pattern_succeeded(
        self,
        service: str,
        pattern: str,
        operation: str,
    ) -> bool:
        """Publish campaign_conflict.pattern.succeeded event"""
        data = PatternSucceededEventData(
            service=service,
            pattern=pattern,
            operation=operation,
        )
        return await self.publish(
            ConflictEventType.PATTERN_SUCCEEDED, data.model_dump(mode="json")
        )

    async def publish_data_quality_issue(
        self,
        issue_type: str,
        description: str,
        severity: str,
        affected_entity: str,
        entity_id: Optional[str] = None,
    ) -> bool:
        """Publish campaign_conflict.data_quality.issue event"""
        data = DataQualityIssueEventData(
            issue_type=issue_type,
            description=description,
            severity=severity,
            affected_entity=affected_entity,
            entity_id=entity_id,
        )
        return await self.publish(
            ConflictEventType.DATA_QUALITY_ISSUE, data.model_dump(mode="json")
        )


__all__ = ["ConflictEventPublisher"]
