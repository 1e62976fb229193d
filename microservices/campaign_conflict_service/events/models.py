"""
Campaign Conflict Event Data Models

Event type definitions and data structures for monitoring events
published by the conflict engine.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Event Type Definitions
# =============================================================================


class ConflictEventType(str, Enum):
    """
    Events published by campaign_conflict_service.

    Subjects double as NATS subjects; subscribers can match
    ``campaign_conflict.>``.
    """
    VALIDATION_FAILED = "campaign_conflict.validation.failed"
    PATTERN_SUCCEEDED = "campaign_conflict.pattern.succeeded"
    DATA_QUALITY_ISSUE = "campaign_conflict.data_quality.issue"


# =============================================================================
# Event Data Models
# =============================================================================


class ValidationFailedEventData(BaseModel):
    """campaign_conflict.validation.failed event data"""
    context: str = Field(..., description="Component and operation that failed")
    error_message: str = Field(..., description="Failure message")
    error_code: str = Field(..., description="Machine-readable error code")
    timestamp: datetime = Field(default_factory=_now, description="Event timestamp")


class PatternSucceededEventData(BaseModel):
    """campaign_conflict.pattern.succeeded event data"""
    service: str = Field(..., description="Reporting component")
    pattern: str = Field(..., description="Validation pattern name")
    operation: str = Field(..., description="Operation that succeeded")
    timestamp: datetime = Field(default_factory=_now, description="Event timestamp")


class DataQualityIssueEventData(BaseModel):
    """campaign_conflict.data_quality.issue event data"""
    issue_type: str = Field(..., description="Category of the issue")
    description: str = Field(..., description="What is wrong with the data")
    severity: str = Field(..., description="low, medium, high or critical")
    affected_entity: str = Field(..., description="Entity kind (campaign, dependency, ...)")
    entity_id: Optional[str] = Field(None, description="Identifier of the affected record")
    timestamp: datetime = Field(default_factory=_now, description="Event timestamp")


__all__ = [
    "ConflictEventType",
    "ValidationFailedEventData",
    "PatternSucceededEventData",
    "DataQualityIssueEventData",
]
