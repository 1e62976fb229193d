"""
Campaign Conflict Service Events

Event models and publishers for monitoring events.
"""

from .models import (
    ConflictEventType,
    ValidationFailedEventData,
    PatternSucceededEventData,
    DataQualityIssueEventData,
)
from .publishers import ConflictEventPublisher

__all__ = [
    # Event Types
    "ConflictEventType",
    # Event Data Models
    "ValidationFailedEventData",
    "PatternSucceededEventData",
    "DataQualityIssueEventData",
    # Publisher
    "ConflictEventPublisher",
]
