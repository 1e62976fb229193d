"""
Campaign Conflict Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .models import (
    Campaign,
    CampaignDependency,
    CampaignStatus,
    MonitorMetrics,
)


# ====================
# Error Codes
# ====================


class ErrorCode(str, Enum):
    """Codes reported to the validation monitor"""
    FETCH_CAMPAIGNS_FAILED = "FETCH_CAMPAIGNS_FAILED"
    FETCH_PRODUCTS_FAILED = "FETCH_PRODUCTS_FAILED"
    FETCH_DEPENDENCY_FAILED = "FETCH_DEPENDENCY_FAILED"
    UPSERT_DEPENDENCY_FAILED = "UPSERT_DEPENDENCY_FAILED"
    DEPENDENCY_INTEGRITY_VIOLATION = "DEPENDENCY_INTEGRITY_VIOLATION"
    VALIDATION_FAILED = "VALIDATION_FAILED"


# ====================
# Store Protocol
# ====================


class CampaignStoreProtocol(Protocol):
    """Protocol for the campaign / product / dependency store"""

    async def initialize(self) -> None:
        """Initialize store connection"""
        ...

    async def close(self) -> None:
        """Close store connection"""
        ...

    async def health_check(self) -> bool:
        """Check store health"""
        ...

    async def fetch_campaigns(
        self,
        statuses: Sequence[CampaignStatus],
        order_by: str = "start_date",
    ) -> List[Campaign]:
        """Campaigns in any of the given statuses, ordered ascending"""
        ...

    async def fetch_campaign_product_associations(
        self, campaign_ids: Sequence[str]
    ) -> Dict[str, List[str]]:
        """Campaign id -> product ids for the given campaigns"""
        ...

    async def fetch_dependency(self, campaign_id: str) -> Optional[CampaignDependency]:
        """Dependency record for a campaign, None when none exists"""
        ...

    async def upsert_dependency(self, record: CampaignDependency) -> bool:
        """Insert or replace the dependency record keyed by campaign id"""
        ...


# ====================
# Monitoring Protocols
# ====================


class ValidationMonitorProtocol(Protocol):
    """Protocol for the validation outcome sink"""

    async def record_validation_error(
        self, context: str, error_message: str, error_code: str
    ) -> None:
        """Record a failed validation step"""
        ...

    async def record_pattern_success(
        self, service: str, pattern: str, operation: str
    ) -> None:
        """Record a successful validation pattern"""
        ...

    async def record_data_quality_issue(
        self,
        issue_type: str,
        description: str,
        severity: str,
        entity: str,
        entity_id: Optional[str] = None,
    ) -> None:
        """Record malformed or inconsistent stored data"""
        ...

    def get_metrics(self) -> MonitorMetrics:
        """Current counters"""
        ...


class EventBusProtocol(Protocol):
    """Protocol for event bus"""

    async def publish_event(self, event: Any) -> bool:
        """Publish an event"""
        ...

    async def close(self) -> None:
        """Close the connection"""
        ...


# ====================
# Custom Exceptions
# ====================


class CampaignConflictError(Exception):
    """Base exception for campaign conflict service errors"""
    pass


class CollaboratorError(CampaignConflictError):
    """Raised when a store call fails or times out"""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class CampaignFetchError(CollaboratorError):
    """Raised when existing campaigns cannot be loaded"""
    pass


class ProductFetchError(CollaboratorError):
    """Raised when campaign product associations cannot be loaded"""
    pass


class DependencyFetchError(CollaboratorError):
    """Raised when a dependency record cannot be loaded"""
    pass


class DependencyWriteError(CollaboratorError):
    """Raised when a dependency record cannot be persisted"""
    pass


class MalformedRecordError(CampaignConflictError):
    """Raised when a stored row cannot be parsed into a record"""

    def __init__(
        self,
        message: str,
        entity: str = "campaign",
        entity_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class DependencyIntegrityError(CampaignConflictError):
    """Raised when a dependency record breaks its own invariants"""

    def __init__(self, message: str, campaign_id: Optional[str] = None):
        super().__init__(message)
        self.campaign_id = campaign_id


class DependencyCycleError(DependencyIntegrityError):
    """Raised when precedence constraints form a cycle"""

    def __init__(self, cycle: List[str]):
        super().__init__(
            f"Dependency cycle detected: {' -> '.join(cycle)}",
            campaign_id=cycle[0] if cycle else None,
        )
        self.cycle = cycle


__all__ = [
    "ErrorCode",
    "CampaignStoreProtocol",
    "ValidationMonitorProtocol",
    "EventBusProtocol",
    "CampaignConflictError",
    "CollaboratorError",
    "CampaignFetchError",
    "ProductFetchError",
    "DependencyFetchError",
    "DependencyWriteError",
    "MalformedRecordError",
    "DependencyIntegrityError",
    "DependencyCycleError",
]
