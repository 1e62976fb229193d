"""
Campaign Conflict Service Data Models

Canonical data structures for conflict detection and dependency
validation. Campaign and dependency records are read-only snapshots of
what the persistence layer holds; conflicts and validation results are
built fresh for every validation call.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class CampaignType(str, Enum):
    """Marketing campaign type"""
    PROMOTIONAL = "promotional"
    SEASONAL = "seasonal"
    CLEARANCE = "clearance"
    NEW_PRODUCT = "new_product"
    ACQUISITION = "acquisition"
    AWARENESS = "awareness"
    RETENTION = "retention"
    UPSELL = "upsell"


class CampaignStatus(str, Enum):
    """Campaign lifecycle status"""
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ConflictType(str, Enum):
    """Dimension in which two campaigns collide"""
    SCHEDULE = "schedule"
    AUDIENCE = "audience"
    PRODUCT = "product"
    BUDGET = "budget"
    CHANNEL = "channel"


class ConflictSeverity(str, Enum):
    """Conflict severity, ordered low < medium < high < critical"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    def escalate(self) -> "ConflictSeverity":
        """Raise one level; critical stays critical"""
        return _SEVERITY_ORDER[min(self.rank + 1, len(_SEVERITY_ORDER) - 1)]


_SEVERITY_ORDER = [
    ConflictSeverity.LOW,
    ConflictSeverity.MEDIUM,
    ConflictSeverity.HIGH,
    ConflictSeverity.CRITICAL,
]


class ViolationKind(str, Enum):
    """Execution order constraint that failed"""
    MISSING_DEPENDENCY = "missing_dependency"
    DEPENDENCY_OUT_OF_ORDER = "dependency_out_of_order"
    EXCLUSIVE_CONFLICT = "exclusive_conflict"


# =============================================================================
# BASE MODELS
# =============================================================================

class BaseContract(BaseModel):
    """Base model for all contracts"""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class FrozenContract(BaseContract):
    """Immutable record; safe to share between concurrent validations"""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so all comparisons are well defined"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _unique(values: Optional[List[str]]) -> List[str]:
    """Drop duplicates and blanks, keeping first-seen order"""
    seen: List[str] = []
    for value in values or []:
        if value and value not in seen:
            seen.append(value)
    return seen


# =============================================================================
# AUDIENCE MODELS
# =============================================================================

class AgeRange(FrozenContract):
    """Inclusive age bracket"""
    min_age: int = Field(..., ge=0, validation_alias=AliasChoices("min_age", "min"))
    max_age: int = Field(..., ge=0, validation_alias=AliasChoices("max_age", "max"))

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.min_age > self.max_age:
            raise ValueError(f"Age range min {self.min_age} exceeds max {self.max_age}")
        return self

    def intersects(self, other: "AgeRange") -> bool:
        return self.min_age <= other.max_age and self.max_age >= other.min_age


class TargetAudienceProfile(FrozenContract):
    """Targeting attributes compared when scoring audience overlap"""
    age_range: Optional[AgeRange] = Field(
        None, validation_alias=AliasChoices("age_range", "ageRange")
    )
    location: Optional[str] = None
    interests: Optional[List[str]] = None

    @field_validator("age_range", mode="before")
    @classmethod
    def coerce_age_pair(cls, v: Any):
        # Stored profiles sometimes carry the range as a [min, max] pair
        if isinstance(v, (list, tuple)):
            if len(v) != 2:
                raise ValueError("Age range pair must have exactly two values")
            return {"min_age": v[0], "max_age": v[1]}
        return v

    @field_validator("location", mode="before")
    @classmethod
    def blank_location_is_unset(cls, v: Any):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# =============================================================================
# CAMPAIGN MODELS
# =============================================================================

class Campaign(FrozenContract):
    """Existing campaign as read from the persistence layer"""
    campaign_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    campaign_type: CampaignType
    status: CampaignStatus
    start_date: datetime
    end_date: datetime
    target_audience: Optional[TargetAudienceProfile] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    channels: List[str] = Field(..., min_length=1)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @field_validator("channels", mode="before")
    @classmethod
    def dedupe_channels(cls, v: Any):
        # Blanks are dropped before the length check runs
        if isinstance(v, (list, tuple)):
            return _unique([c.strip() if isinstance(c, str) else c for c in v])
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.end_date < self.start_date:
            raise ValueError("Campaign end_date precedes start_date")
        return self


class CampaignCandidate(FrozenContract):
    """
    Campaign proposed for creation or rescheduling.

    Only name and type are required; every dimension left unset is
    skipped by the matching detector.
    """
    campaign_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)
    campaign_type: CampaignType
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    target_audience: Optional[TargetAudienceProfile] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    channels: List[str] = Field(default_factory=list)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    @field_validator("channels", mode="before")
    @classmethod
    def dedupe_channels(cls, v: Any):
        if isinstance(v, (list, tuple)):
            return _unique([c.strip() if isinstance(c, str) else c for c in v])
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Campaign end_date precedes start_date")
        return self

    @property
    def has_window(self) -> bool:
        return self.start_date is not None and self.end_date is not None


# =============================================================================
# CONFLICT MODELS
# =============================================================================

class Conflict(FrozenContract):
    """Detected incompatibility with one or more existing campaigns"""
    conflict_type: ConflictType
    severity: ConflictSeverity
    campaign_ids: List[str] = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    resolution: Optional[str] = None


class ValidationResult(BaseContract):
    """Outcome of validating a candidate campaign"""
    conflicts: List[Conflict] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not any(c.severity == ConflictSeverity.CRITICAL for c in self.conflicts)

    def conflicts_with_severity(self, severity: ConflictSeverity) -> List[Conflict]:
        return [c for c in self.conflicts if c.severity == severity]

    def conflicts_of_type(self, conflict_type: ConflictType) -> List[Conflict]:
        return [c for c in self.conflicts if c.conflict_type == conflict_type]


# =============================================================================
# DEPENDENCY MODELS
# =============================================================================

class CampaignDependency(FrozenContract):
    """
    Ordering and exclusivity constraints declared for one campaign.

    depends_on: campaigns that must execute strictly before this one
    exclusive_with: campaigns that must never co-execute with this one
    required_before / required_after: soft hints, reported as warnings only
        (campaigns expected to run before / after this one)
    """
    campaign_id: str = Field(..., min_length=1)
    depends_on: List[str] = Field(default_factory=list)
    exclusive_with: List[str] = Field(default_factory=list)
    required_before: List[str] = Field(default_factory=list)
    required_after: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @field_validator(
        "depends_on", "exclusive_with", "required_before", "required_after", mode="before"
    )
    @classmethod
    def none_is_empty(cls, v: Any):
        return [] if v is None else v

    @field_validator("depends_on", "exclusive_with", "required_before", "required_after")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        return _unique(v)

    def integrity_violations(self) -> List[str]:
        """Describe every broken record invariant (empty when consistent)"""
        problems = []
        both = [c for c in self.depends_on if c in self.exclusive_with]
        if both:
            problems.append(
                f"campaign {self.campaign_id} both depends on and excludes {', '.join(both)}"
            )
        if self.campaign_id in self.depends_on:
            problems.append(f"campaign {self.campaign_id} depends on itself")
        if self.campaign_id in self.exclusive_with:
            problems.append(f"campaign {self.campaign_id} excludes itself")
        return problems


class ConstraintViolation(FrozenContract):
    """First constraint broken by a proposed execution order"""
    kind: ViolationKind
    campaign_id: str
    related_campaign_id: str
    message: str


class ExecutionOrderResult(BaseContract):
    """Result of checking a proposed execution sequence"""
    is_valid: bool
    violation: Optional[ConstraintViolation] = None
    warnings: List[str] = Field(default_factory=list)


# =============================================================================
# MONITORING MODELS
# =============================================================================

class MonitorMetrics(BaseContract):
    """Running counters kept by the validation monitor"""
    validation_errors: int = 0
    data_quality_issues: int = 0
    successes: int = 0
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    # Enums
    "CampaignType",
    "CampaignStatus",
    "ConflictType",
    "ConflictSeverity",
    "ViolationKind",
    # Audience
    "AgeRange",
    "TargetAudienceProfile",
    # Campaigns
    "Campaign",
    "CampaignCandidate",
    # Conflicts
    "Conflict",
    "ValidationResult",
    # Dependencies
    "CampaignDependency",
    "ConstraintViolation",
    "ExecutionOrderResult",
    # Monitoring
    "MonitorMetrics",
]
