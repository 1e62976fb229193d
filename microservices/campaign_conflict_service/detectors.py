"""
Campaign Conflict Detectors

One detector per conflict dimension. Each takes the candidate and the
already-fetched population of existing campaigns and returns a list of
Conflict values in population order. Only the product detector performs
I/O; the rest are pure.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from core.config.conflict_config import ConflictConfig

from .audience import calculate_audience_overlap
from .collaborator import call_store
from .models import (
    Campaign,
    CampaignCandidate,
    Conflict,
    ConflictSeverity,
    ConflictType,
)
from .overlap import calculate_overlap_days, windows_intersect
from .protocols import CampaignStoreProtocol, ProductFetchError, ValidationMonitorProtocol

logger = logging.getLogger(__name__)


def _percent(score: float) -> int:
    """Whole percentage, halves rounded up"""
    return math.floor(score * 100 + 0.5)


class ScheduleConflictDetector:
    """Flags existing campaigns whose window intersects the candidate's"""

    def __init__(self, config: Optional[ConflictConfig] = None):
        self.config = config or ConflictConfig()

    def baseline_severity(self, overlap_days: int) -> ConflictSeverity:
        if overlap_days > self.config.schedule_high_days:
            return ConflictSeverity.HIGH
        if overlap_days > self.config.schedule_medium_days:
            return ConflictSeverity.MEDIUM
        return ConflictSeverity.LOW

    def severity_for(self, overlap_days: int, same_type: bool) -> ConflictSeverity:
        severity = self.baseline_severity(overlap_days)
        return severity.escalate() if same_type else severity

    def detect(
        self, candidate: CampaignCandidate, existing: Sequence[Campaign]
    ) -> List[Conflict]:
        if not candidate.has_window:
            return []

        conflicts = []
        for campaign in existing:
            if not windows_intersect(
                candidate.start_date, candidate.end_date,
                campaign.start_date, campaign.end_date,
            ):
                continue

            overlap_days = calculate_overlap_days(
                candidate.start_date, candidate.end_date,
                campaign.start_date, campaign.end_date,
            )
            severity = self.severity_for(
                overlap_days, candidate.campaign_type == campaign.campaign_type
            )
            if overlap_days > self.config.schedule_medium_days:
                resolution = "Consider adjusting campaign dates to avoid overlap"
            else:
                resolution = "Minor overlap detected, review campaign messaging for consistency"

            conflicts.append(Conflict(
                conflict_type=ConflictType.SCHEDULE,
                severity=severity,
                campaign_ids=[campaign.campaign_id],
                description=f'Schedule overlaps with campaign "{campaign.name}" for {overlap_days} days',
                resolution=resolution,
            ))

        logger.debug(f"Schedule detector found {len(conflicts)} conflicts")
        return conflicts


class AudienceOverlapDetector:
    """Flags existing campaigns targeting a near-identical audience"""

    def __init__(self, config: Optional[ConflictConfig] = None):
        self.config = config or ConflictConfig()

    def detect(
        self, candidate: CampaignCandidate, existing: Sequence[Campaign]
    ) -> List[Conflict]:
        if candidate.target_audience is None:
            return []

        conflicts = []
        for campaign in existing:
            if campaign.target_audience is None:
                continue

            score = calculate_audience_overlap(candidate.target_audience, campaign.target_audience)
            if score <= self.config.audience_conflict_threshold:
                continue

            if score > self.config.audience_high_threshold:
                severity = ConflictSeverity.HIGH
            else:
                severity = ConflictSeverity.MEDIUM

            conflicts.append(Conflict(
                conflict_type=ConflictType.AUDIENCE,
                severity=severity,
                campaign_ids=[campaign.campaign_id],
                description=f'{_percent(score)}% audience overlap with campaign "{campaign.name}"',
                resolution="Consider segmenting the audience or staggering campaign timing",
            ))

        logger.debug(f"Audience detector found {len(conflicts)} conflicts")
        return conflicts


class ProductConflictDetector:
    """Flags existing campaigns already promoting the candidate's products"""

    def __init__(
        self,
        store: CampaignStoreProtocol,
        config: Optional[ConflictConfig] = None,
        monitor: Optional[ValidationMonitorProtocol] = None,
    ):
        self.store = store
        self.config = config or ConflictConfig()
        self.monitor = monitor

    def severity_for(self, overlap_percentage: float) -> ConflictSeverity:
        if overlap_percentage > self.config.product_high_percentage:
            return ConflictSeverity.HIGH
        if overlap_percentage > self.config.product_medium_percentage:
            return ConflictSeverity.MEDIUM
        return ConflictSeverity.LOW

    async def fetch_associations(self, existing: Sequence[Campaign]) -> Dict[str, List[str]]:
        """Product ids per existing campaign in a single store call"""
        return await call_store(
            self.store.fetch_campaign_product_associations(
                [c.campaign_id for c in existing]
            ),
            operation="fetch_campaign_product_associations",
            error_cls=ProductFetchError,
            timeout=self.config.store_timeout_seconds,
            monitor=self.monitor,
        )

    async def detect(
        self, product_ids: Sequence[str], existing: Sequence[Campaign]
    ) -> List[Conflict]:
        """
        Compare the candidate's products with each existing campaign.

        Raises:
            ProductFetchError: If the associations cannot be loaded
        """
        candidate_products = list(dict.fromkeys(p for p in product_ids if p))
        if not candidate_products or not existing:
            return []

        associations = await self.fetch_associations(existing)

        conflicts = []
        for campaign in existing:
            promoted = set(associations.get(campaign.campaign_id, []))
            common = [p for p in candidate_products if p in promoted]
            if not common:
                continue

            overlap_percentage = len(common) / len(candidate_products) * 100
            conflicts.append(Conflict(
                conflict_type=ConflictType.PRODUCT,
                severity=self.severity_for(overlap_percentage),
                campaign_ids=[campaign.campaign_id],
                description=f'{len(common)} products already in campaign "{campaign.name}"',
                resolution="Consider using different products or coordinating campaigns",
            ))

        logger.debug(f"Product detector found {len(conflicts)} conflicts")
        return conflicts


class BudgetPressureChecker:
    """Concurrency-count heuristic; monetary figures are not inspected"""

    def __init__(self, config: Optional[ConflictConfig] = None):
        self.config = config or ConflictConfig()

    def detect(
        self,
        candidate: CampaignCandidate,
        existing: Sequence[Campaign],
        now: Optional[datetime] = None,
    ) -> List[Conflict]:
        now = now or datetime.now(timezone.utc)
        start = candidate.start_date or now
        end = candidate.end_date or now

        concurrent = [
            c for c in existing
            if windows_intersect(start, end, c.start_date, c.end_date)
        ]
        if len(concurrent) <= self.config.budget_max_concurrent:
            return []

        return [Conflict(
            conflict_type=ConflictType.BUDGET,
            severity=ConflictSeverity.MEDIUM,
            campaign_ids=[c.campaign_id for c in concurrent],
            description=f"{len(concurrent)} campaigns running simultaneously may strain budget",
            resolution="Review budget allocation across all campaigns",
        )]


class ChannelSaturationChecker:
    """Flags too many running campaigns of the candidate's type"""

    def __init__(self, config: Optional[ConflictConfig] = None):
        self.config = config or ConflictConfig()

    def detect(
        self, candidate: CampaignCandidate, existing: Sequence[Campaign]
    ) -> List[Conflict]:
        same_type = [c for c in existing if c.campaign_type == candidate.campaign_type]
        if len(same_type) <= self.config.channel_max_same_type:
            return []

        return [Conflict(
            conflict_type=ConflictType.CHANNEL,
            severity=ConflictSeverity.MEDIUM,
            campaign_ids=[c.campaign_id for c in same_type],
            description=f'Multiple campaigns of type "{candidate.campaign_type.value}" may cause channel fatigue',
            resolution="Consider diversifying campaign channels or spacing them out",
        )]


__all__ = [
    "ScheduleConflictDetector",
    "AudienceOverlapDetector",
    "ProductConflictDetector",
    "BudgetPressureChecker",
    "ChannelSaturationChecker",
]
