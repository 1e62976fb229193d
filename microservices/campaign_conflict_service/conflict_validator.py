"""
Campaign Conflict Validator

Validation aggregator: loads the active/scheduled campaign population,
runs every conflict detector against it and folds the results into a
ValidationResult with warnings and suggestions.

Detector output is concatenated in a fixed order (schedule, audience,
product, budget, channel), so results are deterministic for a given
population.
"""

import logging
from typing import List, Optional, Sequence

from core.config.conflict_config import ConflictConfig

from .collaborator import call_store
from .detectors import (
    AudienceOverlapDetector,
    BudgetPressureChecker,
    ChannelSaturationChecker,
    ProductConflictDetector,
    ScheduleConflictDetector,
)
from .models import (
    Campaign,
    CampaignCandidate,
    CampaignStatus,
    Conflict,
    ConflictSeverity,
    ValidationResult,
)
from .monitoring import ValidationMonitor
from .protocols import (
    CampaignFetchError,
    CampaignStoreProtocol,
    ErrorCode,
    ProductFetchError,
    ValidationMonitorProtocol,
)

logger = logging.getLogger(__name__)

COMPARED_STATUSES = (CampaignStatus.ACTIVE, CampaignStatus.SCHEDULED)

RESCHEDULE_SUGGESTION = "Consider rescheduling the campaign to avoid critical conflicts"
SEGMENTATION_SUGGESTION = "Review target audience segmentation to reduce overlap"


class CampaignConflictValidator:
    """
    Checks a candidate campaign against the running campaign population.

    A result with a critical conflict is marked invalid; blocking the
    campaign is left to the caller.
    """

    SERVICE_NAME = "CampaignConflictValidator"

    def __init__(
        self,
        store: CampaignStoreProtocol,
        monitor: Optional[ValidationMonitorProtocol] = None,
        config: Optional[ConflictConfig] = None,
    ):
        self.store = store
        self.monitor = monitor or ValidationMonitor()
        self.config = config or ConflictConfig()

        self.schedule_detector = ScheduleConflictDetector(self.config)
        self.audience_detector = AudienceOverlapDetector(self.config)
        self.product_detector = ProductConflictDetector(store, self.config, self.monitor)
        self.budget_checker = BudgetPressureChecker(self.config)
        self.channel_checker = ChannelSaturationChecker(self.config)

    @property
    def context(self) -> str:
        return f"{self.SERVICE_NAME}.validate_new_campaign"

    async def validate_new_campaign(
        self,
        candidate: CampaignCandidate,
        product_ids: Optional[Sequence[str]] = None,
    ) -> ValidationResult:
        """
        Validate a candidate campaign against active and scheduled campaigns.

        Args:
            candidate: Proposed campaign
            product_ids: Products the candidate will promote (optional)

        Returns:
            ValidationResult; conflicts are data, not errors

        Raises:
            CampaignFetchError: If the campaign population cannot be loaded
            ProductFetchError: If product associations cannot be loaded
        """
        logger.info(f"Validating campaign '{candidate.name}' ({candidate.campaign_type.value})")

        try:
            existing = await self._fetch_existing_campaigns()
            if candidate.campaign_id:
                existing = [c for c in existing if c.campaign_id != candidate.campaign_id]

            if not existing:
                logger.info("No active or scheduled campaigns to compare against")
                return ValidationResult()

            conflicts: List[Conflict] = []
            conflicts.extend(self.schedule_detector.detect(candidate, existing))
            conflicts.extend(self.audience_detector.detect(candidate, existing))
            if product_ids:
                conflicts.extend(await self._detect_product_conflicts(product_ids, existing))
            conflicts.extend(self.budget_checker.detect(candidate, existing))
            conflicts.extend(self.channel_checker.detect(candidate, existing))

            warnings: List[str] = []
            suggestions: List[str] = []
            if conflicts:
                warnings.append(f"Found {len(conflicts)} potential conflicts with existing campaigns")
                severities = {c.severity for c in conflicts}
                if ConflictSeverity.CRITICAL in severities:
                    suggestions.append(RESCHEDULE_SUGGESTION)
                if ConflictSeverity.HIGH in severities:
                    suggestions.append(SEGMENTATION_SUGGESTION)

            warnings.extend(self.dependency_chain_warnings(candidate, existing))

            result = ValidationResult(
                conflicts=conflicts,
                warnings=warnings,
                suggestions=suggestions,
            )

            await self.monitor.record_pattern_success(
                service=self.SERVICE_NAME,
                pattern="dependency_validation",
                operation="validate_new_campaign",
            )
            logger.info(
                f"Validated '{candidate.name}' against {len(existing)} campaigns: "
                f"{len(conflicts)} conflicts, valid={result.is_valid}"
            )
            return result

        except Exception as e:
            await self.monitor.record_validation_error(
                context=self.context,
                error_message=str(e) or type(e).__name__,
                error_code=ErrorCode.VALIDATION_FAILED.value,
            )
            raise

    def dependency_chain_warnings(
        self, candidate: CampaignCandidate, existing: Sequence[Campaign]
    ) -> List[str]:
        """Soft sequencing hints; never affect validity"""
        prerequisites = self.config.sequence_prerequisites.get(candidate.campaign_type.value)
        if not prerequisites:
            return []

        if any(c.campaign_type.value in prerequisites for c in existing):
            return []

        return [
            f"{candidate.campaign_type.value.capitalize()} campaigns work best after "
            f"{' or '.join(prerequisites)} campaigns"
        ]

    async def _fetch_existing_campaigns(self) -> List[Campaign]:
        try:
            return await call_store(
                self.store.fetch_campaigns(COMPARED_STATUSES, order_by="start_date"),
                operation="fetch_campaigns",
                error_cls=CampaignFetchError,
                timeout=self.config.store_timeout_seconds,
                monitor=self.monitor,
            )
        except CampaignFetchError as e:
            await self.monitor.record_validation_error(
                context=self.context,
                error_message=str(e),
                error_code=ErrorCode.FETCH_CAMPAIGNS_FAILED.value,
            )
            raise

    async def _detect_product_conflicts(
        self, product_ids: Sequence[str], existing: Sequence[Campaign]
    ) -> List[Conflict]:
        try:
            return await self.product_detector.detect(product_ids, existing)
        except ProductFetchError as e:
            await self.monitor.record_validation_error(
                context=self.context,
                error_message=str(e),
                error_code=ErrorCode.FETCH_PRODUCTS_FAILED.value,
            )
            raise


__all__ = ["CampaignConflictValidator", "COMPARED_STATUSES"]
