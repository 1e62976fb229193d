"""
Component Test Fixtures for Campaign Conflict Service

Provides an in-memory campaign store and a recording validation monitor.
"""

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.conflict_config import ConflictConfig
from microservices.campaign_conflict_service.models import (
    Campaign,
    CampaignDependency,
    CampaignStatus,
    MonitorMetrics,
)
from tests.contracts.campaign_conflict.data_contract import ConflictTestDataFactory


# ====================
# Mock Store
# ====================


class MockCampaignStore:
    """In-memory store implementing the campaign store protocol"""

    def __init__(self):
        self.campaigns: List[Campaign] = []
        self.products: Dict[str, List[str]] = {}
        self.dependencies: Dict[str, CampaignDependency] = {}
        self.calls: List[tuple] = []
        self.errors: Dict[str, Exception] = {}
        self.delays: Dict[str, float] = {}

    async def _enter(self, method: str, *args):
        self.calls.append((method, *args))
        delay = self.delays.get(method)
        if delay:
            await asyncio.sleep(delay)
        error = self.errors.get(method)
        if error:
            raise error

    async def initialize(self):
        pass

    async def close(self):
        pass

    async def health_check(self) -> bool:
        return True

    async def fetch_campaigns(
        self, statuses: Sequence[CampaignStatus], order_by: str = "start_date"
    ) -> List[Campaign]:
        await self._enter("fetch_campaigns", tuple(statuses), order_by)
        wanted = set(statuses)
        return sorted(
            (c for c in self.campaigns if c.status in wanted),
            key=lambda c: getattr(c, order_by),
        )

    async def fetch_campaign_product_associations(
        self, campaign_ids: Sequence[str]
    ) -> Dict[str, List[str]]:
        await self._enter("fetch_campaign_product_associations", tuple(campaign_ids))
        return {cid: list(self.products[cid]) for cid in campaign_ids if cid in self.products}

    async def fetch_dependency(self, campaign_id: str) -> Optional[CampaignDependency]:
        await self._enter("fetch_dependency", campaign_id)
        return self.dependencies.get(campaign_id)

    async def upsert_dependency(self, record: CampaignDependency) -> bool:
        await self._enter("upsert_dependency", record.campaign_id)
        self.dependencies[record.campaign_id] = record
        return True

    # Test helpers

    def add_campaigns(self, *campaigns: Campaign):
        self.campaigns.extend(campaigns)

    def set_products(self, campaign_id: str, product_ids: List[str]):
        self.products[campaign_id] = list(product_ids)

    def set_error(self, method: str, error: Exception):
        self.errors[method] = error

    def set_delay(self, method: str, seconds: float):
        self.delays[method] = seconds

    def call_count(self, method: str) -> int:
        return len([c for c in self.calls if c[0] == method])


# ====================
# Mock Monitor
# ====================


class MockValidationMonitor:
    """Records every monitoring call for assertions"""

    def __init__(self):
        self.validation_errors: List[dict] = []
        self.successes: List[dict] = []
        self.data_quality_issues: List[dict] = []

    async def record_validation_error(self, context: str, error_message: str, error_code: str):
        self.validation_errors.append(
            {"context": context, "error_message": error_message, "error_code": error_code}
        )

    async def record_pattern_success(self, service: str, pattern: str, operation: str):
        self.successes.append({"service": service, "pattern": pattern, "operation": operation})

    async def record_data_quality_issue(
        self, issue_type, description, severity, entity, entity_id=None
    ):
        self.data_quality_issues.append({
            "issue_type": issue_type,
            "description": description,
            "severity": severity,
            "entity": entity,
            "entity_id": entity_id,
        })

    def get_metrics(self) -> MonitorMetrics:
        return MonitorMetrics(
            validation_errors=len(self.validation_errors),
            data_quality_issues=len(self.data_quality_issues),
            successes=len(self.successes),
        )

    @property
    def error_codes(self) -> List[str]:
        return [e["error_code"] for e in self.validation_errors]


# ====================
# Fixtures
# ====================


@pytest.fixture
def factory():
    """Provide test data factory"""
    return ConflictTestDataFactory()


@pytest.fixture
def store():
    """Provide in-memory campaign store"""
    return MockCampaignStore()


@pytest.fixture
def monitor():
    """Provide recording monitor"""
    return MockValidationMonitor()


@pytest.fixture
def config():
    """Default thresholds with a short store timeout"""
    return ConflictConfig(store_timeout_seconds=0.5)
