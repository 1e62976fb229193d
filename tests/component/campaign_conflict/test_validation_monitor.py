"""
Component Tests for ValidationMonitor and ConflictEventPublisher

Monitoring records are counted, logged and published as events.
"""

import logging

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.campaign_conflict_service.conflict_validator import CampaignConflictValidator
from microservices.campaign_conflict_service.events.models import ConflictEventType
from microservices.campaign_conflict_service.events.publishers import ConflictEventPublisher
from microservices.campaign_conflict_service.monitoring import LOG_PREFIX, ValidationMonitor
from microservices.campaign_conflict_service.protocols import CampaignFetchError


@pytest.fixture
def publisher(mock_event_bus):
    return ConflictEventPublisher(mock_event_bus)


@pytest.fixture
def validation_monitor(publisher):
    return ValidationMonitor(publisher=publisher)


class TestValidationMonitor:

    @pytest.mark.asyncio
    async def test_validation_error_is_counted_and_published(
        self, validation_monitor, mock_event_bus
    ):
        await validation_monitor.record_validation_error(
            context="CampaignConflictValidator.validate_new_campaign",
            error_message="connection refused",
            error_code="FETCH_CAMPAIGNS_FAILED",
        )

        assert validation_monitor.get_metrics().validation_errors == 1
        event = mock_event_bus.assert_event_published(
            ConflictEventType.VALIDATION_FAILED.value,
            {"error_code": "FETCH_CAMPAIGNS_FAILED"},
        )
        assert event["source"] == "campaign_conflict_service"
        assert event["data"]["context"] == "CampaignConflictValidator.validate_new_campaign"

    @pytest.mark.asyncio
    async def test_pattern_success_is_published(self, validation_monitor, mock_event_bus):
        await validation_monitor.record_pattern_success(
            service="CampaignDependencyValidator",
            pattern="set_dependencies",
            operation="set_campaign_dependencies",
        )

        metrics = validation_monitor.get_metrics()
        assert metrics.successes == 1
        assert metrics.validation_errors == 0
        mock_event_bus.assert_event_published(
            ConflictEventType.PATTERN_SUCCEEDED.value, {"pattern": "set_dependencies"}
        )

    @pytest.mark.asyncio
    async def test_data_quality_issue_logged_by_severity(self, validation_monitor, caplog):
        with caplog.at_level(logging.INFO):
            await validation_monitor.record_data_quality_issue(
                issue_type="invalid_format",
                description="end_date precedes start_date",
                severity="medium",
                entity="campaign",
                entity_id="cmp_1",
            )

        records = [r for r in caplog.records if LOG_PREFIX in r.getMessage()]
        assert records[-1].levelno == logging.WARNING
        assert "cmp_1" in records[-1].getMessage()
        assert validation_monitor.get_metrics().data_quality_issues == 1

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_raise(self, validation_monitor, mock_event_bus):
        mock_event_bus.set_error(RuntimeError("nats down"))

        await validation_monitor.record_validation_error("ctx", "boom", "VALIDATION_FAILED")

        assert validation_monitor.get_metrics().validation_errors == 1

    @pytest.mark.asyncio
    async def test_works_without_publisher(self):
        monitor = ValidationMonitor()

        await monitor.record_pattern_success("svc", "pattern", "op")

        assert monitor.get_metrics().successes == 1

    @pytest.mark.asyncio
    async def test_metrics_snapshot_and_reset(self, validation_monitor):
        await validation_monitor.record_validation_error("ctx", "boom", "VALIDATION_FAILED")
        snapshot = validation_monitor.get_metrics()

        validation_monitor.reset_metrics()

        assert snapshot.validation_errors == 1
        assert validation_monitor.get_metrics().validation_errors == 0


class TestConflictEventPublisher:

    @pytest.mark.asyncio
    async def test_publish_without_bus_returns_false(self):
        publisher = ConflictEventPublisher()

        assert await publisher.publish_pattern_succeeded("svc", "p", "op") is False

    @pytest.mark.asyncio
    async def test_rejected_publish_returns_false(self, publisher, mock_event_bus):
        mock_event_bus.reject_publishes()

        assert await publisher.publish_validation_failed("ctx", "msg", "CODE") is False

    @pytest.mark.asyncio
    async def test_payload_is_json_ready(self, publisher, mock_event_bus):
        assert await publisher.publish_data_quality_issue(
            issue_type="inconsistent_data",
            description="a both depends on and excludes b",
            severity="high",
            affected_entity="campaign_dependency",
            entity_id="a",
        ) is True

        data = mock_event_bus.get_last_event()["data"]
        assert data["affected_entity"] == "campaign_dependency"
        assert isinstance(data["timestamp"], str)


class TestMonitoringThroughValidator:

    @pytest.mark.asyncio
    async def test_fetch_failure_publishes_two_failure_events(
        self, store, validation_monitor, mock_event_bus, factory, config
    ):
        # Given: a validator wired to the real monitor and a failing store
        store.set_error("fetch_campaigns", ConnectionError("refused"))
        validator = CampaignConflictValidator(store=store, monitor=validation_monitor, config=config)

        # When
        with pytest.raises(CampaignFetchError):
            await validator.validate_new_campaign(factory.make_candidate())

        # Then
        events = mock_event_bus.get_published(ConflictEventType.VALIDATION_FAILED.value)
        assert [e["data"]["error_code"] for e in events] == [
            "FETCH_CAMPAIGNS_FAILED",
            "VALIDATION_FAILED",
        ]
