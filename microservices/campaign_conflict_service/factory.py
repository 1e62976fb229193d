"""
Campaign Conflict Service Factory

Factory for creating conflict engine instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import get_settings
from core.config.service_config import ServiceConfig
from core.logger import setup_service_logger
from core.nats_client import NATSEventBus

from .campaign_repository import CampaignRepository
from .conflict_validator import CampaignConflictValidator
from .dependency_validator import CampaignDependencyValidator
from .events.publishers import ConflictEventPublisher
from .monitoring import ValidationMonitor

logger = logging.getLogger(__name__)


class CampaignConflictServiceFactory:
    """Factory for creating campaign conflict service components"""

    def __init__(self, settings: Optional[ServiceConfig] = None):
        self.settings = settings or get_settings()
        self._repository: Optional[CampaignRepository] = None
        self._nats_client: Optional[NATSEventBus] = None
        self._event_publisher: Optional[ConflictEventPublisher] = None
        self._monitor: Optional[ValidationMonitor] = None
        self._conflict_validator: Optional[CampaignConflictValidator] = None
        self._dependency_validator: Optional[CampaignDependencyValidator] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        setup_service_logger(self.settings.service_name, config=self.settings.logging)
        logger.info("Initializing Campaign Conflict Service components...")

        # Initialize repository
        self._repository = CampaignRepository(config=self.settings.infrastructure)
        await self._repository.initialize()

        # Initialize NATS client; monitoring falls back to log-only without it
        if self.settings.infrastructure.nats_enabled:
            try:
                self._nats_client = NATSEventBus(
                    service_name=self.settings.service_name,
                    config=self.settings.infrastructure,
                )
                await self._nats_client.connect()
                self._event_publisher = ConflictEventPublisher(self._nats_client)
                logger.info("NATS client connected")
            except Exception as e:
                logger.warning(f"NATS client initialization failed: {e}")
                self._nats_client = None
                self._event_publisher = None

        self._monitor = ValidationMonitor(publisher=self._event_publisher)

        # Initialize validators
        self._conflict_validator = CampaignConflictValidator(
            store=self._repository,
            monitor=self._monitor,
            config=self.settings.conflict,
        )
        self._dependency_validator = CampaignDependencyValidator(
            store=self._repository,
            monitor=self._monitor,
            config=self.settings.conflict,
        )

        logger.info("Campaign Conflict Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Campaign Conflict Service components...")

        if self._nats_client:
            await self._nats_client.close()

        if self._repository:
            await self._repository.close()

        logger.info("Campaign Conflict Service components closed")

    @property
    def repository(self) -> CampaignRepository:
        """Get campaign repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def monitor(self) -> ValidationMonitor:
        """Get validation monitor"""
        if not self._monitor:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._monitor

    @property
    def conflict_validator(self) -> CampaignConflictValidator:
        """Get validation aggregator"""
        if not self._conflict_validator:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._conflict_validator

    @property
    def dependency_validator(self) -> CampaignDependencyValidator:
        """Get dependency chain validator"""
        if not self._dependency_validator:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._dependency_validator

    @property
    def nats_client(self) -> Optional[NATSEventBus]:
        """Get NATS client"""
        return self._nats_client

    @property
    def event_publisher(self) -> Optional[ConflictEventPublisher]:
        """Get event publisher"""
        return self._event_publisher


# Global factory instance
_factory: Optional[CampaignConflictServiceFactory] = None


async def get_factory() -> CampaignConflictServiceFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = CampaignConflictServiceFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "CampaignConflictServiceFactory",
    "get_factory",
    "close_factory",
]
