"""
NATS Client for Python Microservices

Provides event-driven communication over NATS using the native
nats-py client. Services publish Event envelopes; subjects are the
event type strings (e.g. "campaign_conflict.validation.failed").
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

import nats
from nats.aio.client import Client as NATS

from core.config.infra_config import InfraConfig

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles Decimal, datetime and Enum types"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class Event:
    """Event envelope"""

    def __init__(
        self,
        event_type: str,
        source: str,
        data: Dict[str, Any],
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type
        self.source = source
        self.data = data
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "timestamp": self.timestamp,
            "data": self.data,
            "metadata": self.metadata,
            "version": self.version,
        }

class NATSEventBus:
    """NATS event bus using the native async client"""

    def __init__(
        self,
        service_name: str,
        config: Optional[InfraConfig] = None,
    ):
        """
        Initialize NATS Event Bus.

        Args:
            service_name: Name of the service (used as the connection name)
            config: Optional infrastructure config (defaults to environment)
        """
        config = config or InfraConfig.from_env()

        self.service_name = service_name
        self.servers = config.nats_servers
        self._client: Optional[NATS] = None

        logger.info(f"NATS EventBus initialized: {self.servers}")

    async def connect(self):
        """Connect to NATS"""
        try:
            self._client = await nats.connect(
                servers=[self.servers],
                name=self.service_name,
                connect_timeout=5,
                max_reconnect_attempts=3,
            )
            logger.info(f"Connected to NATS as {self.service_name}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise

    async def publish_event(self, event: Event) -> bool:
        """
        Publish an event to NATS.

        The subject is the event type; the payload is the JSON envelope.
        """
        if not self.is_connected:
            logger.error("Not connected to NATS")
            return False

        try:
            payload = json.dumps(event.to_dict(), cls=DecimalEncoder).encode()
            await self._client.publish(event.type, payload)
            logger.debug(f"Published event {event.type} [{event.id}]")
            return True
        except Exception as e:
            logger.error(f"Error publishing event {event.id}: {e}")
            return False

    async def close(self):
        """Drain and close NATS connection"""
        if self._client:
            try:
                await self._client.drain()
            except Exception as e:
                logger.warning(f"NATS drain failed, closing: {e}")
                await self._client.close()
            self._client = None

        logger.info("Disconnected from NATS")

    @property
    def is_connected(self) -> bool:
        """Check if connected to NATS"""
        return self._client is not None and self._client.is_connected


def create_event(
    event_type: str,
    source: str,
    data: Dict[str, Any],
    metadata: Optional[Dict[str, str]] = None,
) -> Event:
    """Create an Event instance"""
    return Event(
        event_type=event_type,
        source=source,
        data=data,
        metadata=metadata,
    )
