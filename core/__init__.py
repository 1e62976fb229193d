#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure components for the campaign conflict service.

COMPONENTS:
    - config/: Dataclass configuration loaded from environment (.env aware)
    - logger.py: Service logger setup
    - postgres_client.py: asyncpg-backed PostgreSQL client
    - nats_client.py: NATS event bus for event-driven monitoring

USAGE:
    from core.config import get_settings
    from core.postgres_client import PostgresClient

    settings = get_settings()
    db = PostgresClient(settings.service_name, config=settings.infrastructure)
"""

__version__ = "2.1.0"
