"""
Component Test Layer Configuration

Structure:
    tests/component/
    ├── campaign_conflict/   Conflict engine component tests
    └── mocks/               Mock implementations

Usage:
    pytest tests/component -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"
os.environ["NATS_ENABLED"] = "false"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tests.component.mocks import MockAsyncPostgresClient, MockEventBus


# =============================================================================
# Infrastructure Mocks
# =============================================================================

@pytest.fixture
def mock_db() -> MockAsyncPostgresClient:
    """Provide mock PostgreSQL client"""
    return MockAsyncPostgresClient()


@pytest.fixture
def mock_event_bus() -> MockEventBus:
    """Provide mock event bus"""
    return MockEventBus()
