"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/: Component tests (mocked store, database and event bus)
    - unit/     : Unit tests (pure functions, no I/O)
    - contracts/: Test data factories shared by every layer
"""
import os
import sys

import pytest

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

# Keep settings deterministic regardless of the developer's shell
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("NATS_ENABLED", "false")

from tests.contracts.campaign_conflict.data_contract import ConflictTestDataFactory


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure function tests")
    config.addinivalue_line("markers", "component: tests with mocked collaborators")


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def factory() -> ConflictTestDataFactory:
    """Provide test data factory"""
    return ConflictTestDataFactory()
