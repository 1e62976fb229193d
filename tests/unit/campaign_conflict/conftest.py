"""
Unit Test Fixtures for Campaign Conflict Service

Uses ConflictTestDataFactory from the data contract.
"""

import pytest

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.conflict_config import ConflictConfig
from tests.contracts.campaign_conflict.data_contract import ConflictTestDataFactory


@pytest.fixture
def factory():
    """Provide test data factory"""
    return ConflictTestDataFactory()


@pytest.fixture
def config():
    """Default conflict thresholds"""
    return ConflictConfig()
