"""
Shared pytest fixtures and configuration for the LinkVault backend test suite.

This module provides:
- Hypothesis configuration for property-based testing
- In-memory repository and blob store fixtures
- A content service wired to those fixtures
"""

import os
from datetime import timedelta

import pytest

# Hypothesis configuration
from hypothesis import settings, HealthCheck, Phase

# Cheap bcrypt for tests
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from linkvault.application.content_service import ContentService
from linkvault.config.content_config import ContentConfig
from linkvault.domain.content.entities import utc_now
from tests.fixtures.mock_repositories import (
    InMemoryContentRepository,
    MockBlobStorage,
    make_blob_store,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def content_config(tmp_path) -> ContentConfig:
    """ContentConfig pointing uploads at a temporary directory."""
    config = ContentConfig()
    config.default_expiry_minutes = 10
    config.max_expiry_minutes = 7 * 24 * 60
    config.max_upload_bytes = 1024 * 1024
    config.upload_dir = str(tmp_path / "uploads")
    config.bcrypt_rounds = 4
    config.frontend_url = "http://frontend.test"
    config.owner_header = "X-User-Id"
    return config


# =============================================================================
# Repository and Storage Fixtures
# =============================================================================

@pytest.fixture
def content_repository() -> InMemoryContentRepository:
    """In-memory content repository with atomic counter updates."""
    return InMemoryContentRepository()


@pytest.fixture
def local_storage() -> MockBlobStorage:
    return MockBlobStorage()


@pytest.fixture
def blob_store(local_storage):
    """Fallback blob store with only the in-memory local backend."""
    return make_blob_store(local_storage)


@pytest.fixture
def content_service(content_repository, blob_store, content_config) -> ContentService:
    return ContentService(content_repository, blob_store, content_config)


# =============================================================================
# Time-related Fixtures
# =============================================================================

@pytest.fixture
def now():
    """Current UTC time."""
    return utc_now()


@pytest.fixture
def past(now):
    """A UTC time two hours ago."""
    return now - timedelta(hours=2)


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "contract: Contract tests (verify interface compliance)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
