"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import pytest


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/menu/items/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


def _client_for(user):
    from rest_framework.test import APIClient
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def waiter_client(waiter):
    """API client authenticated as the default waiter."""
    return _client_for(waiter)


@pytest.fixture
def chef_client(chef):
    """API client authenticated as the default chef."""
    return _client_for(chef)


@pytest.fixture
def manager_client(manager):
    """API client authenticated as a manager."""
    return _client_for(manager)


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "business_logic: mark test as business logic test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (API + DB)"
    )
    config.addinivalue_line(
        "markers", "concurrency: mark test as a multi-threaded contention test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow (>5 seconds)"
    )


# ============================================================================
# IMPORT ALL FIXTURES FROM core_backend/tests/fixtures.py
# ============================================================================
from core_backend.tests.fixtures import *
