"""
Test configuration for the loyalty ledger.
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def member():
    from tests.factories import MemberFactory
    return MemberFactory()


@pytest.fixture
def admin_member():
    from tests.factories import MemberFactory
    return MemberFactory(is_staff=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def member_client(member):
    client = APIClient()
    client.force_authenticate(user=member)
    return client


@pytest.fixture
def admin_client(admin_member):
    client = APIClient()
    client.force_authenticate(user=admin_member)
    return client
