import pytest

from budget_dashboard.config import settings
from tests.fakes import FakeStore


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def store_configured(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://abcd1234.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "service-role-key")


@pytest.fixture
def store_unconfigured(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", None)
