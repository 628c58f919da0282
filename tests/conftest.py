import pytest
from erold_mcp.core.client import EroldClient, RetryConfig

API_URL = "https://api.test/api/v1"
TENANT = "acme"
TENANT_URL = f"{API_URL}/tenants/{TENANT}"


@pytest.fixture
def erold_env(monkeypatch):
    monkeypatch.setenv("EROLD_API_KEY", "test-key")
    monkeypatch.setenv("EROLD_TENANT", TENANT)
    monkeypatch.setenv("EROLD_API_URL", API_URL)


@pytest.fixture
def client(erold_env):
    # zero backoff keeps retry tests instant
    return EroldClient(retry=RetryConfig(backoff_base_seconds=0))
