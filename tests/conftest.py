"""
Shared fixtures: every test gets its own data directory
"""
import pytest
from fastapi.testclient import TestClient

from scanquest import state
from scanquest.config import Settings
from scanquest.core.credentials import CredentialStore
from scanquest.core.tenants import TenantRegistry
from scanquest.main import app


FAST_ROUNDS = 1000


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path / "data"),
        public_dir=str(tmp_path / "public"),
        password_rounds=FAST_ROUNDS,
    )


@pytest.fixture
def registry(tmp_path):
    return TenantRegistry(tmp_path / "data")


@pytest.fixture
def store(registry):
    return registry.resolve("acme")


@pytest.fixture
def credentials(tmp_path):
    return CredentialStore(tmp_path / "core.json", rounds=FAST_ROUNDS)


@pytest.fixture
def client(settings):
    state.configure(settings)
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def new_client(client):
    """Factory for extra clients (separate cookie jars) sharing one server state"""
    def make():
        return TestClient(app, follow_redirects=False)
    return make
