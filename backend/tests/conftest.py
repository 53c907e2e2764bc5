"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from filestore.config import AppConfig
from filestore.files.service import FileStorageService
from filestore.main import create_app


@pytest.fixture
def storage_root(tmp_path):
    """Storage root that does not exist yet; Save must create it."""
    return tmp_path / "storage"


@pytest.fixture
def app_config(storage_root):
    return AppConfig(storage_dir=str(storage_root))


@pytest.fixture
def storage_service(app_config):
    return FileStorageService(app_config.storage_config())


@pytest.fixture
def api_client(app_config):
    """Provide a TestClient for an app rooted at ``storage_root``."""
    with TestClient(create_app(app_config)) as client:
        yield client
