"""
Test configuration and fixtures for the shortlink service.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink_app.config import Settings
from shortlink_app.services.alias_store import AliasStore
from shortlink_app.services.link_service import LinkService


@pytest.fixture(scope="function")
def data_path(tmp_path):
    """
    Link data file inside a directory that does not exist yet.
    Loading from it exercises the create-on-first-load path.
    """
    return tmp_path / "data" / "links.json"


@pytest.fixture(scope="function")
def store():
    """Empty in-memory alias store"""
    return AliasStore()


@pytest.fixture(scope="function")
def make_service(data_path):
    """
    Factory for a LinkService backed by the test data file.

    Must be called inside the event loop that will use it
    (the reader-writer lock belongs to one loop).
    """
    def _make() -> LinkService:
        return LinkService.load(data_path)
    return _make


@pytest.fixture(scope="function")
def app_settings(data_path):
    """Settings for an isolated app instance"""
    return Settings(
        link_data_path=str(data_path),
        queue_backend="memory",
        merge_interval_ms=20,
        key_blacklist="admin static",
        base_url="http://testserver",
    )


@pytest.fixture(scope="function")
def client(app_settings):
    """
    Create a test client for a fresh app.
    Entering the client runs the lifespan (store load + merge worker).
    """
    app = create_app(app_settings)

    with TestClient(app) as test_client:
        yield test_client
