"""
Shared fixtures: configuration pointing at an in-memory SQLite store and a
Starlette TestClient running the full application, lifespan included.
"""

import logging
import socket

import pytest
from starlette.testclient import TestClient

from usersapi.config.properties import ConfigurationProperties
from usersapi.core.server import UsersASGIApp

MEMORY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of configuration lookups."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("USERS_API_PROFILE", raising=False)


@pytest.fixture
def restore_root_logging():
    """Restore root handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def config(tmp_path) -> ConfigurationProperties:
    """Configuration with defaults only and an in-memory database."""
    config = ConfigurationProperties(base_dir=str(tmp_path))
    config.set("database.url", MEMORY_DATABASE_URL)
    return config


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def app(config, fake_sleep) -> UsersASGIApp:
    return UsersASGIApp(config, sleep=fake_sleep)


@pytest.fixture
def client(app):
    """TestClient with startup (connect + schema) already run."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def free_port() -> int:
    """Find a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
