from __future__ import annotations

import os

import pytest

from ridelink.config import AppConfig, reset_config
from ridelink.container import reset_container


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from RL_* variables in the developer's shell."""
    for name in list(os.environ):
        if name.startswith("RL_"):
            monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()


@pytest.fixture
def config() -> AppConfig:
    """Configuration with fake credentials, no network endpoints used."""
    cfg = AppConfig()
    cfg.inference.api_key = "test-key"
    cfg.store.url = "https://store.test"
    cfg.store.anon_key = "anon-key"
    cfg.store.service_role_key = "service-key"
    cfg.places.api_key = "places-key"
    return cfg
