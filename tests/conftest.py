"""Shared test fixtures."""

from __future__ import annotations

import importlib

import pytest
import structlog

_LOGGING_MODULES = ("luach.cli", "luach.hebcal", "luach.location", "luach.reminders", "luach.zmanim")


@pytest.fixture(autouse=True)
def isolate_structlog(monkeypatch: pytest.MonkeyPatch):
    # setup_logging binds sys.stderr as it is at call time (a per-test capture
    # stream) and caches loggers on first use; keep that from leaking across tests
    for name in _LOGGING_MODULES:
        module = importlib.import_module(name)
        monkeypatch.setattr(module, "log", structlog.get_logger(name))
    yield
    structlog.reset_defaults()
