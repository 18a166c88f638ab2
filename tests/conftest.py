"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from process_killer import settings as settings_module
from process_killer.config import runtime


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch):
    """Keep developer .env files and PROCESS_KILLER_* variables out of tests."""
    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", ())
    monkeypatch.setattr(runtime, "_DEFAULT_VALUES", None)
    for name in (
        "PROCESS_KILLER_QUEUE_SIZE",
        "PROCESS_KILLER_MAX_CONCURRENT_KILLS",
        "PROCESS_KILLER_EXIT_TIMEOUT_SECONDS",
        "PROCESS_KILLER_SIGNAL",
        "PROCESS_KILLER_EXCLUDE_PIDS",
        "PROCESS_KILLER_EXCLUDE_PATTERN",
        "PROCESS_KILLER_EXCLUDE_PARENT",
        "PROCESS_KILLER_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    settings_module.get_killer_settings.cache_clear()
    yield
    settings_module.get_killer_settings.cache_clear()


@pytest.fixture
def console_lines():
    """Collects lines the terminator would print."""
    return []
