from __future__ import annotations

import pytest

from agent_core.config import Settings

_AGENT_ENV = (
    "AGENT_NAME",
    "AGENT_ROLE",
    "HEARTBEAT_MS",
    "STATUS_FILE",
    "AGENT_HOST",
    "AGENT_PORT",
    "EXIT_ON_BIND_ERROR",
    "CONTROLLER_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the host environment from leaking into Settings()."""
    for name in _AGENT_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        agent_name="agent-test",
        agent_role="tester",
        heartbeat_ms=50,
        status_file=str(tmp_path / "agent" / "status.json"),
        agent_host="127.0.0.1",
        agent_port=0,
    )
