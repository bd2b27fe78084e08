from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

AGENT_VERSION = "1.0.0"


class Settings(BaseSettings):
    # --- identity ---
    agent_name: str = "agent-core-02"
    agent_role: str = "core"

    # --- heartbeat ---
    heartbeat_ms: int = Field(default=10_000, gt=0)  # milliseconds between ticks
    status_file: str = "/home/ops/agent/status.json"

    # --- server ---
    agent_host: str = "0.0.0.0"
    agent_port: int = Field(default=4002, ge=0, le=65535)  # 0 picks an ephemeral port
    exit_on_bind_error: bool = False

    # --- controller (echoed only) ---
    controller_url: str | None = None

    # --- logging ---
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_ignore_empty": True, "extra": "ignore", "frozen": True}

    @property
    def heartbeat_interval(self) -> float:
        """Heartbeat period in seconds."""
        return self.heartbeat_ms / 1000.0
