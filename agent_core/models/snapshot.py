from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AgentInfo(BaseModel):
    """Identity of this agent process."""

    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    version: str
    hostname: str
    iface: str
    ip: str
    pid: int
    uptime_s: int | None = None


class SystemInfo(BaseModel):
    """Host facts sampled at snapshot time.

    Numeric fields are ``None`` only when the underlying OS query failed.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    release: str
    arch: str
    cpus: int | None = None
    load1: float | None = None
    load5: float | None = None
    load15: float | None = None
    mem_total_mb: int | None = None
    mem_free_mb: int | None = None
    mem_used_pct: float | None = Field(default=None, ge=0.0, le=100.0)
    boot_uptime_s: int | None = None


class ControllerInfo(BaseModel):
    """Controller reference echoed from configuration."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None


class Snapshot(BaseModel):
    """Point-in-time record of host and process health."""

    model_config = ConfigDict(frozen=True)

    agent: AgentInfo
    system: SystemInfo
    controller: ControllerInfo = Field(default_factory=ControllerInfo)
    ts: str = Field(default_factory=utc_now_iso)

    def to_json(self, *, pretty: bool = False) -> str:
        """Serialize to JSON; ``pretty`` uses a 2-space indent."""
        return self.model_dump_json(indent=2 if pretty else None)
