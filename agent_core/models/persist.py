from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PersistResult(BaseModel):
    """Outcome of writing a snapshot to the status file."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    path: str
    bytes_written: int = 0
    error: str | None = None
