from __future__ import annotations

from pathlib import Path

from agent_core.models import PersistResult, Snapshot


def persist(snapshot: Snapshot, path: str | Path) -> PersistResult:
    """Overwrite ``path`` with the pretty-printed snapshot.

    Parent directories are created as needed. Never raises: a failed write
    comes back as ``PersistResult(ok=False)`` carrying the error message, and
    the caller decides how loudly to report it.
    """
    target = Path(path)
    try:
        body = snapshot.to_json(pretty=True).encode("utf-8")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(body)
    except (OSError, ValueError) as exc:
        return PersistResult(ok=False, path=str(target), error=str(exc) or type(exc).__name__)
    return PersistResult(ok=True, path=str(target), bytes_written=len(body))
