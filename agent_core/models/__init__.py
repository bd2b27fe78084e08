from .snapshot import AgentInfo, ControllerInfo, Snapshot, SystemInfo, utc_now_iso
from .persist import PersistResult

__all__ = [
    "AgentInfo",
    "ControllerInfo",
    "Snapshot",
    "SystemInfo",
    "utc_now_iso",
    "PersistResult",
]
