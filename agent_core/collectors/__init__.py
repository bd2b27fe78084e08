from .host import FALLBACK_INTERFACE, PrimaryInterface, primary_interface
from .snapshot import build_snapshot

__all__ = [
    "FALLBACK_INTERFACE",
    "PrimaryInterface",
    "primary_interface",
    "build_snapshot",
]
