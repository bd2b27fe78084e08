"""Individual OS queries feeding the snapshot.

Each probe is a small function over psutil (or the stdlib where psutil has
no equivalent) so the snapshot builder can guard them one by one.
"""

from __future__ import annotations

import ipaddress
import os
import socket
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

import psutil

_MB = 1024 * 1024


class PrimaryInterface(NamedTuple):
    iface: str
    ip: str


FALLBACK_INTERFACE = PrimaryInterface(iface="unknown", ip="0.0.0.0")


class MemoryUsage(NamedTuple):
    total: int
    free: int


# ── rounding ────────────────────────────────────────


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` half away from zero on its exact binary value.

    ``round()`` rounds half to even; status consumers expect ``6.25 -> 6.3``.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def mem_used_pct(total: int, free: int) -> float | None:
    """Percentage of memory in use, one decimal place, clamped to [0, 100]."""
    if total <= 0:
        return None
    pct = round_half_up((total - free) / total * 100, 1)
    return min(100.0, max(0.0, pct))


def to_mb(value: int) -> int:
    return int(round_half_up(value / _MB))


# ── probes ──────────────────────────────────────────


def _is_external_ipv4(address: str) -> bool:
    try:
        return not ipaddress.IPv4Address(address).is_loopback
    except ValueError:
        return False


def primary_interface() -> PrimaryInterface:
    """First non-loopback IPv4 address across all interfaces, in OS order."""
    for name, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            if addr.family == socket.AF_INET and _is_external_ipv4(addr.address):
                return PrimaryInterface(iface=name, ip=addr.address)
    return FALLBACK_INTERFACE


def load_average() -> tuple[float, float, float]:
    load1, load5, load15 = psutil.getloadavg()
    return float(load1), float(load5), float(load15)


def memory() -> MemoryUsage:
    vm = psutil.virtual_memory()
    return MemoryUsage(total=int(vm.total), free=int(vm.available))


def cpu_count() -> int | None:
    return psutil.cpu_count(logical=True)


def boot_uptime() -> int:
    return max(0, int(time.time() - psutil.boot_time()))


def process_uptime() -> int:
    created = psutil.Process(os.getpid()).create_time()
    return max(0, int(round_half_up(time.time() - created)))


def hostname() -> str:
    return socket.gethostname()
