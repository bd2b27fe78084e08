from __future__ import annotations

import logging
import os
import platform
import sys
from typing import Callable, TypeVar

from agent_core.collectors import host
from agent_core.config import AGENT_VERSION, Settings
from agent_core.models.snapshot import AgentInfo, ControllerInfo, Snapshot, SystemInfo, utc_now_iso

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NO_LOAD: tuple[float | None, float | None, float | None] = (None, None, None)


def _probe(name: str, fn: Callable[[], T], fallback: T) -> T:
    """Run one OS query; on failure log it and return ``fallback``."""
    try:
        return fn()
    except Exception:
        logger.warning("Probe [%s] failed", name, exc_info=True)
        return fallback


def build_snapshot(settings: Settings) -> Snapshot:
    """Sample host, process and network facts into a fresh ``Snapshot``.

    OS query failures never propagate: each one is replaced by a sentinel
    (``None`` for numbers, ``"unknown"`` for names, the fallback interface
    for network identity).
    """
    primary = _probe("primary_interface", host.primary_interface, host.FALLBACK_INTERFACE)
    load1, load5, load15 = _probe("load_average", host.load_average, _NO_LOAD)
    mem = _probe("memory", host.memory, None)

    if mem is not None:
        mem_total_mb = host.to_mb(mem.total)
        mem_free_mb = host.to_mb(mem.free)
        used_pct = host.mem_used_pct(mem.total, mem.free)
    else:
        mem_total_mb = mem_free_mb = None
        used_pct = None

    return Snapshot(
        agent=AgentInfo(
            name=settings.agent_name,
            role=settings.agent_role,
            version=AGENT_VERSION,
            hostname=_probe("hostname", host.hostname, "unknown"),
            iface=primary.iface,
            ip=primary.ip,
            pid=os.getpid(),
            uptime_s=_probe("process_uptime", host.process_uptime, None),
        ),
        system=SystemInfo(
            platform=sys.platform,
            release=platform.release(),
            arch=platform.machine(),
            cpus=_probe("cpu_count", host.cpu_count, None),
            load1=load1,
            load5=load5,
            load15=load15,
            mem_total_mb=mem_total_mb,
            mem_free_mb=mem_free_mb,
            mem_used_pct=used_pct,
            boot_uptime_s=_probe("boot_uptime", host.boot_uptime, None),
        ),
        controller=ControllerInfo(url=settings.controller_url),
        ts=utc_now_iso(),
    )
