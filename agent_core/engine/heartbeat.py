from __future__ import annotations

import asyncio
import logging
from typing import Callable

from agent_core.collectors.snapshot import build_snapshot
from agent_core.config import Settings
from agent_core.models import PersistResult, Snapshot
from agent_core.sink.status_file import persist

logger = logging.getLogger(__name__)

Sink = Callable[[Snapshot, str], PersistResult]
Builder = Callable[[Settings], Snapshot]


def _fmt_load(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}"


class Heartbeat:
    """Periodic snapshot -> log line -> status file cycle.

    Fires once immediately on ``start()`` and then every
    ``settings.heartbeat_interval`` seconds, anchored to the start time so
    the schedule does not drift. A tick that overruns its slot delays the
    next one instead of overlapping it, and missed slots are not replayed.
    """

    name = "heartbeat"

    def __init__(
        self,
        settings: Settings,
        sink: Sink = persist,
        builder: Builder = build_snapshot,
    ) -> None:
        self._settings = settings
        self._sink = sink
        self._builder = builder
        self.interval = settings.heartbeat_interval
        self._running = False
        self._task: asyncio.Task | None = None
        self._ticks = 0
        self._last_result: PersistResult | None = None

    # ── lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("Heartbeat started (interval=%.3fs, status_file=%s)", self.interval, self._settings.status_file)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Heartbeat stopped after %d ticks", self._ticks)

    # ── cycle ───────────────────────────────────────────

    def tick(self) -> PersistResult:
        """Build one snapshot, log its summary and hand it to the sink."""
        snap = self._builder(self._settings)
        logger.info(
            "heartbeat name=%s ip=%s load1=%s mem_used=%s%%",
            snap.agent.name,
            snap.agent.ip,
            _fmt_load(snap.system.load1),
            snap.system.mem_used_pct,
        )

        result = self._sink(snap, self._settings.status_file)
        if not result.ok:
            logger.error("Failed to write status file: %s", result.error)

        self._ticks += 1
        self._last_result = result
        return result

    # ── internals ───────────────────────────────────────

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        slot = 0
        while self._running:
            try:
                self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Heartbeat tick failed")

            slot += 1
            now = loop.time()
            if started + slot * self.interval < now:
                # Overran: run the next tick now rather than catching up.
                slot = int((now - started) / self.interval)
            await asyncio.sleep(max(0.0, started + slot * self.interval - now))

    # ── introspection ───────────────────────────────────

    @property
    def running(self) -> bool:
        return self._running

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def last_result(self) -> PersistResult | None:
        return self._last_result
