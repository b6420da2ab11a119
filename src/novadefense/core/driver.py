# src/novadefense/core/driver.py
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from .engine import Engine


logger = logging.getLogger(__name__)


def _perf_ms() -> float:
    return time.perf_counter() * 1000.0


class FrameDriver:
    """
    Per-frame scheduling loop around an Engine.

    `clock` is anything with pyglet.clock's schedule_interval/unschedule
    (pyglet.clock itself by default). Only one frame callback is ever
    scheduled: start/restart/stop always unschedule the pending one first,
    so a stale callback can never tick a replaced world.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock=None,
        time_source: Callable[[], float] | None = None,
        surface_ready: Callable[[], bool] | None = None,
        on_frame: Callable[[dict[str, Any]], None] | None = None,
        interval: float = 1.0 / 60.0,
    ) -> None:
        if clock is None:
            import pyglet

            clock = pyglet.clock
        self.engine = engine
        self.clock = clock
        self.time_source = time_source or _perf_ms
        self.surface_ready = surface_ready
        self.on_frame = on_frame
        self.interval = float(interval)
        self.scheduled = False
        self.frames = 0
        self.skipped_frames = 0

    def start(self) -> None:
        self._cancel()
        self.engine.start(self.time_source())
        self._schedule()

    def restart(self) -> None:
        self.start()

    def stop(self) -> None:
        self._cancel()

    def _schedule(self) -> None:
        self.clock.schedule_interval(self._on_tick, self.interval)
        self.scheduled = True

    def _cancel(self) -> None:
        if self.scheduled:
            self.clock.unschedule(self._on_tick)
            self.scheduled = False

    def _on_tick(self, dt: float) -> None:
        if not self.engine.in_progress:
            self._cancel()
            return
        if self.surface_ready is not None and not self.surface_ready():
            # transient: keep the schedule so the match resumes with the surface
            self.skipped_frames += 1
            logger.debug("frame skipped, surface not ready")
            return

        status = self.engine.tick(self.time_source())
        self.frames += 1
        if self.on_frame is not None:
            self.on_frame(self.engine.observe())
        if status != "IN_PROGRESS":
            self._cancel()
