# src/novadefense/core/engine.py
from __future__ import annotations

import logging
import random
import threading
from typing import Any

from .config import DEFAULT_CONFIG, GameConfig
from .model.entities import Missile
from .model.layout import build_installations
from .model.state import MatchStatus, WorldState
from .rng import make_rng
from .rules.explosions import step_explosions
from .rules.firing import fire_missile
from .rules.impacts import resolve_missile_impacts, resolve_rocket_impacts
from .rules.kinematics import step_projectiles
from .rules.outcome import evaluate_outcome
from .rules.spawner import maybe_spawn_rocket


logger = logging.getLogger(__name__)


class Engine:
    """
    Owns one match: the world state and its status.

    No GUI dependency. Every public entry point takes the same lock, so a
    threaded host can call tick() and fire_at() from different threads
    without either observing a half-updated world.
    """
    FRAME_DT = 1.0 / 60.0
    FRAME_MS = 1000.0 / 60.0

    def __init__(
        self,
        width: float,
        height: float,
        *,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        _check_dimensions(width, height)
        self.config = config or DEFAULT_CONFIG
        self.rng = rng or make_rng()
        self._lock = threading.RLock()
        self._status: MatchStatus = "NOT_STARTED"
        self.state = self._new_world(float(width), float(height), populate=False)
        self.clock_ms = 0.0
        self._accum = 0.0

    @property
    def status(self) -> MatchStatus:
        return self._status

    @property
    def in_progress(self) -> bool:
        return self._status == "IN_PROGRESS"

    def _new_world(self, width: float, height: float, *, populate: bool) -> WorldState:
        state = WorldState(width=width, height=height, ground_offset=self.config.ground_offset)
        if populate:
            state.cities, state.turrets = build_installations(width, self.config)
        return state

    def start(self, now_ms: float | None = None) -> None:
        with self._lock:
            if now_ms is not None:
                self.clock_ms = float(now_ms)
            self.state = self._new_world(self.state.width, self.state.height, populate=True)
            self.state.last_spawn_ms = self.clock_ms
            self._accum = 0.0
            self._status = "IN_PROGRESS"
            logger.info(
                "match started size=%sx%s cities=%s turrets=%s",
                int(self.state.width),
                int(self.state.height),
                len(self.state.cities),
                len(self.state.turrets),
            )

    def restart(self, now_ms: float | None = None) -> None:
        self.start(now_ms)

    def reset(self) -> None:
        with self._lock:
            self.state = self._new_world(self.state.width, self.state.height, populate=False)
            self._status = "NOT_STARTED"
            self._accum = 0.0

    def resize(self, width: float, height: float) -> None:
        """Layout-only: installations keep their x, the ground plane follows the new height."""
        _check_dimensions(width, height)
        with self._lock:
            self.state.width = float(width)
            self.state.height = float(height)

    def tick(self, now_ms: float) -> MatchStatus:
        with self._lock:
            if self._status != "IN_PROGRESS":
                return self._status
            self.clock_ms = float(now_ms)
            s = self.state
            cfg = self.config

            maybe_spawn_rocket(s, now_ms, self.rng, cfg)
            step_projectiles(s)
            resolve_rocket_impacts(s, cfg)
            resolve_missile_impacts(s, cfg)
            step_explosions(s, cfg)
            s.tick += 1

            status = evaluate_outcome(s, cfg)
            if status != self._status:
                self._status = status
                logger.info(
                    "match over status=%s score=%s ticks=%s destroyed=%s fired=%s",
                    status,
                    s.score,
                    s.tick,
                    s.rockets_destroyed,
                    s.missiles_fired,
                )
            return self._status

    def step(self, dt_seconds: float) -> MatchStatus:
        """
        Fixed-step advance: one tick per whole 60 Hz frame contained in dt.
        """
        with self._lock:
            if self._status != "IN_PROGRESS":
                return self._status
            self._accum += max(0.0, dt_seconds)
            # tolerate float drift so step(FRAME_DT) is always exactly one frame
            while self._accum >= self.FRAME_DT - 1e-12:
                self._accum = max(0.0, self._accum - self.FRAME_DT)
                if self.tick(self.clock_ms + self.FRAME_MS) != "IN_PROGRESS":
                    break
            return self._status

    def fire_at(self, x: float, y: float) -> Missile | None:
        with self._lock:
            if self._status != "IN_PROGRESS":
                return None
            return fire_missile(self.state, x, y, self.config)

    def observe(self) -> dict[str, Any]:
        """
        Read-only snapshot for renderers and agents: plain values, no live entities.
        """
        with self._lock:
            s = self.state
            return {
                "status": self._status,
                "score": s.score,
                "tick": s.tick,
                "width": s.width,
                "height": s.height,
                "ground_y": s.ground_y,
                "win_score": self.config.win_score,
                "rockets": [
                    {
                        "id": r.id,
                        "start": (r.start.x, r.start.y),
                        "current": (r.current.x, r.current.y),
                        "target": (r.target.x, r.target.y),
                        "speed": r.speed,
                        "color": r.color,
                    }
                    for r in s.rockets
                ],
                "missiles": [
                    {
                        "id": m.id,
                        "start": (m.start.x, m.start.y),
                        "current": (m.current.x, m.current.y),
                        "target": (m.target.x, m.target.y),
                        "speed": m.speed,
                        "turret_index": m.turret_index,
                    }
                    for m in s.missiles
                ],
                "explosions": [
                    {
                        "id": e.id,
                        "pos": (e.pos.x, e.pos.y),
                        "radius": e.radius,
                        "max_radius": e.max_radius,
                        "growing": e.growing,
                    }
                    for e in s.explosions
                ],
                "cities": [{"id": c.id, "x": c.x, "active": c.active} for c in s.cities],
                "turrets": [
                    {"id": t.id, "x": t.x, "ammo": t.ammo, "max_ammo": t.max_ammo, "active": t.active}
                    for t in s.turrets
                ],
                "rockets_destroyed": s.rockets_destroyed,
                "missiles_fired": s.missiles_fired,
            }


def _check_dimensions(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"canvas dimensions must be positive, got {width}x{height}")
