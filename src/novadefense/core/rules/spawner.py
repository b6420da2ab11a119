# src/novadefense/core/rules/spawner.py
from __future__ import annotations

import logging
import random

from ..config import DEFAULT_CONFIG, GameConfig
from ..geometry import Point
from ..model.entities import Rocket


logger = logging.getLogger(__name__)


def spawn_interval_ms(score: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """2000 ms at score 0, 200 ms shorter per 100 points, never below 500 ms."""
    interval = config.base_interval_ms - (score / config.interval_score_step) * config.interval_step_ms
    return max(config.min_interval_ms, interval)


def rocket_speed(score: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    return (1.0 + score / config.rocket_speed_score_scale) * config.rocket_base_speed


def maybe_spawn_rocket(
    state,
    now_ms: float,
    rng: random.Random,
    config: GameConfig = DEFAULT_CONFIG,
) -> Rocket | None:
    """
    Time-gated rocket generator.

    Targets are drawn uniformly from every active installation, cities and
    turrets pooled together. The spawn time is recorded even when nothing is
    left to target, so spawning silently stops once every installation is gone.
    """
    if now_ms - state.last_spawn_ms <= spawn_interval_ms(state.score, config):
        return None

    rocket = None
    targets = state.active_installations()
    if targets:
        start_x = rng.random() * state.width
        target = targets[rng.randrange(len(targets))]
        start = Point(start_x, 0.0)
        rocket = Rocket(
            id=state.new_id(),
            start=start,
            current=start,
            target=Point(float(target.x), state.ground_y),
            speed=rocket_speed(state.score, config),
        )
        state.rockets.append(rocket)
        state.rockets_spawned += 1
        logger.debug("rocket %s spawned x=%.1f -> installation %s", rocket.id, start_x, target.id)

    state.last_spawn_ms = now_ms
    return rocket
