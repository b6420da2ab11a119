from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Protocol

from novadefense.ai.actions import Action, FireAt, HoldFire, point_to_cell
from novadefense.ai.env import NovaDefenseEnv
from novadefense.core.geometry import Point, distance, velocity
from novadefense.core.rules.firing import select_turret


logger = logging.getLogger(__name__)


class Policy(Protocol):
    def reset(self, env: NovaDefenseEnv) -> None: ...

    def next_action(self, env: NovaDefenseEnv) -> Action | int: ...


@dataclass
class InterceptPlan:
    rocket_id: int
    aim: tuple[float, float]


def _lead_point(rocket, launch: Point, missile_speed: float, fuse_ticks: float) -> Point:
    """Where the rocket will be when a missile fired now has arrived and started to bloom."""
    vx, vy = velocity(rocket.start, rocket.target, rocket.speed)
    aim = rocket.current
    for _ in range(3):
        flight = distance(launch, aim) / missile_speed
        t = flight + fuse_ticks
        aim = Point(rocket.current.x + vx * t, min(rocket.current.y + vy * t, rocket.target.y))
    return aim


class InterceptPolicy:
    """
    Fires at the lowest rocket that no missile or blast is already covering.

    Aims at a lead point so the missile's explosion meets the rocket a few
    ticks into its growth.
    """

    def __init__(self, *, fuse_ticks: float = 12.0, cover_radius: float = 45.0, verbose: bool = False) -> None:
        self.fuse_ticks = fuse_ticks
        self.cover_radius = cover_radius
        self._verbose = verbose
        self._engaged: dict[int, InterceptPlan] = {}

    def reset(self, env: NovaDefenseEnv) -> None:
        self._engaged = {}

    def _covered(self, point: Point, state, missile_blast_radius: float) -> bool:
        for missile in state.missiles:
            if distance(missile.target, point) < self.cover_radius:
                return True
        for explosion in state.explosions:
            if explosion.max_radius >= missile_blast_radius and distance(explosion.pos, point) < explosion.radius:
                return True
        return False

    def next_action(self, env: NovaDefenseEnv) -> Action | int:
        if env.engine is None:
            raise RuntimeError("Environment not reset")
        state = env.engine.state
        cfg = env.engine.config
        live_ids = {r.id for r in state.rockets}
        self._engaged = {rid: plan for rid, plan in self._engaged.items() if rid in live_ids}

        spec = env.aim_spec
        for rocket in sorted(state.rockets, key=lambda r: -r.current.y):
            if rocket.id in self._engaged:
                continue
            idx = select_turret(state.turrets, rocket.current.x)
            if idx is None:
                return HoldFire()
            launch = Point(state.turrets[idx].x, state.ground_y - cfg.launch_offset)
            aim = _lead_point(rocket, launch, cfg.missile_speed, self.fuse_ticks)
            if aim.y > spec.bottom or self._covered(aim, state, cfg.missile_blast_radius):
                continue
            self._engaged[rocket.id] = InterceptPlan(rocket_id=rocket.id, aim=(aim.x, aim.y))
            if self._verbose:
                logger.info("engage rocket=%s aim=(%.0f,%.0f)", rocket.id, aim.x, aim.y)
            return FireAt(point_to_cell(spec, aim.x, aim.y))
        return HoldFire()


class RandomPolicy:
    def __init__(self, *, seed: int | None = None, fire_prob: float = 0.1) -> None:
        self._rng = random.Random(seed)
        self.fire_prob = fire_prob

    def reset(self, env: NovaDefenseEnv) -> None:
        return None

    def next_action(self, env: NovaDefenseEnv) -> Action | int:
        if self._rng.random() >= self.fire_prob:
            return HoldFire()
        return FireAt(self._rng.randrange(env.aim_spec.cell_count))


class IdlePolicy:
    def reset(self, env: NovaDefenseEnv) -> None:
        return None

    def next_action(self, env: NovaDefenseEnv) -> Action | int:
        return HoldFire()


POLICY_NAMES = ("intercept", "random", "idle")


def make_policy(name: str, *, seed: int | None = None, verbose: bool = False) -> Policy:
    if name == "intercept":
        return InterceptPolicy(verbose=verbose)
    if name == "random":
        return RandomPolicy(seed=seed)
    if name == "idle":
        return IdlePolicy()
    raise ValueError(f"Unknown policy {name!r}")
