# src/novadefense/core/rules/kinematics.py
from __future__ import annotations

from ..geometry import Point, velocity


def advance(projectile) -> None:
    """Move one tick along the fixed start->target axis; zero velocity if start == target."""
    vx, vy = velocity(projectile.start, projectile.target, projectile.speed)
    cur = projectile.current
    projectile.current = Point(cur.x + vx, cur.y + vy)


def step_projectiles(state) -> None:
    for rocket in state.rockets:
        advance(rocket)
    for missile in state.missiles:
        advance(missile)
