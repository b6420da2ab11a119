# src/novadefense/core/rules/explosions.py
from __future__ import annotations

from ..config import DEFAULT_CONFIG, GameConfig
from ..geometry import distance
from ..model.entities import Explosion


# Absorbs float drift from repeated shrink steps so radii that are exact
# multiples of the shrink rate finish on schedule.
_RADIUS_EPS = 1e-9


def animate(explosion: Explosion, config: GameConfig = DEFAULT_CONFIG) -> None:
    if explosion.growing:
        explosion.radius += config.growth_rate
        if explosion.radius >= explosion.max_radius:
            explosion.radius = explosion.max_radius
            explosion.growing = False
    else:
        explosion.radius -= config.shrink_rate
        if explosion.radius <= _RADIUS_EPS:
            explosion.radius = 0.0
            explosion.done = True


def step_explosions(state, config: GameConfig = DEFAULT_CONFIG) -> int:
    """
    Animate every explosion and destroy the rockets inside it.

    Chain explosions are collected during the pass and appended afterwards,
    so they start growing on the next tick. A rocket destroyed by one
    explosion is skipped by the others and scores once.
    Returns the number of rockets destroyed.
    """
    chained: list[Explosion] = []
    kills = 0
    for explosion in state.explosions:
        animate(explosion, config)
        if explosion.radius <= 0.0:
            continue
        for rocket in state.rockets:
            if rocket.dead:
                continue
            if distance(explosion.pos, rocket.current) < explosion.radius:
                rocket.dead = True
                kills += 1
                state.score += config.rocket_score
                chained.append(
                    Explosion(id=state.new_id(), pos=rocket.current, max_radius=config.rocket_blast_radius)
                )

    if kills:
        state.rockets = [r for r in state.rockets if not r.dead]
        state.rockets_destroyed += kills
    state.explosions = [e for e in state.explosions if not e.done]
    state.explosions.extend(chained)
    return kills


def lifetime_ticks(max_radius: float, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Number of ticks an explosion stays in the collection before it is purged."""
    grow = 0
    radius = 0.0
    while radius < max_radius:
        radius += config.growth_rate
        grow += 1
    shrink = 0
    radius = max_radius
    while radius > _RADIUS_EPS:
        radius -= config.shrink_rate
        shrink += 1
    return grow + shrink
