# src/novadefense/core/rules/impacts.py
from __future__ import annotations

import logging

from ..config import DEFAULT_CONFIG, GameConfig
from ..geometry import Point, distance
from ..model.entities import Explosion


logger = logging.getLogger(__name__)


def spawn_explosion(state, pos: Point, max_radius: float) -> Explosion:
    explosion = Explosion(id=state.new_id(), pos=pos, max_radius=float(max_radius))
    state.explosions.append(explosion)
    return explosion


def damage_installations(state, x: float, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Deactivate every installation whose x lies within the damage radius. Returns the count."""
    hit = 0
    for inst in (*state.cities, *state.turrets):
        if inst.active and abs(inst.x - x) < config.damage_radius:
            inst.active = False
            hit += 1
    return hit


def resolve_rocket_impacts(state, config: GameConfig = DEFAULT_CONFIG) -> int:
    impacts = 0
    for rocket in state.rockets:
        if rocket.dead or rocket.current.y < rocket.target.y:
            continue
        rocket.dead = True
        impacts += 1
        spawn_explosion(state, rocket.current, config.rocket_blast_radius)
        lost = damage_installations(state, rocket.current.x, config)
        if lost:
            logger.debug("rocket %s hit ground at x=%.1f, %s installation(s) lost", rocket.id, rocket.current.x, lost)
    if impacts:
        state.rockets = [r for r in state.rockets if not r.dead]
    return impacts


def resolve_missile_impacts(state, config: GameConfig = DEFAULT_CONFIG) -> int:
    impacts = 0
    for missile in state.missiles:
        if missile.dead:
            continue
        # arrival is float-approximate: within one step of the target counts
        if distance(missile.current, missile.target) < missile.speed:
            missile.dead = True
            impacts += 1
            spawn_explosion(state, missile.target, config.missile_blast_radius)
    if impacts:
        state.missiles = [m for m in state.missiles if not m.dead]
    return impacts
