# src/novadefense/core/rules/firing.py
from __future__ import annotations

import math

from ..config import DEFAULT_CONFIG, GameConfig
from ..geometry import Point
from ..model.entities import Missile


def select_turret(turrets, x: float) -> int | None:
    """
    Index of the active turret with ammo that is horizontally closest to x.

    Ties keep the first turret in list order.
    """
    best_idx = None
    best_dist = math.inf
    for idx, turret in enumerate(turrets):
        if not turret.active or turret.ammo <= 0:
            continue
        d = abs(turret.x - x)
        if d < best_dist:
            best_dist = d
            best_idx = idx
    return best_idx


def fire_missile(state, x: float, y: float, config: GameConfig = DEFAULT_CONFIG) -> Missile | None:
    idx = select_turret(state.turrets, x)
    if idx is None:
        return None
    turret = state.turrets[idx]
    turret.ammo -= 1
    start = Point(float(turret.x), state.ground_y - config.launch_offset)
    missile = Missile(
        id=state.new_id(),
        start=start,
        current=start,
        target=Point(float(x), float(y)),
        speed=config.missile_speed,
        turret_index=idx,
    )
    state.missiles.append(missile)
    state.missiles_fired += 1
    return missile
