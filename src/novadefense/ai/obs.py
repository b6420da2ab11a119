from __future__ import annotations

from typing import Any

from novadefense.core.config import GameConfig
from novadefense.core.geometry import Point, velocity


MAX_ROCKETS = 8
ROCKET_FEATURES = ("exists", "x_norm", "y_norm", "vx_norm", "vy_norm")


def observation_size(config: GameConfig, max_rockets: int = MAX_ROCKETS) -> int:
    turrets = len(config.turret_slots)
    return 1 + 2 * turrets + config.city_count + max_rockets * len(ROCKET_FEATURES)


def _rocket_slot(rocket: dict[str, Any], width: float, height: float, speed_scale: float) -> list[float]:
    sx, sy = rocket["start"]
    tx, ty = rocket["target"]
    cx, cy = rocket["current"]
    vx, vy = velocity(Point(sx, sy), Point(tx, ty), float(rocket["speed"]))
    return [1.0, cx / width, cy / height, vx / speed_scale, vy / speed_scale]


def build_observation(observed: dict[str, Any], config: GameConfig, *, max_rockets: int = MAX_ROCKETS) -> dict[str, Any]:
    """
    Structured observation from Engine.observe().

    Rocket slots hold the lowest rockets first (closest to the ground).
    """
    width = float(observed.get("width") or 1.0)
    height = float(observed.get("height") or 1.0)
    speed_scale = max(config.missile_speed, 1e-6)

    turrets = observed.get("turrets", []) or []
    cities = observed.get("cities", []) or []
    turret_features: list[float] = []
    for turret in turrets:
        max_ammo = max(1, int(turret["max_ammo"]))
        turret_features.append(1.0 if turret["active"] else 0.0)
        turret_features.append(float(turret["ammo"]) / max_ammo)

    rockets = sorted(observed.get("rockets", []) or [], key=lambda r: -r["current"][1])
    rocket_slots = [_rocket_slot(r, width, height, speed_scale) for r in rockets[:max_rockets]]

    return {
        "score_norm": min(1.0, float(observed.get("score", 0)) / max(1, config.win_score)),
        "turrets": turret_features,
        "cities": [1.0 if c["active"] else 0.0 for c in cities],
        "rocket_slots": rocket_slots,
        "rocket_count": len(rockets),
    }


def flatten_observation(obs: dict[str, Any], config: GameConfig, *, max_rockets: int = MAX_ROCKETS) -> list[float]:
    turret_size = 2 * len(config.turret_slots)
    values: list[float] = [float(obs.get("score_norm", 0.0))]
    turrets = list(obs.get("turrets", []) or [])
    values.extend(turrets[:turret_size] + [0.0] * max(0, turret_size - len(turrets)))
    cities = list(obs.get("cities", []) or [])
    values.extend(cities[: config.city_count] + [0.0] * max(0, config.city_count - len(cities)))
    empty_slot = [0.0] * len(ROCKET_FEATURES)
    rocket_slots = obs.get("rocket_slots", []) or []
    for idx in range(max_rockets):
        slot = rocket_slots[idx] if idx < len(rocket_slots) else empty_slot
        values.extend(float(value) for value in slot)
    return values
