from __future__ import annotations

from .entities import City, Turret


def slot_positions(width: float, slot_count: int) -> list[float]:
    """Evenly spaced ground slots, leaving one slot width of margin on each side."""
    slot_width = width / (slot_count + 1)
    return [i * slot_width for i in range(1, slot_count + 1)]


def build_installations(width: float, config) -> tuple[list[City], list[Turret]]:
    """
    Default pattern (9 slots): T C C C T C C C T.

    Installation ids are the 1-based slot numbers; turret ammo is assigned
    left to right from config.turret_ammo.
    """
    turret_ammo = dict(zip(sorted(config.turret_slots), config.turret_ammo))
    cities: list[City] = []
    turrets: list[Turret] = []
    for slot, x in enumerate(slot_positions(width, config.slot_count), start=1):
        if slot in turret_ammo:
            ammo = int(turret_ammo[slot])
            turrets.append(Turret(id=slot, x=float(x), ammo=ammo, max_ammo=ammo))
        else:
            cities.append(City(id=slot, x=float(x)))
    return cities, turrets
