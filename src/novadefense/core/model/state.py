from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal

from .entities import City, Explosion, Missile, Rocket, Turret


MatchStatus = Literal["NOT_STARTED", "IN_PROGRESS", "WON", "LOST"]

GROUND_OFFSET = 20.0


@dataclass(slots=True)
class WorldState:
    width: float
    height: float
    ground_offset: float = GROUND_OFFSET

    score: int = 0
    next_id: int = 0
    last_spawn_ms: float = 0.0
    tick: int = 0

    rockets_spawned: int = 0
    rockets_destroyed: int = 0
    missiles_fired: int = 0

    rockets: list[Rocket] = field(default_factory=list)
    missiles: list[Missile] = field(default_factory=list)
    explosions: list[Explosion] = field(default_factory=list)
    cities: list[City] = field(default_factory=list)
    turrets: list[Turret] = field(default_factory=list)

    @property
    def ground_y(self) -> float:
        return self.height - self.ground_offset

    def new_id(self) -> int:
        entity_id = self.next_id
        self.next_id += 1
        return entity_id

    def active_installations(self) -> list[City | Turret]:
        # cities first, then turrets
        return [c for c in self.cities if c.active] + [t for t in self.turrets if t.active]
