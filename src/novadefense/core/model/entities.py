from __future__ import annotations
from dataclasses import dataclass

from ..geometry import Point


ROCKET_COLOR: tuple[int, int, int] = (239, 68, 68)


@dataclass(slots=True)
class Rocket:
    id: int
    start: Point
    current: Point
    target: Point
    speed: float
    color: tuple[int, int, int] = ROCKET_COLOR
    dead: bool = False


@dataclass(slots=True)
class Missile:
    id: int
    start: Point
    current: Point
    target: Point
    speed: float
    turret_index: int
    dead: bool = False


@dataclass(slots=True)
class Explosion:
    id: int
    pos: Point
    max_radius: float
    radius: float = 0.0
    growing: bool = True
    done: bool = False


@dataclass(slots=True)
class City:
    id: int
    x: float
    active: bool = True


@dataclass(slots=True)
class Turret:
    id: int
    x: float
    ammo: int
    max_ammo: int
    active: bool = True
