from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def direction(start: Point, target: Point) -> tuple[float, float]:
    """Unit vector from start to target, (0, 0) when both points coincide."""
    dx = target.x - start.x
    dy = target.y - start.y
    dist = math.hypot(dx, dy)
    if dist == 0.0:
        return 0.0, 0.0
    return dx / dist, dy / dist


def velocity(start: Point, target: Point, speed: float) -> tuple[float, float]:
    ux, uy = direction(start, target)
    return ux * speed, uy * speed
