from __future__ import annotations

from dataclasses import dataclass

import pyglet


@dataclass
class RowLayout:
    """Evenly spaced, horizontally centred cells along a row."""
    center_x: float
    y: float
    count: int
    cell_width: float
    spacing: float

    def cell_x(self, index: int) -> float:
        total = self.count * self.cell_width + max(0, self.count - 1) * self.spacing
        left = self.center_x - total / 2.0
        return left + index * (self.cell_width + self.spacing)


class HudColumn:
    """Stacks labels downward from a top-left corner (pyglet coordinates, y up)."""

    def __init__(
        self,
        *,
        x: float,
        y_top: float,
        padding: float = 12,
        spacing: float = 6,
    ) -> None:
        self.x = x + padding
        self.y_top = y_top - padding
        self.spacing = spacing
        self._cursor = self.y_top
        self._labels: list[pyglet.text.Label] = []

    def add_label(
        self,
        text: str,
        *,
        font_size: int,
        color: tuple[int, int, int, int],
        batch: pyglet.graphics.Batch,
        anchor_x: str = "left",
    ) -> pyglet.text.Label:
        label = pyglet.text.Label(
            text,
            x=self.x,
            y=self._cursor,
            anchor_x=anchor_x,
            anchor_y="top",
            font_size=font_size,
            color=color,
            batch=batch,
        )
        height = max(label.content_height, float(font_size))
        self._cursor -= height + self.spacing
        self._labels.append(label)
        return label

    def relayout(self, *, y_top: float, padding: float = 12) -> None:
        """Re-stack the existing labels under a new top edge (after a window resize)."""
        self.y_top = y_top - padding
        self._cursor = self.y_top
        for label in self._labels:
            label.y = self._cursor
            height = max(label.content_height, float(label.font_size))
            self._cursor -= height + self.spacing
