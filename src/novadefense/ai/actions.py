from __future__ import annotations

from dataclasses import dataclass


DEFAULT_AIM_COLS = 16
DEFAULT_AIM_ROWS = 10


@dataclass(frozen=True, slots=True)
class HoldFire:
    pass


@dataclass(frozen=True, slots=True)
class FireAt:
    cell: int


Action = HoldFire | FireAt


@dataclass(frozen=True, slots=True)
class AimGridSpec:
    """
    Aim cells tile the sky between y=top and y=bottom.

    Action id 0 holds fire; id 1 + cell fires at the centre of `cell`,
    cells numbered row-major from the top-left.
    """
    cols: int
    rows: int
    width: float
    top: float
    bottom: float

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    @property
    def num_actions(self) -> int:
        return 1 + self.cell_count

    @property
    def cell_width(self) -> float:
        return self.width / self.cols

    @property
    def cell_height(self) -> float:
        return (self.bottom - self.top) / self.rows


def aim_grid_spec(
    width: float,
    ground_y: float,
    *,
    launch_offset: float,
    cols: int = DEFAULT_AIM_COLS,
    rows: int = DEFAULT_AIM_ROWS,
) -> AimGridSpec:
    if cols < 1 or rows < 1:
        raise ValueError(f"aim grid needs at least one cell, got {cols}x{rows}")
    bottom = max(1.0, ground_y - launch_offset)
    return AimGridSpec(cols=int(cols), rows=int(rows), width=float(width), top=0.0, bottom=float(bottom))


def cell_center(spec: AimGridSpec, cell: int) -> tuple[float, float]:
    if cell < 0 or cell >= spec.cell_count:
        raise ValueError(f"cell {cell} out of range 0..{spec.cell_count - 1}")
    row, col = divmod(cell, spec.cols)
    return (col + 0.5) * spec.cell_width, spec.top + (row + 0.5) * spec.cell_height


def point_to_cell(spec: AimGridSpec, x: float, y: float) -> int:
    col = min(spec.cols - 1, max(0, int(x // spec.cell_width)))
    row = min(spec.rows - 1, max(0, int((y - spec.top) // spec.cell_height)))
    return row * spec.cols + col


def flatten(action: Action, spec: AimGridSpec) -> int:
    if isinstance(action, HoldFire):
        return 0
    if isinstance(action, FireAt):
        if action.cell < 0 or action.cell >= spec.cell_count:
            raise ValueError(f"cell {action.cell} out of range")
        return 1 + action.cell
    raise TypeError(f"Unknown action {action!r}")


def unflatten(action_id: int, spec: AimGridSpec) -> Action:
    if action_id < 0 or action_id >= spec.num_actions:
        raise ValueError(f"action id {action_id} out of range 0..{spec.num_actions - 1}")
    if action_id == 0:
        return HoldFire()
    return FireAt(cell=action_id - 1)
