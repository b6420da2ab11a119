from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pyglet
from pyglet.window import key

from .strings import get_strings, next_language
from .ui_layout import HudColumn, RowLayout
from ..core.config import DEFAULT_CONFIG, GameConfig
from ..core.driver import FrameDriver
from ..core.engine import Engine


logger = logging.getLogger(__name__)

SEA_COLOR = (12, 74, 110)
CITY_COLOR = (59, 130, 246)
CITY_TOWER_COLOR = (96, 165, 250)
TURRET_COLOR = (16, 185, 129)
AMMO_BG_COLOR = (63, 63, 70)
AMMO_LOW_COLOR = (239, 68, 68)
MISSILE_COLOR = (239, 68, 68)
CROSS_COLOR = (250, 204, 21)
BLAST_OUTER_COLOR = (250, 204, 21, 170)
BLAST_INNER_COLOR = (255, 255, 255, 220)
TEXT_COLOR = (240, 240, 240, 255)
DIM_TEXT_COLOR = (160, 160, 170, 255)


def _next_run_dir(base_dir: Path) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    max_idx = -1
    for child in base_dir.iterdir():
        if not child.is_dir():
            continue
        try:
            idx = int(child.name)
        except ValueError:
            continue
        max_idx = max(max_idx, idx)
    next_idx = max_idx + 1
    run_dir = base_dir / str(next_idx)
    while run_dir.exists():
        next_idx += 1
        run_dir = base_dir / str(next_idx)
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


class NovaDefenseGui:
    """
    Presentation only: draws Engine.observe() snapshots and forwards clicks.

    Canvas coordinates have their origin top-left with y down; pyglet's
    window origin is bottom-left, so every draw/click goes through to_canvas.
    """

    def __init__(self, *, width: int, height: int, lang: str = "en", config: GameConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.lang = lang
        self.strings = get_strings(lang)
        self.engine = Engine(width, height, config=self.config)

        self.window = pyglet.window.Window(
            width=width,
            height=height,
            caption=self.strings["title"],
            resizable=True,
        )
        self._visible = True
        self.driver = FrameDriver(self.engine, surface_ready=self._surface_ready, on_frame=self._set_snapshot)
        self._snapshot: dict[str, Any] = self.engine.observe()

        self.static_batch = pyglet.graphics.Batch()
        self.ui_batch = pyglet.graphics.Batch()
        self.overlay_batch = pyglet.graphics.Batch()
        self._sea = pyglet.shapes.Rectangle(
            0, 0, width, self.config.ground_offset, color=SEA_COLOR, batch=self.static_batch
        )
        self._build_hud()
        self._build_overlay()

        self.window.push_handlers(
            on_draw=self.on_draw,
            on_resize=self.on_resize,
            on_mouse_press=self.on_mouse_press,
            on_key_press=self.on_key_press,
            on_show=self.on_show,
            on_hide=self.on_hide,
            on_close=self.on_close,
        )
        self._update_hud()
        # the driver feeds frames while a match runs; this covers the idle overlays
        pyglet.clock.schedule_interval(self._refresh_snapshot, 1 / 30.0)

    def _surface_ready(self) -> bool:
        return self._visible and self.window.width > 0 and self.window.height > 0

    def _set_snapshot(self, snapshot: dict[str, Any]) -> None:
        self._snapshot = snapshot
        self._update_hud()

    def _refresh_snapshot(self, dt: float) -> None:
        if self.driver.scheduled:
            return
        self._set_snapshot(self.engine.observe())

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        return float(x), float(self.window.height - y)

    def _build_hud(self) -> None:
        self._hud = HudColumn(x=0, y_top=self.window.height)
        self._score_title = self._hud.add_label(
            self.strings["score"], font_size=10, color=DIM_TEXT_COLOR, batch=self.ui_batch
        )
        self._score_label = self._hud.add_label("0", font_size=18, color=TEXT_COLOR, batch=self.ui_batch)
        self._target_label = self._hud.add_label(
            self.strings["target"].format(win_score=self.config.win_score),
            font_size=8,
            color=DIM_TEXT_COLOR,
            batch=self.ui_batch,
        )
        self._ammo_labels: list[pyglet.text.Label] = []
        for _ in self.config.turret_slots:
            self._ammo_labels.append(
                pyglet.text.Label(
                    "",
                    x=0,
                    y=0,
                    anchor_x="center",
                    anchor_y="bottom",
                    font_size=10,
                    color=TEXT_COLOR,
                    batch=self.ui_batch,
                )
            )
        self._layout_ammo_labels()

    def _layout_ammo_labels(self) -> None:
        row = RowLayout(
            center_x=self.window.width / 2.0,
            y=self.config.ground_offset + 60,
            count=len(self._ammo_labels),
            cell_width=90,
            spacing=40,
        )
        for idx, label in enumerate(self._ammo_labels):
            label.x = row.cell_x(idx) + row.cell_width / 2.0
            label.y = row.y

    def _build_overlay(self) -> None:
        w, h = self.window.width, self.window.height
        self._overlay_bg = pyglet.shapes.Rectangle(0, 0, w, h, color=(0, 0, 0, 230), batch=self.overlay_batch)
        self._overlay_title = pyglet.text.Label(
            "", x=w / 2, y=h / 2 + 60, anchor_x="center", anchor_y="center",
            font_size=28, color=(16, 185, 129, 255), batch=self.overlay_batch,
        )
        self._overlay_body = pyglet.text.Label(
            "", x=w / 2, y=h / 2, anchor_x="center", anchor_y="center",
            font_size=13, color=TEXT_COLOR, batch=self.overlay_batch,
        )
        self._overlay_hint = pyglet.text.Label(
            "", x=w / 2, y=h / 2 - 60, anchor_x="center", anchor_y="center",
            font_size=11, color=DIM_TEXT_COLOR, batch=self.overlay_batch,
        )

    def _update_hud(self) -> None:
        snap = self._snapshot
        self._score_label.text = str(snap["score"])
        for label, turret in zip(self._ammo_labels, snap["turrets"]):
            label.text = f"{self.strings['ammo']} {turret['ammo']}"
            label.color = (*TEXT_COLOR[:3], 255 if turret["active"] else 50)

        status = snap["status"]
        t = self.strings
        if status == "NOT_STARTED":
            self._overlay_title.text = t["title"]
            self._overlay_title.color = (16, 185, 129, 255)
            self._overlay_body.text = t["instructions"]
            self._overlay_hint.text = f"{t['start']}  ({t['hint']})"
        elif status in ("WON", "LOST"):
            won = status == "WON"
            self._overlay_title.text = t["win"] if won else t["lost"]
            self._overlay_title.color = (16, 185, 129, 255) if won else (239, 68, 68, 255)
            self._overlay_body.text = f"{t['score']}: {snap['score']}"
            self._overlay_hint.text = f"{t['restart']}  ({t['hint']})"

    def _set_language(self, lang: str) -> None:
        self.lang = lang
        self.strings = get_strings(lang)
        self.window.set_caption(self.strings["title"])
        self._score_title.text = self.strings["score"]
        self._target_label.text = self.strings["target"].format(win_score=self.config.win_score)
        self._update_hud()

    def _start_or_restart(self) -> None:
        previous = self.engine.status
        self.driver.restart()
        self._snapshot = self.engine.observe()
        self._update_hud()
        logger.info("[gui] %s", "match started" if previous == "NOT_STARTED" else "match restarted")

    def on_draw(self) -> None:
        self.window.clear()
        self.static_batch.draw()
        snap = self._snapshot
        # shapes must stay referenced until the batch is drawn
        batch = pyglet.graphics.Batch()
        shapes = self._build_world_shapes(snap, batch)
        batch.draw()
        del shapes
        self.ui_batch.draw()
        if snap["status"] != "IN_PROGRESS":
            self.overlay_batch.draw()

    def _build_world_shapes(self, snap: dict[str, Any], batch: pyglet.graphics.Batch) -> list[Any]:
        h = self.window.height
        g = self.config.ground_offset
        shapes: list[Any] = []
        for city in snap["cities"]:
            if not city["active"]:
                continue
            x = city["x"]
            shapes.append(pyglet.shapes.Rectangle(x - 15, g, 30, 15, color=CITY_COLOR, batch=batch))
            shapes.append(pyglet.shapes.Rectangle(x - 10, g + 15, 8, 10, color=CITY_TOWER_COLOR, batch=batch))
            shapes.append(pyglet.shapes.Rectangle(x + 2, g + 15, 8, 5, color=CITY_TOWER_COLOR, batch=batch))

        for turret in snap["turrets"]:
            if not turret["active"]:
                continue
            x = turret["x"]
            shapes.append(
                pyglet.shapes.Triangle(
                    x - 20, g, x + 20, g, x, g + self.config.launch_offset, color=TURRET_COLOR, batch=batch
                )
            )
            bar_w = 30
            pct = turret["ammo"] / max(1, turret["max_ammo"])
            shapes.append(pyglet.shapes.Rectangle(x - bar_w / 2, g - 9, bar_w, 4, color=AMMO_BG_COLOR, batch=batch))
            if pct > 0:
                shapes.append(
                    pyglet.shapes.Rectangle(
                        x - bar_w / 2,
                        g - 9,
                        bar_w * pct,
                        4,
                        color=TURRET_COLOR if pct > 0.3 else AMMO_LOW_COLOR,
                        batch=batch,
                    )
                )

        for rocket in snap["rockets"]:
            sx, sy = rocket["start"]
            cx, cy = rocket["current"]
            shapes.append(pyglet.shapes.Line(sx, h - sy, cx, h - cy, 2, color=rocket["color"], batch=batch))
            shapes.append(pyglet.shapes.Rectangle(cx - 1, h - cy - 1, 2, 2, color=rocket["color"], batch=batch))

        for missile in snap["missiles"]:
            sx, sy = missile["start"]
            cx, cy = missile["current"]
            tx, ty = missile["target"]
            shapes.append(pyglet.shapes.Line(sx, h - sy, cx, h - cy, 2, color=MISSILE_COLOR, batch=batch))
            ty = h - ty
            shapes.append(pyglet.shapes.Line(tx - 5, ty - 5, tx + 5, ty + 5, 1, color=CROSS_COLOR, batch=batch))
            shapes.append(pyglet.shapes.Line(tx + 5, ty - 5, tx - 5, ty + 5, 1, color=CROSS_COLOR, batch=batch))

        for explosion in snap["explosions"]:
            radius = explosion["radius"]
            if radius <= 0:
                continue
            ex, ey = explosion["pos"]
            shapes.append(pyglet.shapes.Circle(ex, h - ey, radius, color=BLAST_OUTER_COLOR, batch=batch))
            shapes.append(pyglet.shapes.Circle(ex, h - ey, radius * 0.4, color=BLAST_INNER_COLOR, batch=batch))
        return shapes

    def on_resize(self, width: int, height: int) -> None:
        if width > 0 and height > 0:
            self.engine.resize(width, height)
        self._sea.width = width
        self._hud.relayout(y_top=height)
        self._layout_ammo_labels()
        self._overlay_bg.width = width
        self._overlay_bg.height = height
        for offset, label in ((60, self._overlay_title), (0, self._overlay_body), (-60, self._overlay_hint)):
            label.x = width / 2
            label.y = height / 2 + offset

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        if not self.engine.in_progress:
            self._start_or_restart()
            return
        canvas_x, canvas_y = self.to_canvas(x, y)
        missile = self.engine.fire_at(canvas_x, canvas_y)
        if missile is None:
            logger.debug("[gui] click (%.0f,%.0f) ignored, no turret can fire", canvas_x, canvas_y)

    def on_key_press(self, symbol: int, modifiers: int) -> None:
        if symbol in (key.ENTER, key.RETURN) and not self.engine.in_progress:
            self._start_or_restart()
        elif symbol == key.L:
            self._set_language(next_language(self.lang))

    def on_show(self) -> None:
        self._visible = True

    def on_hide(self) -> None:
        self._visible = False

    def on_close(self) -> None:
        self.driver.stop()
        pyglet.clock.unschedule(self._refresh_snapshot)
        logger.info("[gui] window closed status=%s score=%s", self.engine.status, self.engine.state.score)


def run(
    *,
    width: int = 960,
    height: int = 640,
    lang: str = "en",
    config: GameConfig | None = None,
) -> None:
    run_dir = _next_run_dir(Path("runs"))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(message)s",
        handlers=[logging.StreamHandler(), logging.FileHandler(run_dir / "log.txt", encoding="utf-8")],
    )
    _app = NovaDefenseGui(width=width, height=height, lang=lang, config=config)
    pyglet.app.run()
