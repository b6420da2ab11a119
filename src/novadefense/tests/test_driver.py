import random

from novadefense.core.driver import FrameDriver
from novadefense.core.engine import Engine


class _FakeClock:
    def __init__(self) -> None:
        self.scheduled: list = []

    def schedule_interval(self, func, interval: float) -> None:
        self.scheduled.append(func)

    def unschedule(self, func) -> None:
        self.scheduled = [f for f in self.scheduled if f != func]

    def fire(self, dt: float = 1.0 / 60.0) -> None:
        for func in list(self.scheduled):
            func(dt)


class _FakeTime:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1000.0 / 60.0
        return self.now


def _make_driver(**kwargs) -> tuple[FrameDriver, _FakeClock]:
    clock = _FakeClock()
    engine = Engine(800, 600, rng=random.Random(1))
    driver = FrameDriver(engine, clock=clock, time_source=_FakeTime(), **kwargs)
    return driver, clock


def test_start_schedules_one_callback_and_ticks():
    driver, clock = _make_driver()
    driver.start()
    assert driver.engine.status == "IN_PROGRESS"
    assert len(clock.scheduled) == 1
    clock.fire()
    clock.fire()
    assert driver.engine.state.tick == 2
    assert driver.frames == 2


def test_restart_never_double_schedules():
    driver, clock = _make_driver()
    driver.start()
    driver.restart()
    driver.restart()
    assert len(clock.scheduled) == 1
    clock.fire()
    assert driver.engine.state.tick == 1


def test_frame_skipped_while_surface_not_ready():
    ready = {"value": False}
    driver, clock = _make_driver(surface_ready=lambda: ready["value"])
    driver.start()
    clock.fire()
    assert driver.engine.state.tick == 0
    assert driver.skipped_frames == 1
    assert driver.scheduled
    ready["value"] = True
    clock.fire()
    assert driver.engine.state.tick == 1


def test_driver_stops_itself_when_match_ends():
    driver, clock = _make_driver()
    driver.start()
    for turret in driver.engine.state.turrets:
        turret.active = False
    clock.fire()
    assert driver.engine.status == "LOST"
    assert clock.scheduled == []
    assert driver.scheduled is False


def test_on_frame_receives_snapshots():
    frames = []
    driver, clock = _make_driver(on_frame=frames.append)
    driver.start()
    clock.fire()
    assert len(frames) == 1
    assert frames[0]["tick"] == 1


def test_stop_unschedules():
    driver, clock = _make_driver()
    driver.start()
    driver.stop()
    assert clock.scheduled == []
    driver.stop()


def test_on_frame_delivers_the_final_snapshot_before_stopping():
    frames = []
    driver, clock = _make_driver(on_frame=frames.append)
    driver.start()
    for turret in driver.engine.state.turrets:
        turret.active = False
    clock.fire()
    assert [f["status"] for f in frames] == ["LOST"]
    assert driver.scheduled is False
