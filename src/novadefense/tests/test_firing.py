import pytest

from novadefense.core.config import DEFAULT_CONFIG
from novadefense.core.geometry import Point
from novadefense.core.model.entities import Turret
from novadefense.core.model.layout import build_installations
from novadefense.core.model.state import WorldState
from novadefense.core.rules.firing import fire_missile, select_turret


def _make_state() -> WorldState:
    state = WorldState(width=800, height=600)
    state.cities, state.turrets = build_installations(800, DEFAULT_CONFIG)
    return state


@pytest.mark.parametrize(("x", "expected"), [(0.0, 0), (230.0, 0), (250.0, 1), (560.0, 1), (561.0, 2), (800.0, 2)])
def test_select_turret_picks_horizontally_nearest(x: float, expected: int):
    state = _make_state()
    assert select_turret(state.turrets, x) == expected


def test_select_turret_tie_keeps_first():
    turrets = [Turret(id=1, x=100.0, ammo=5, max_ammo=5), Turret(id=2, x=300.0, ammo=5, max_ammo=5)]
    assert select_turret(turrets, 200.0) == 0


def test_select_turret_skips_destroyed_and_empty():
    state = _make_state()
    state.turrets[0].active = False
    state.turrets[1].ammo = 0
    assert select_turret(state.turrets, 80.0) == 2
    state.turrets[2].active = False
    assert select_turret(state.turrets, 80.0) is None


def test_fire_missile_spends_one_round_and_launches_one_missile():
    state = _make_state()
    missile = fire_missile(state, 390.0, 200.0)

    assert missile is not None
    assert state.missiles == [missile]
    assert state.turrets[1].ammo == 39
    assert state.missiles_fired == 1
    assert missile.turret_index == 1
    assert missile.start == Point(400.0, 530.0)
    assert missile.current == missile.start
    assert missile.target == Point(390.0, 200.0)
    assert missile.speed == 6.0


def test_fire_missile_without_eligible_turret_is_a_noop():
    state = _make_state()
    for turret in state.turrets:
        turret.ammo = 0
    assert fire_missile(state, 400.0, 200.0) is None
    assert state.missiles == []
    assert state.missiles_fired == 0


def test_ammo_never_goes_negative():
    state = _make_state()
    fired = 0
    while fire_missile(state, 80.0, 100.0) is not None:
        fired += 1
    assert fired == 80
    assert [t.ammo for t in state.turrets] == [0, 0, 0]


def test_fire_at_centre_uses_centre_turret():
    state = _make_state()
    missile = fire_missile(state, 400.0, 300.0)
    assert [t.ammo for t in state.turrets] == [20, 39, 20]
    assert len(state.missiles) == 1
    assert missile.target == Point(400.0, 300.0)
