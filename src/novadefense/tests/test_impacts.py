from novadefense.core.config import DEFAULT_CONFIG
from novadefense.core.geometry import Point
from novadefense.core.model.entities import Missile, Rocket
from novadefense.core.model.layout import build_installations
from novadefense.core.model.state import WorldState
from novadefense.core.rules.impacts import damage_installations, resolve_missile_impacts, resolve_rocket_impacts


def _make_state() -> WorldState:
    state = WorldState(width=800, height=600)
    state.cities, state.turrets = build_installations(800, DEFAULT_CONFIG)
    return state


def _rocket_at(state: WorldState, current: Point, target: Point) -> Rocket:
    rocket = Rocket(id=state.new_id(), start=Point(target.x, 0.0), current=current, target=target, speed=2.0)
    state.rockets.append(rocket)
    return rocket


def test_default_layout_places_turrets_at_both_ends_and_centre():
    state = _make_state()
    assert [t.x for t in state.turrets] == [80.0, 400.0, 720.0]
    assert [t.ammo for t in state.turrets] == [20, 40, 20]
    assert [t.id for t in state.turrets] == [1, 5, 9]
    assert [c.x for c in state.cities] == [160.0, 240.0, 320.0, 480.0, 560.0, 640.0]


def test_rocket_in_flight_does_not_impact():
    state = _make_state()
    _rocket_at(state, Point(400.0, 579.0), Point(400.0, 580.0))
    assert resolve_rocket_impacts(state) == 0
    assert len(state.rockets) == 1
    assert state.explosions == []


def test_rocket_reaching_ground_explodes_and_damages_nearby():
    state = _make_state()
    _rocket_at(state, Point(400.0, 580.0), Point(400.0, 580.0))

    assert resolve_rocket_impacts(state) == 1

    assert state.rockets == []
    assert len(state.explosions) == 1
    explosion = state.explosions[0]
    assert explosion.pos == Point(400.0, 580.0)
    assert explosion.max_radius == 30.0
    assert explosion.radius == 0.0
    assert explosion.growing
    assert state.turrets[1].active is False
    # neighbours are a full slot away
    assert all(c.active for c in state.cities)
    assert state.turrets[0].active and state.turrets[2].active
    assert state.score == 0


def test_damage_uses_strict_horizontal_distance():
    state = _make_state()
    assert damage_installations(state, 130.0) == 0
    assert damage_installations(state, 131.0) == 1
    assert state.cities[0].active is False


def test_damage_skips_already_destroyed():
    state = _make_state()
    state.turrets[1].active = False
    assert damage_installations(state, 400.0) == 0


def test_missile_explodes_at_its_target_when_within_one_step():
    state = _make_state()
    target = Point(300.0, 200.0)
    near = Missile(id=1, start=Point(400.0, 530.0), current=Point(303.0, 204.0), target=target, speed=6.0, turret_index=1)
    far = Missile(id=2, start=Point(400.0, 530.0), current=Point(400.0, 400.0), target=target, speed=6.0, turret_index=1)
    state.missiles.extend([near, far])

    assert resolve_missile_impacts(state) == 1

    assert state.missiles == [far]
    assert len(state.explosions) == 1
    assert state.explosions[0].pos == target
    assert state.explosions[0].max_radius == 80.0


def test_rocket_flies_to_ground_then_impacts():
    from novadefense.core.rules.kinematics import step_projectiles

    state = _make_state()
    _rocket_at(state, Point(400.0, 500.0), Point(400.0, 580.0))
    ticks = 0
    while state.rockets:
        step_projectiles(state)
        resolve_rocket_impacts(state)
        ticks += 1
    assert ticks == 40
    assert state.explosions[0].pos.y >= 580.0
    assert state.explosions[0].max_radius == 30.0
    assert state.turrets[1].active is False
