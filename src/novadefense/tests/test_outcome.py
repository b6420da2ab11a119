from novadefense.core.config import DEFAULT_CONFIG, GameConfig
from novadefense.core.model.layout import build_installations
from novadefense.core.model.state import WorldState
from novadefense.core.rules.outcome import evaluate_outcome


def _make_state() -> WorldState:
    state = WorldState(width=800, height=600)
    state.cities, state.turrets = build_installations(800, DEFAULT_CONFIG)
    return state


def test_in_progress_while_a_turret_stands():
    state = _make_state()
    state.turrets[0].active = False
    state.turrets[1].active = False
    for city in state.cities:
        city.active = False
    assert evaluate_outcome(state) == "IN_PROGRESS"


def test_won_at_win_score():
    state = _make_state()
    state.score = 999
    assert evaluate_outcome(state) == "IN_PROGRESS"
    state.score = 1000
    assert evaluate_outcome(state) == "WON"


def test_lost_when_every_turret_is_destroyed():
    state = _make_state()
    for turret in state.turrets:
        turret.active = False
    assert evaluate_outcome(state) == "LOST"


def test_won_takes_precedence_over_lost():
    state = _make_state()
    state.score = 1000
    for turret in state.turrets:
        turret.active = False
    assert evaluate_outcome(state) == "WON"


def test_empty_turrets_still_count_as_standing():
    state = _make_state()
    for turret in state.turrets:
        turret.ammo = 0
    assert evaluate_outcome(state) == "IN_PROGRESS"


def test_win_score_comes_from_config():
    state = _make_state()
    state.score = 100
    assert evaluate_outcome(state, GameConfig(win_score=100)) == "WON"
