# src/novadefense/core/rules/outcome.py
from __future__ import annotations

from ..config import DEFAULT_CONFIG, GameConfig
from ..model.state import MatchStatus


def evaluate_outcome(state, config: GameConfig = DEFAULT_CONFIG) -> MatchStatus:
    # WON is checked first: reaching the score wins even if the last turret fell this tick.
    if state.score >= config.win_score:
        return "WON"
    if all(not t.active for t in state.turrets):
        return "LOST"
    return "IN_PROGRESS"
