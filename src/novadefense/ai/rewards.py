from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RewardState:
    score: int
    cities: int
    turrets: int
    ammo: int


@dataclass(frozen=True, slots=True)
class RewardConfig:
    score_weight: float = 0.1
    city_loss_penalty: float = 5.0
    turret_loss_penalty: float = 10.0
    shot_penalty: float = 0.05
    terminal_win_bonus: float = 100.0
    terminal_loss_penalty: float = 100.0


def reward_state_from(state) -> RewardState:
    cities = getattr(state, "cities", []) or []
    turrets = getattr(state, "turrets", []) or []
    return RewardState(
        score=int(getattr(state, "score", 0)),
        cities=sum(1 for c in cities if c.active),
        turrets=sum(1 for t in turrets if t.active),
        ammo=sum(int(t.ammo) for t in turrets),
    )


def compute_reward_breakdown(
    prev_state: RewardState,
    new_state: RewardState,
    *,
    config: RewardConfig,
    episode_done: bool = False,
    game_won: bool = False,
) -> dict[str, float]:
    score_delta = float(new_state.score - prev_state.score)
    cities_lost = float(max(0, prev_state.cities - new_state.cities))
    turrets_lost = float(max(0, prev_state.turrets - new_state.turrets))
    shots = float(max(0, prev_state.ammo - new_state.ammo))

    score_reward = score_delta * config.score_weight
    city_penalty = cities_lost * config.city_loss_penalty
    turret_penalty = turrets_lost * config.turret_loss_penalty
    shot_penalty = shots * config.shot_penalty
    terminal_bonus = 0.0
    terminal_penalty = 0.0
    if episode_done:
        if game_won:
            terminal_bonus = float(config.terminal_win_bonus)
        else:
            terminal_penalty = float(config.terminal_loss_penalty)

    total = score_reward - city_penalty - turret_penalty - shot_penalty + terminal_bonus - terminal_penalty
    return {
        "total": float(total),
        "score_delta": score_delta,
        "cities_lost": cities_lost,
        "turrets_lost": turrets_lost,
        "shots": shots,
        "city_penalty": city_penalty,
        "turret_penalty": turret_penalty,
        "shot_penalty": shot_penalty,
        "terminal_bonus": terminal_bonus,
        "terminal_penalty": terminal_penalty,
    }


def compute_reward(
    prev_state: RewardState,
    new_state: RewardState,
    *,
    config: RewardConfig,
    episode_done: bool = False,
    game_won: bool = False,
) -> float:
    return compute_reward_breakdown(
        prev_state,
        new_state,
        config=config,
        episode_done=episode_done,
        game_won=game_won,
    )["total"]
