from __future__ import annotations

import argparse
from dataclasses import dataclass
import logging
import statistics
from typing import Iterable

from novadefense.ai.env import NovaDefenseEnv
from novadefense.ai.policies.baseline import POLICY_NAMES, make_policy
from novadefense.core.config import GameConfig, load_config


logger = logging.getLogger(__name__)


@dataclass
class EpisodeResult:
    policy: str
    seed: int
    steps: int
    ticks: int
    score: int
    cities: int
    turrets: int
    ammo_left: int
    rockets_destroyed: int
    missiles_fired: int
    status: str
    stop_reason: str


def _expand_list(values: Iterable[str] | None) -> list[str]:
    if not values:
        return []
    expanded: list[str] = []
    for value in values:
        parts = [part.strip() for part in value.split(",") if part.strip()]
        expanded.extend(parts)
    return expanded


def run_episode(
    *,
    policy_name: str,
    seed: int,
    max_steps: int,
    config: GameConfig | None = None,
    width: float = 800.0,
    height: float = 600.0,
    verbose: bool = False,
) -> EpisodeResult:
    env = NovaDefenseEnv(width=width, height=height, config=config, max_episode_steps=max_steps)
    env.reset(seed=seed)
    policy = make_policy(policy_name, seed=seed, verbose=verbose)
    policy.reset(env)

    steps = 0
    stop_reason = "max_steps"
    while steps < max_steps:
        action = policy.next_action(env)
        _, _, terminated, truncated, info = env.step(action)
        steps += 1
        if terminated:
            stop_reason = str(info["status"]).lower()
            break
        if truncated:
            break

    engine = env.engine
    s = engine.state
    env.close()
    return EpisodeResult(
        policy=policy_name,
        seed=seed,
        steps=steps,
        ticks=s.tick,
        score=s.score,
        cities=sum(1 for c in s.cities if c.active),
        turrets=sum(1 for t in s.turrets if t.active),
        ammo_left=sum(t.ammo for t in s.turrets),
        rockets_destroyed=s.rockets_destroyed,
        missiles_fired=s.missiles_fired,
        status=engine.status,
        stop_reason=stop_reason,
    )


def _summary_line(name: str, results: list[EpisodeResult]) -> str:
    if not results:
        return f"{name}: no episodes"
    scores = [r.score for r in results]
    wins = sum(1 for r in results if r.status == "WON")
    hit_rate = [
        r.rockets_destroyed / r.missiles_fired for r in results if r.missiles_fired > 0
    ]
    return (
        f"{name}: episodes={len(results)} wins={wins} "
        f"score_mean={statistics.fmean(scores):.1f} score_max={max(scores)} "
        f"kills_per_shot={statistics.fmean(hit_rate) if hit_rate else 0.0:.2f} "
        f"ticks_mean={statistics.fmean(r.ticks for r in results):.0f}"
    )


def _print_summary(
    *,
    policy_a: str,
    policy_b: str,
    results_a: list[EpisodeResult],
    results_b: list[EpisodeResult],
    show_runs: bool,
) -> None:
    print(_summary_line(f"A[{policy_a}]", results_a))
    print(_summary_line(f"B[{policy_b}]", results_b))
    if not show_runs:
        return
    for res_a, res_b in zip(results_a, results_b):
        print(
            "seed={seed} a_score={a_score} a_status={a_status} a_ticks={a_ticks} "
            "b_score={b_score} b_status={b_status} b_ticks={b_ticks}".format(
                seed=res_a.seed,
                a_score=res_a.score,
                a_status=res_a.status,
                a_ticks=res_a.ticks,
                b_score=res_b.score,
                b_status=res_b.status,
                b_ticks=res_b.ticks,
            )
        )


def main() -> int:
    ap = argparse.ArgumentParser(description="Compare two scripted policies over a set of seeds")
    ap.add_argument("--policy-a", choices=POLICY_NAMES, default="intercept")
    ap.add_argument("--policy-b", choices=POLICY_NAMES, default="random")
    ap.add_argument("--seed", action="append", default=None)
    ap.add_argument("--max-steps", type=int, default=5000)
    ap.add_argument("--width", type=float, default=800.0)
    ap.add_argument("--height", type=float, default=600.0)
    ap.add_argument("--config", default=None, help="JSON game config")
    ap.add_argument("--set", action="append", default=None, dest="overrides", help="section.key=value")
    ap.add_argument("--verbose", action="store_true")
    ap.add_argument("--show-runs", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(message)s",
    )

    config = load_config(args.config, args.overrides)
    seeds = [int(seed) for seed in _expand_list(args.seed)] if args.seed else [123]

    results_a: list[EpisodeResult] = []
    results_b: list[EpisodeResult] = []
    for seed in seeds:
        for policy_name, results in ((args.policy_a, results_a), (args.policy_b, results_b)):
            results.append(
                run_episode(
                    policy_name=policy_name,
                    seed=seed,
                    max_steps=args.max_steps,
                    config=config,
                    width=args.width,
                    height=args.height,
                    verbose=args.verbose,
                )
            )

    _print_summary(
        policy_a=args.policy_a,
        policy_b=args.policy_b,
        results_a=results_a,
        results_b=results_b,
        show_runs=args.show_runs,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
