from __future__ import annotations
from pathlib import Path
import argparse
import logging

from novadefense.ai.env import NovaDefenseEnv
from novadefense.ai.policies.baseline import POLICY_NAMES, make_policy
from novadefense.core.config import (
    apply_overrides,
    config_from_dict,
    deep_merge,
    default_config_dict,
    dump_effective_config,
    load_json_config,
)


logger = logging.getLogger(__name__)


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--seconds", type=float, default=60.0)
    ap.add_argument("--fps", type=int, default=60)
    ap.add_argument("--policy", choices=POLICY_NAMES, default="intercept")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--width", type=float, default=800.0)
    ap.add_argument("--height", type=float, default=600.0)
    ap.add_argument("--config", default=None, help="JSON game config")
    ap.add_argument("--set", action="append", default=None, dest="overrides", help="section.key=value")
    ap.add_argument("--run-dir", default=None, help="write effective_config.json here")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(message)s",
    )

    cfg = default_config_dict()
    if args.config:
        cfg = deep_merge(cfg, load_json_config(args.config))
    cfg = apply_overrides(cfg, args.overrides)
    config = config_from_dict(cfg)
    if args.run_dir:
        sha = dump_effective_config(Path(args.run_dir), cfg)
        logger.info("effective config sha256=%s", sha)

    # one policy decision per frame
    env = NovaDefenseEnv(width=args.width, height=args.height, config=config, frame_skip=1, max_episode_steps=None)
    env.reset(seed=args.seed)
    policy = make_policy(args.policy, seed=args.seed, verbose=args.verbose)
    policy.reset(env)

    ticks = int(args.seconds * args.fps)
    status = "IN_PROGRESS"
    for _ in range(ticks):
        _, _, terminated, _, info = env.step(policy.next_action(env))
        status = info["status"]
        if terminated:
            break

    s = env.engine.state
    cities = sum(1 for c in s.cities if c.active)
    turrets = [f"{t.ammo}{'' if t.active else 'x'}" for t in s.turrets]
    print(
        f"status={status} score={s.score} ticks={s.tick} cities={cities} "
        f"turrets=[{','.join(turrets)}] destroyed={s.rockets_destroyed} fired={s.missiles_fired}"
    )
    env.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
