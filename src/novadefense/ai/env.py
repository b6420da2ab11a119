from __future__ import annotations

from pathlib import Path
import logging
import random
import time
from typing import Any

import gymnasium as gym
import numpy as np

from novadefense.core.config import DEFAULT_CONFIG, GameConfig
from novadefense.core.engine import Engine

from .actions import (
    DEFAULT_AIM_COLS,
    DEFAULT_AIM_ROWS,
    Action,
    AimGridSpec,
    FireAt,
    HoldFire,
    aim_grid_spec,
    cell_center,
    flatten,
    point_to_cell,
    unflatten,
)
from .obs import MAX_ROCKETS, build_observation, flatten_observation, observation_size
from .rewards import RewardConfig, compute_reward, reward_state_from


logger = logging.getLogger(__name__)


class _EpisodeLog:
    """Append-only text log for one env worker; opened lazily on first write."""

    def __init__(self, path: Path | None, interval_sec: float) -> None:
        self.path = path
        self.interval_sec = float(interval_sec)
        self._fh = None
        self._last_write = 0.0

    def write(self, message: str) -> None:
        if self.path is None:
            return
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("a", encoding="utf-8")
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        self._fh.write(f"{stamp} {message}\n")
        self._fh.flush()
        self._last_write = time.perf_counter()

    def due(self) -> bool:
        if self.path is None or self.interval_sec <= 0:
            return False
        return time.perf_counter() - self._last_write >= self.interval_sec

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


class NovaDefenseEnv(gym.Env):
    """
    One match per episode. Each step applies at most one shot, then runs
    `frame_skip` engine frames.

    Actions are Discrete: 0 holds fire, 1 + cell fires at the centre of an
    aim-grid cell (see actions.AimGridSpec).
    """
    metadata = {"render_modes": []}

    def __init__(
        self,
        *,
        width: float = 800.0,
        height: float = 600.0,
        config: GameConfig | None = None,
        reward_config: RewardConfig | None = None,
        frame_skip: int = 6,
        aim_cols: int = DEFAULT_AIM_COLS,
        aim_rows: int = DEFAULT_AIM_ROWS,
        max_rockets: int = MAX_ROCKETS,
        max_episode_steps: int | None = 20_000,
        strict_invalid_actions: bool = False,
        log_dir: str | Path | None = None,
        log_prefix: str | None = None,
        log_interval_sec: float = 10.0,
    ) -> None:
        super().__init__()
        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")
        self.width = float(width)
        self.height = float(height)
        self.config = config or DEFAULT_CONFIG
        self.reward_config = reward_config or RewardConfig()
        self.frame_skip = int(frame_skip)
        self.max_rockets = int(max_rockets)
        self.max_episode_steps = max_episode_steps
        self.strict_invalid_actions = strict_invalid_actions

        self.engine: Engine | None = None
        self.aim_spec: AimGridSpec = aim_grid_spec(
            self.width,
            self.height - self.config.ground_offset,
            launch_offset=self.config.launch_offset,
            cols=aim_cols,
            rows=aim_rows,
        )
        self.action_space = gym.spaces.Discrete(self.aim_spec.num_actions)
        self.observation_space = gym.spaces.Box(
            low=-np.inf,
            high=np.inf,
            shape=(observation_size(self.config, self.max_rockets),),
            dtype=np.float32,
        )

        self.episode_seed: int | None = None
        self.steps = 0
        self.last_obs: dict[str, Any] | None = None

        log_path = Path(log_dir) / f"{log_prefix or 'env'}.log" if log_dir is not None else None
        self._log = _EpisodeLog(log_path, log_interval_sec)

    def reset(self, *, seed: int | None = None, options: dict[str, Any] | None = None) -> tuple[np.ndarray, dict]:
        super().reset(seed=seed)
        # the engine gets its own stdlib rng, derived from gymnasium's seeded generator
        self.episode_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.engine = Engine(self.width, self.height, config=self.config, rng=random.Random(self.episode_seed))
        self.engine.start(0.0)
        self.steps = 0
        self._log.write(f"reset seed={seed} engine_seed={self.episode_seed}")
        return self._observation(), {"engine_seed": self.episode_seed, "status": self.engine.status}

    def _observation(self) -> np.ndarray:
        if self.engine is None:
            raise RuntimeError("Environment not reset")
        self.last_obs = build_observation(self.engine.observe(), self.config, max_rockets=self.max_rockets)
        flat = flatten_observation(self.last_obs, self.config, max_rockets=self.max_rockets)
        return np.asarray(flat, dtype=np.float32)

    def action_for_point(self, x: float, y: float) -> int:
        return flatten(FireAt(point_to_cell(self.aim_spec, x, y)), self.aim_spec)

    def _decode(self, action: Action | int) -> tuple[Action, bool]:
        try:
            decoded = unflatten(int(action), self.aim_spec) if isinstance(action, (int, np.integer)) else action
            flatten(decoded, self.aim_spec)
        except (TypeError, ValueError) as exc:
            if self.strict_invalid_actions:
                raise ValueError(f"Invalid action {action!r}") from exc
            return HoldFire(), True
        return decoded, False

    def step(self, action: Action | int) -> tuple[np.ndarray, float, bool, bool, dict[str, Any]]:
        if self.engine is None:
            raise RuntimeError("Environment not reset")
        if not self.engine.in_progress:
            raise RuntimeError(f"step() called after the match ended (status={self.engine.status})")
        self.steps += 1
        decoded, invalid = self._decode(action)

        before = reward_state_from(self.engine.state)
        fired = False
        if isinstance(decoded, FireAt):
            fired = self.engine.fire_at(*cell_center(self.aim_spec, decoded.cell)) is not None
        for _ in range(self.frame_skip):
            if self.engine.step(Engine.FRAME_DT) != "IN_PROGRESS":
                break

        status = self.engine.status
        after = reward_state_from(self.engine.state)
        terminated = status in ("WON", "LOST")
        truncated = not terminated and self.max_episode_steps is not None and self.steps >= self.max_episode_steps
        reward = compute_reward(
            before,
            after,
            config=self.reward_config,
            episode_done=terminated,
            game_won=status == "WON",
        )

        s = self.engine.state
        if terminated or truncated:
            self._log.write(
                f"episode_done status={status} score={s.score} ticks={s.tick} "
                f"destroyed={s.rockets_destroyed} fired={s.missiles_fired}"
            )
            logger.info("episode done status=%s score=%s steps=%s", status, s.score, self.steps)
        elif self._log.due():
            ammo = sum(t.ammo for t in s.turrets)
            self._log.write(
                f"heartbeat step={self.steps} tick={s.tick} score={s.score} "
                f"rockets={len(s.rockets)} missiles={len(s.missiles)} ammo={ammo}"
            )

        info: dict[str, Any] = {"status": status, "score": after.score, "fired": fired, "invalid_action": invalid}
        return self._observation(), float(reward), terminated, truncated, info

    def render(self) -> None:
        return None

    def close(self) -> None:
        self._log.close()
