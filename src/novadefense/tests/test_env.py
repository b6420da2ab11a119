import pytest

from novadefense.ai.env import NovaDefenseEnv
from novadefense.ai.obs import observation_size
from novadefense.core.config import DEFAULT_CONFIG


def test_reset_returns_observation_of_declared_shape():
    env = NovaDefenseEnv()
    obs, info = env.reset(seed=3)
    assert obs.shape == (observation_size(DEFAULT_CONFIG),) == env.observation_space.shape
    assert env.action_space.n == 161
    assert info["status"] == "IN_PROGRESS"
    # all turrets and cities standing, no rockets yet
    assert list(obs[1:7]) == [1.0, 1.0, 1.0, 1.0, 1.0, 1.0]
    assert list(obs[7:13]) == [1.0] * 6
    assert not obs[13:].any()


def test_same_seed_same_episode():
    def rollout():
        env = NovaDefenseEnv()
        env.reset(seed=11)
        counts = []
        for _ in range(60):
            _, _, terminated, _, info = env.step(0)
            counts.append(len(env.engine.state.rockets))
            if terminated:
                break
        return counts

    assert rollout() == rollout()


def test_step_before_reset_raises():
    env = NovaDefenseEnv()
    with pytest.raises(RuntimeError):
        env.step(0)


def test_fire_action_launches_a_missile():
    env = NovaDefenseEnv()
    env.reset(seed=0)
    _, reward, _, _, info = env.step(env.action_for_point(400.0, 200.0))
    assert info["fired"] is True
    assert env.engine.state.missiles_fired == 1
    assert reward == pytest.approx(-0.05)


def test_invalid_action_is_treated_as_hold_fire():
    env = NovaDefenseEnv()
    env.reset(seed=0)
    _, _, _, _, info = env.step(10_000)
    assert info["invalid_action"] is True
    assert info["fired"] is False


def test_invalid_action_raises_in_strict_mode():
    env = NovaDefenseEnv(strict_invalid_actions=True)
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(-1)


def test_idle_agent_eventually_loses():
    env = NovaDefenseEnv(max_episode_steps=None)
    env.reset(seed=2)
    terminated = False
    reward = 0.0
    for _ in range(5000):
        _, reward, terminated, _, info = env.step(0)
        if terminated:
            break
    assert terminated
    assert info["status"] == "LOST"
    assert reward <= -100.0
    assert all(not t.active for t in env.engine.state.turrets)
    with pytest.raises(RuntimeError):
        env.step(0)


def test_truncates_at_max_episode_steps():
    env = NovaDefenseEnv(max_episode_steps=3)
    env.reset(seed=0)
    results = [env.step(0)[3] for _ in range(3)]
    assert results == [False, False, True]


def test_frame_skip_must_be_positive():
    with pytest.raises(ValueError):
        NovaDefenseEnv(frame_skip=0)


def test_heartbeat_log_written(tmp_path):
    env = NovaDefenseEnv(log_dir=tmp_path, log_prefix="worker0")
    env.reset(seed=1)
    env.step(0)
    env.close()
    text = (tmp_path / "worker0.log").read_text(encoding="utf-8")
    assert "reset seed=1" in text
