import pytest

from novadefense.ai.env import NovaDefenseEnv
from novadefense.ai.policies.baseline import IdlePolicy, InterceptPolicy, RandomPolicy, make_policy
from novadefense.ai.training.evaluate import run_episode


def test_make_policy_names():
    assert isinstance(make_policy("intercept"), InterceptPolicy)
    assert isinstance(make_policy("random", seed=1), RandomPolicy)
    assert isinstance(make_policy("idle"), IdlePolicy)
    with pytest.raises(ValueError):
        make_policy("aimbot")


def test_intercept_policy_engages_incoming_rockets():
    env = NovaDefenseEnv()
    env.reset(seed=4)
    policy = InterceptPolicy()
    policy.reset(env)
    for _ in range(400):
        _, _, terminated, _, _ = env.step(policy.next_action(env))
        if terminated:
            break
    s = env.engine.state
    assert s.missiles_fired > 0
    assert s.rockets_destroyed > 0


def test_intercept_policy_holds_fire_with_empty_sky():
    env = NovaDefenseEnv()
    env.reset(seed=4)
    policy = InterceptPolicy()
    policy.reset(env)
    assert env.engine.state.rockets == []
    assert env.step(policy.next_action(env))[4]["fired"] is False


def test_random_policy_is_seeded():
    env = NovaDefenseEnv()
    env.reset(seed=0)
    a = RandomPolicy(seed=9, fire_prob=0.5)
    b = RandomPolicy(seed=9, fire_prob=0.5)
    assert [a.next_action(env) for _ in range(20)] == [b.next_action(env) for _ in range(20)]


def test_run_episode_reports_final_state():
    result = run_episode(policy_name="idle", seed=1, max_steps=10)
    assert result.steps == 10
    assert result.missiles_fired == 0
    assert result.status == "IN_PROGRESS"
    assert result.stop_reason == "max_steps"
