import json

import pytest

from novadefense.core.config import (
    DEFAULT_CONFIG,
    GameConfig,
    apply_overrides,
    config_from_dict,
    config_to_dict,
    deep_merge,
    default_config_dict,
    dump_effective_config,
    load_config,
)


def test_defaults_round_through_the_sectioned_form():
    cfg = default_config_dict()
    assert cfg["schema_version"] == 1
    assert cfg["blast"]["missile_radius"] == 80.0
    assert cfg["layout"]["turret_ammo"] == [20, 40, 20]
    assert config_from_dict(cfg) == DEFAULT_CONFIG


def test_load_config_merges_file_and_overrides(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"match": {"win_score": 500}, "missile": {"speed": 8}}), encoding="utf-8")

    config = load_config(path, ["spawner.base_interval_ms=1500", "layout.turret_ammo=10,20,10"])

    assert config.win_score == 500
    assert config.missile_speed == 8.0
    assert config.base_interval_ms == 1500.0
    assert config.turret_ammo == (10, 20, 10)
    assert config.rocket_blast_radius == 30.0


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"match": {"win_scroe": 5}, "extra": {}}), encoding="utf-8")
    with pytest.raises(ValueError, match="match.win_scroe"):
        load_config(path)


def test_unsupported_schema_version():
    with pytest.raises(ValueError, match="schema_version"):
        config_from_dict({"schema_version": 2})


@pytest.mark.parametrize(
    "override",
    [
        "missile.speed=0",
        "spawner.min_interval_ms=3000",
        "layout.turret_slots=1,5",
        "layout.turret_slots=1,1,9",
        "layout.turret_slots=1,5,10",
        "blast.growth_rate=fast",
        "match.rocket_score=-20",
        "match.rocket_score=0",
        "spawner.interval_step_ms=-200",
        "blast.damage_radius=-1",
    ],
)
def test_invalid_values_are_rejected(override: str):
    with pytest.raises(ValueError):
        load_config(None, [override])


def test_malformed_override():
    with pytest.raises(ValueError):
        apply_overrides({}, ["missile.speed"])
    with pytest.raises(ValueError):
        apply_overrides({}, ["missile..speed=3"])


def test_deep_merge_keeps_untouched_keys():
    merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1}


def test_config_to_dict_reflects_custom_values():
    cfg = config_to_dict(GameConfig(win_score=200, turret_slots=(2, 8), turret_ammo=(5, 5)))
    assert cfg["match"]["win_score"] == 200
    assert cfg["layout"]["turret_slots"] == [2, 8]


def test_dump_effective_config_writes_json_and_hash(tmp_path):
    cfg = default_config_dict()
    sha = dump_effective_config(tmp_path / "run", cfg)
    written = json.loads((tmp_path / "run" / "effective_config.json").read_text(encoding="utf-8"))
    assert written == cfg
    assert (tmp_path / "run" / "effective_config.sha256").read_text(encoding="utf-8").strip() == sha
    assert len(sha) == 64


def test_shipped_config_loads():
    from pathlib import Path

    path = Path(__file__).resolve().parents[3] / "data" / "configs" / "hard.json"
    config = load_config(path)
    assert config.win_score == 1500
    assert config.turret_ammo == (15, 30, 15)
    assert config.missile_blast_radius == DEFAULT_CONFIG.missile_blast_radius


def test_layout_without_turrets_is_rejected():
    with pytest.raises(ValueError, match="at least one turret"):
        config_from_dict({"layout": {"turret_slots": [], "turret_ammo": []}})


def test_zero_interval_step_is_allowed():
    config = load_config(None, ["spawner.interval_step_ms=0", "blast.damage_radius=0"])
    assert config.interval_step_ms == 0.0
    assert config.damage_radius == 0.0
