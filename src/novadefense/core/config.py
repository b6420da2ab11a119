from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import hashlib
import json
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class GameConfig:
    # match
    win_score: int = 1000
    rocket_score: int = 20

    # spawner
    base_interval_ms: float = 2000.0
    min_interval_ms: float = 500.0
    interval_step_ms: float = 200.0
    interval_score_step: float = 100.0
    rocket_base_speed: float = 0.8
    rocket_speed_score_scale: float = 500.0

    # blast
    rocket_blast_radius: float = 30.0
    missile_blast_radius: float = 80.0
    damage_radius: float = 30.0
    growth_rate: float = 1.5
    shrink_rate: float = 0.8

    # missile
    missile_speed: float = 6.0
    launch_offset: float = 50.0

    # layout
    city_count: int = 6
    turret_slots: tuple[int, ...] = (1, 5, 9)
    turret_ammo: tuple[int, ...] = (20, 40, 20)
    ground_offset: float = 20.0

    @property
    def slot_count(self) -> int:
        return self.city_count + len(self.turret_slots)


DEFAULT_CONFIG = GameConfig()

_SUPPORTED_SCHEMA_VERSIONS = {1}

# JSON section -> {json key: GameConfig field}
_SECTIONS: dict[str, dict[str, str]] = {
    "match": {
        "win_score": "win_score",
        "rocket_score": "rocket_score",
    },
    "spawner": {
        "base_interval_ms": "base_interval_ms",
        "min_interval_ms": "min_interval_ms",
        "interval_step_ms": "interval_step_ms",
        "interval_score_step": "interval_score_step",
        "rocket_base_speed": "rocket_base_speed",
        "rocket_speed_score_scale": "rocket_speed_score_scale",
    },
    "blast": {
        "rocket_radius": "rocket_blast_radius",
        "missile_radius": "missile_blast_radius",
        "damage_radius": "damage_radius",
        "growth_rate": "growth_rate",
        "shrink_rate": "shrink_rate",
    },
    "missile": {
        "speed": "missile_speed",
        "launch_offset": "launch_offset",
    },
    "layout": {
        "city_count": "city_count",
        "turret_slots": "turret_slots",
        "turret_ammo": "turret_ammo",
        "ground_offset": "ground_offset",
    },
}

_INT_FIELDS = {"win_score", "rocket_score", "city_count"}
_TUPLE_FIELDS = {"turret_slots", "turret_ammo"}
_POSITIVE_FIELDS = {
    "win_score",
    "rocket_score",
    "base_interval_ms",
    "min_interval_ms",
    "interval_score_step",
    "rocket_base_speed",
    "rocket_speed_score_scale",
    "rocket_blast_radius",
    "missile_blast_radius",
    "growth_rate",
    "shrink_rate",
    "missile_speed",
}
_NON_NEGATIVE_FIELDS = {
    "interval_step_ms",
    "damage_radius",
    "launch_offset",
    "ground_offset",
}


def default_config_dict() -> dict[str, Any]:
    return config_to_dict(DEFAULT_CONFIG)


def config_to_dict(config: GameConfig) -> dict[str, Any]:
    values = asdict(config)
    out: dict[str, Any] = {"schema_version": 1}
    for section, keys in _SECTIONS.items():
        out[section] = {}
        for key, field_name in keys.items():
            value = values[field_name]
            out[section][key] = list(value) if isinstance(value, tuple) else value
    return out


def config_from_dict(cfg: dict[str, Any]) -> GameConfig:
    """Build a GameConfig from a (possibly partial) sectioned dict."""
    _validate_config(cfg)
    kwargs: dict[str, Any] = {}
    for section, keys in _SECTIONS.items():
        section_cfg = cfg.get(section) or {}
        for key, field_name in keys.items():
            if key not in section_cfg:
                continue
            kwargs[field_name] = _coerce(field_name, section_cfg[key], f"{section}.{key}")
    config = GameConfig(**kwargs)
    _validate_values(config)
    return config


def load_json_config(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"config root must be a JSON object: {p}")
    _validate_config(payload)
    return payload


def load_config(path: str | Path | None = None, overrides_list: list[str] | None = None) -> GameConfig:
    cfg = default_config_dict()
    if path is not None:
        cfg = deep_merge(cfg, load_json_config(path))
    cfg = apply_overrides(cfg, overrides_list)
    return config_from_dict(cfg)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in out and isinstance(out[key], dict) and isinstance(value, dict):
            out[key] = deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def apply_overrides(cfg: dict[str, Any], overrides_list: list[str] | None) -> dict[str, Any]:
    if not overrides_list:
        return cfg

    out = cfg
    for item in overrides_list:
        if "=" not in item:
            raise ValueError(f"override must contain '=': {item}")
        path_str, value_str = item.split("=", 1)
        if not path_str:
            raise ValueError(f"override path empty: {item}")
        keys = path_str.split(".")
        if any(not key for key in keys):
            raise ValueError(f"override path has empty segment: {item}")
        value = _cast_scalar(value_str)

        cursor = out
        for key in keys[:-1]:
            if key not in cursor or not isinstance(cursor[key], dict):
                cursor[key] = {}
            cursor = cursor[key]
        cursor[keys[-1]] = value
    return out


def dump_effective_config(run_dir: str | Path, cfg: dict[str, Any]) -> str:
    run_path = Path(run_dir)
    run_path.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(cfg, sort_keys=True, ensure_ascii=False, indent=2).encode("utf-8")
    sha = hashlib.sha256(payload).hexdigest()

    eff_path = run_path / "effective_config.json"
    with eff_path.open("w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2, sort_keys=True)

    (run_path / "effective_config.sha256").write_text(sha + "\n", encoding="utf-8")
    return sha


def _cast_scalar(value: str) -> Any:
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if "," in value:
        return [_cast_scalar(part) for part in value.split(",") if part.strip()]
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce(field_name: str, value: Any, label: str) -> Any:
    if field_name in _TUPLE_FIELDS:
        if not isinstance(value, (list, tuple)) or not all(_is_number(v) for v in value):
            raise ValueError(f"config '{label}' must be a list of numbers")
        return tuple(int(v) for v in value)
    if not _is_number(value):
        raise ValueError(f"config '{label}' must be a number")
    if field_name in _INT_FIELDS:
        return int(value)
    return float(value)


def _validate_config(cfg: dict[str, Any]) -> None:
    unknown = _find_unknown_keys(cfg)
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ValueError(f"unknown config keys: {unknown_str}")

    schema_version = cfg.get("schema_version", 1)
    if schema_version not in _SUPPORTED_SCHEMA_VERSIONS:
        raise ValueError(f"unsupported schema_version: {schema_version}")

    for section in _SECTIONS:
        value = cfg.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"config '{section}' must be a JSON object")


def _validate_values(config: GameConfig) -> None:
    for f in fields(config):
        value = getattr(config, f.name)
        if f.name in _POSITIVE_FIELDS and value <= 0:
            raise ValueError(f"{f.name} must be > 0")
        if f.name in _NON_NEGATIVE_FIELDS and value < 0:
            raise ValueError(f"{f.name} must be >= 0")
    if config.min_interval_ms > config.base_interval_ms:
        raise ValueError("spawner.min_interval_ms must be <= spawner.base_interval_ms")
    if config.city_count < 0:
        raise ValueError("layout.city_count must be >= 0")
    if not config.turret_slots:
        raise ValueError("layout.turret_slots must name at least one turret")
    if len(config.turret_slots) != len(config.turret_ammo):
        raise ValueError("layout.turret_slots and layout.turret_ammo must have the same length")
    if any(ammo < 0 for ammo in config.turret_ammo):
        raise ValueError("layout.turret_ammo must be >= 0")
    slots = config.turret_slots
    if len(set(slots)) != len(slots) or any(s < 1 or s > config.slot_count for s in slots):
        raise ValueError(f"layout.turret_slots must be distinct values in 1..{config.slot_count}")


def _find_unknown_keys(cfg: dict[str, Any]) -> list[str]:
    unknown: list[str] = []
    for key, value in cfg.items():
        if key == "schema_version":
            continue
        if key not in _SECTIONS:
            unknown.append(key)
            continue
        if isinstance(value, dict):
            unknown.extend(f"{key}.{sub}" for sub in value if sub not in _SECTIONS[key])
    return unknown
