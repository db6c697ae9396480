"""
Configuration loader for battle rules.

This module handles loading and validation of the YAML file that tunes the
combat constants (critical chances, multipliers, turn limits). Every value has
a default, so a config file only needs to list what it overrides.
"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..errors import RulesConfigError


DEFAULT_RULES_PATH = "assets/config/battle_rules.yaml"


@dataclass(frozen=True)
class BattleRules:
    """Tunable combat constants."""
    # Attack
    attack_crit_chance: float = 0.15
    attack_crit_multiplier: float = 1.5

    # Special
    special_damage_multiplier: float = 1.3
    special_crit_chance: float = 0.25
    special_crit_multiplier: float = 1.2

    # Item
    heal_fraction: float = 0.25

    # Elements
    advantage_multiplier: float = 1.25
    disadvantage_multiplier: float = 0.8

    # Round flow
    speed_jitter: float = 10.0
    max_turns: int = 20
    turn_time_limit_ms: int = 10_000


# YAML section -> {yaml key: BattleRules field}
_SECTION_FIELDS = {
    "attack": {
        "crit_chance": "attack_crit_chance",
        "crit_multiplier": "attack_crit_multiplier",
    },
    "special": {
        "damage_multiplier": "special_damage_multiplier",
        "crit_chance": "special_crit_chance",
        "crit_multiplier": "special_crit_multiplier",
    },
    "item": {
        "heal_fraction": "heal_fraction",
    },
    "elements": {
        "advantage_multiplier": "advantage_multiplier",
        "disadvantage_multiplier": "disadvantage_multiplier",
    },
    "battle": {
        "speed_jitter": "speed_jitter",
        "max_turns": "max_turns",
        "turn_time_limit_ms": "turn_time_limit_ms",
    },
}

_PROBABILITY_FIELDS = ("attack_crit_chance", "special_crit_chance", "heal_fraction")


def _resolve_path(config_path: Union[str, Path]) -> Path:
    # Relative paths are resolved against the project root
    if os.path.isabs(config_path):
        return Path(config_path)
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / config_path


def rules_from_dict(data: dict[str, Any]) -> BattleRules:
    """Build rules from a parsed config mapping, starting from the defaults.

    Raises:
        RulesConfigError: On unknown sections/keys or values of the wrong type
    """
    if not isinstance(data, dict):
        raise RulesConfigError("Battle rules config must be a mapping")

    field_types = {f.name: f.type for f in fields(BattleRules)}
    overrides: dict[str, Any] = {}

    for section_name, section in data.items():
        if section_name not in _SECTION_FIELDS:
            raise RulesConfigError(f"Unknown battle rules section '{section_name}'")
        if not isinstance(section, dict):
            raise RulesConfigError(f"Section '{section_name}' must be a mapping")

        for key, value in section.items():
            field_name = _SECTION_FIELDS[section_name].get(key)
            if field_name is None:
                raise RulesConfigError(f"Unknown key '{key}' in section '{section_name}'")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise RulesConfigError(f"'{section_name}.{key}' must be a number, got {value!r}")

            if field_types[field_name] in (int, "int"):
                if int(value) != value:
                    raise RulesConfigError(f"'{section_name}.{key}' must be an integer, got {value!r}")
                value = int(value)
            else:
                value = float(value)
            overrides[field_name] = value

    rules = replace(BattleRules(), **overrides)
    validate_rules(rules)
    return rules


def validate_rules(rules: BattleRules) -> None:
    """Reject constants that would break resolver invariants."""
    for name in _PROBABILITY_FIELDS:
        value = getattr(rules, name)
        if not 0.0 <= value <= 1.0:
            raise RulesConfigError(f"{name} must be between 0 and 1, got {value}")
    if rules.max_turns < 1:
        raise RulesConfigError(f"max_turns must be positive, got {rules.max_turns}")
    if rules.turn_time_limit_ms < 0:
        raise RulesConfigError("turn_time_limit_ms cannot be negative")
    if rules.speed_jitter < 0:
        raise RulesConfigError("speed_jitter cannot be negative")
    for name in ("attack_crit_multiplier", "special_damage_multiplier", "special_crit_multiplier",
                 "advantage_multiplier", "disadvantage_multiplier"):
        if getattr(rules, name) <= 0:
            raise RulesConfigError(f"{name} must be positive")
    if not rules.advantage_multiplier >= 1.0 >= rules.disadvantage_multiplier:
        raise RulesConfigError(
            "Elemental multipliers must satisfy advantage_multiplier >= 1 >= disadvantage_multiplier, "
            f"got {rules.advantage_multiplier} and {rules.disadvantage_multiplier}"
        )


def load_battle_rules(config_path: Optional[Union[str, Path]] = None) -> BattleRules:
    """
    Load battle rules from a YAML file.

    Args:
        config_path: Path to the YAML file; defaults to the bundled rules file

    Returns:
        BattleRules with the file's overrides applied

    Raises:
        RulesConfigError: If the file is missing, unparsable or invalid
    """
    config_file = _resolve_path(config_path or DEFAULT_RULES_PATH)

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise RulesConfigError(f"Battle rules file not found: {config_file}")
    except yaml.YAMLError as e:
        raise RulesConfigError(f"Failed to parse battle rules YAML: {e}")

    return rules_from_dict(data)


DEFAULT_RULES = BattleRules()
