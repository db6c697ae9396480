"""Core engine plumbing.

This package contains the ambient services the battle systems depend on:
- rules_config.py: Tunable combat constants and their YAML loader
- random_source.py: Injectable random and clock sources
"""

from .rules_config import (
    DEFAULT_RULES,
    DEFAULT_RULES_PATH,
    BattleRules,
    load_battle_rules,
    rules_from_dict,
    validate_rules,
)
from .random_source import Clock, RandomSource, create_rng, system_clock

__all__ = [
    "DEFAULT_RULES",
    "DEFAULT_RULES_PATH",
    "BattleRules",
    "load_battle_rules",
    "rules_from_dict",
    "validate_rules",
    "Clock",
    "RandomSource",
    "create_rng",
    "system_clock",
]
