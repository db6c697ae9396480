"""Combat system components.

This package contains duel resolution logic:
- combat_resolver.py: Single-action outcomes and round advancement
- elements.py: Elemental advantage cycle
"""

from .combat_resolver import (
    CombatResolver,
    advance_round,
    compute_outcome,
    describe_record,
    determine_turn_order,
    validate_round,
)
from .elements import get_elemental_multiplier, has_advantage, has_disadvantage

__all__ = [
    "CombatResolver",
    "advance_round",
    "compute_outcome",
    "describe_record",
    "determine_turn_order",
    "validate_round",
    "get_elemental_multiplier",
    "has_advantage",
    "has_disadvantage",
]
