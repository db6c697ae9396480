"""Core data structures and definitions.

This package contains fundamental battle types:
- data_structures.py: Fighter, CombatantSlot, ActionRecord and BattleState records
- game_enums.py: Centralized enums for elements, actions, sides and difficulty
"""

from .data_structures import ActionRecord, BattleState, CombatantSlot, CombatOutcome, Fighter, create_battle
from .game_enums import (
    ACTION_NAMES,
    ELEMENT_ADVANTAGES,
    ELEMENT_NAMES,
    ELEMENT_WEAKNESSES,
    OFFENSIVE_ACTIONS,
    BattleAction,
    BattleStatus,
    Difficulty,
    Element,
    Side,
)

__all__ = [
    "ActionRecord",
    "BattleState",
    "CombatantSlot",
    "CombatOutcome",
    "Fighter",
    "create_battle",
    "ACTION_NAMES",
    "ELEMENT_ADVANTAGES",
    "ELEMENT_NAMES",
    "ELEMENT_WEAKNESSES",
    "OFFENSIVE_ACTIONS",
    "BattleAction",
    "BattleStatus",
    "Difficulty",
    "Element",
    "Side",
]
