"""Centralized battle enums and constants.

This module contains all core enums that are used across the resolver,
the opponent policy and their collaborators, providing a single source of truth.
"""

from enum import Enum


class Element(Enum):
    """Fighter elements forming the advantage cycle Fire > Earth > Air > Water > Fire."""
    FIRE = 0
    WATER = 1
    EARTH = 2
    AIR = 3


class BattleAction(Enum):
    """Per-round choices available to a combatant.

    Declaration order is the fixed enumeration order used for weighted sampling.
    """
    ATTACK = "attack"
    DEFEND = "defend"
    SPECIAL = "special"
    ITEM = "item"


class Side(Enum):
    """The two combatant slots of a duel."""
    A = "player1"
    B = "player2"

    @property
    def opponent(self) -> "Side":
        return Side.B if self is Side.A else Side.A


class BattleStatus(Enum):
    """Battle lifecycle. The resolver only drives ACTIVE -> COMPLETED."""
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Difficulty(Enum):
    """Opponent policy difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Each element beats exactly one other element
ELEMENT_ADVANTAGES = {
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.AIR,
    Element.AIR: Element.WATER,
    Element.WATER: Element.FIRE,
}

ELEMENT_WEAKNESSES = {
    Element.FIRE: Element.WATER,
    Element.WATER: Element.AIR,
    Element.AIR: Element.EARTH,
    Element.EARTH: Element.FIRE,
}

ELEMENT_NAMES = {
    Element.FIRE: "Fire",
    Element.WATER: "Water",
    Element.EARTH: "Earth",
    Element.AIR: "Air",
}

ACTION_NAMES = {
    BattleAction.ATTACK: "Attack",
    BattleAction.DEFEND: "Defend",
    BattleAction.SPECIAL: "Special",
    BattleAction.ITEM: "Item",
}

# Actions affected by elemental matchups
OFFENSIVE_ACTIONS = frozenset({BattleAction.ATTACK, BattleAction.SPECIAL})
