"""AI Archetypes

This module defines the behavioral archetypes an AI fighter can adopt and the
base action weights each one starts from before situational adjustments.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ...core.data import BattleAction, Difficulty, Element, Fighter
from ...core.engine import RandomSource


class AIArchetype(Enum):
    """Behavior profiles that determine base action weights."""
    AGGRESSIVE = "aggressive"   # Favors attacks and specials
    DEFENSIVE = "defensive"     # Defends and heals
    BALANCED = "balanced"       # Spreads its choices evenly
    TACTICAL = "tactical"       # Leans on specials


def _weights(attack: float, defend: float, special: float, item: float) -> Mapping[BattleAction, float]:
    return MappingProxyType({
        BattleAction.ATTACK: attack,
        BattleAction.DEFEND: defend,
        BattleAction.SPECIAL: special,
        BattleAction.ITEM: item,
    })


ARCHETYPE_WEIGHTS: Mapping[AIArchetype, Mapping[BattleAction, float]] = MappingProxyType({
    AIArchetype.AGGRESSIVE: _weights(attack=0.5, defend=0.1, special=0.3, item=0.1),
    AIArchetype.DEFENSIVE: _weights(attack=0.2, defend=0.4, special=0.1, item=0.3),
    AIArchetype.BALANCED: _weights(attack=0.3, defend=0.25, special=0.25, item=0.2),
    AIArchetype.TACTICAL: _weights(attack=0.25, defend=0.25, special=0.35, item=0.15),
})

# (chance of first archetype, first, second) when stats are inconclusive
ELEMENT_BIAS = {
    Element.FIRE: (0.6, AIArchetype.AGGRESSIVE, AIArchetype.TACTICAL),
    Element.WATER: (0.6, AIArchetype.BALANCED, AIArchetype.DEFENSIVE),
    Element.EARTH: (0.7, AIArchetype.DEFENSIVE, AIArchetype.BALANCED),
    Element.AIR: (0.6, AIArchetype.TACTICAL, AIArchetype.AGGRESSIVE),
}


def determine_archetype(fighter: Fighter, difficulty: Difficulty, rng: RandomSource) -> AIArchetype:
    """Classify a fighter into an archetype.

    Easy difficulty ignores stats and flips a 70/30 Aggressive/Balanced coin.
    Otherwise stat skew decides, and the fighter's element breaks the tie
    with a weighted coin when the stats are inconclusive.
    """
    if difficulty == Difficulty.EASY:
        return AIArchetype.AGGRESSIVE if rng.random() < 0.7 else AIArchetype.BALANCED

    attack, defense, speed = fighter.attack, fighter.defense, fighter.speed

    if attack > defense + 5:
        return AIArchetype.AGGRESSIVE if attack > speed else AIArchetype.TACTICAL
    if defense > attack + 3:
        return AIArchetype.DEFENSIVE
    if speed > (attack + defense) / 2:
        return AIArchetype.TACTICAL

    chance, first, second = ELEMENT_BIAS[fighter.element]
    return first if rng.random() < chance else second
