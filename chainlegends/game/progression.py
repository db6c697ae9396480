"""Fighter progression: minting stats, experience and level-ups."""

import math
from dataclasses import dataclass

from ..core.data import Element, Fighter
from ..core.engine import RandomSource


@dataclass(frozen=True)
class FighterStats:
    health: int
    attack: int
    defense: int
    speed: int


BASE_STATS = FighterStats(health=100, attack=20, defense=15, speed=10)

ELEMENT_BONUSES = {
    Element.FIRE: {"attack": 5, "speed": 3},
    Element.WATER: {"health": 10, "defense": 3},
    Element.EARTH: {"health": 15, "defense": 5, "speed": -2},
    Element.AIR: {"speed": 8, "attack": 2, "defense": -2},
}

XP_PER_LEVEL = 100
BASE_XP_GAIN = 50
MIN_XP_GAIN = 10


def generate_fighter_stats(element: Element, level: int = 1) -> FighterStats:
    """Stats for a freshly minted fighter: base + element bonus, scaled 10% per level."""
    if level < 1:
        raise ValueError(f"Level must be positive, got {level}")

    bonus = ELEMENT_BONUSES[element]
    level_multiplier = 1 + (level - 1) * 0.1

    def scaled(stat: str) -> int:
        return math.floor((getattr(BASE_STATS, stat) + bonus.get(stat, 0)) * level_multiplier)

    return FighterStats(
        health=scaled("health"),
        attack=scaled("attack"),
        defense=scaled("defense"),
        speed=scaled("speed"),
    )


def create_fighter(name: str, element: Element, level: int = 1, fighter_id: str = "", experience: int = 0) -> Fighter:
    stats = generate_fighter_stats(element, level)
    return Fighter(
        name=name,
        element=element,
        level=level,
        attack=stats.attack,
        defense=stats.defense,
        speed=stats.speed,
        max_health=stats.health,
        fighter_id=fighter_id,
        experience=experience,
    )


def calculate_experience_gained(winner: Fighter, loser: Fighter, rng: RandomSource) -> int:
    """Experience for a win: 50 base, +10 per level the loser is above, +/-10 variance, min 10."""
    xp = BASE_XP_GAIN
    if loser.level > winner.level:
        xp += (loser.level - winner.level) * 10
    xp += int(rng.integers(-10, 10))
    return max(MIN_XP_GAIN, xp)


def level_for_experience(experience: int) -> int:
    return experience // XP_PER_LEVEL + 1


def should_level_up(fighter: Fighter, new_experience: int) -> bool:
    return level_for_experience(new_experience) > level_for_experience(fighter.experience)
