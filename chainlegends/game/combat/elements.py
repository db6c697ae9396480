"""Elemental matchup rules shared by the resolver and the opponent policy."""

from ...core.data import ELEMENT_ADVANTAGES, ELEMENT_WEAKNESSES, Element
from ...core.engine import DEFAULT_RULES, BattleRules


def has_advantage(attacker: Element, defender: Element) -> bool:
    return ELEMENT_ADVANTAGES[attacker] == defender


def has_disadvantage(attacker: Element, defender: Element) -> bool:
    return ELEMENT_WEAKNESSES[attacker] == defender


def get_elemental_multiplier(attacker: Element, defender: Element, rules: BattleRules = DEFAULT_RULES) -> float:
    """Damage multiplier for ``attacker`` hitting ``defender``.

    Fire > Earth > Air > Water > Fire. Same-element and opposite-element
    matchups are neutral.
    """
    if has_advantage(attacker, defender):
        return rules.advantage_multiplier
    if has_disadvantage(attacker, defender):
        return rules.disadvantage_multiplier
    return 1.0
