"""
Battle calculation system for damage prediction and forecasting.

This module provides battle forecast calculations separate from actual combat
resolution, allowing the UI to show damage/crit predictions per action without
rolling any dice or touching battle state.
"""
import math
from dataclasses import dataclass

from ..core.data import BattleAction, Fighter
from ..core.engine import DEFAULT_RULES, BattleRules
from .combat.elements import get_elemental_multiplier


@dataclass(frozen=True)
class ActionForecast:
    """Predicted outcome range for one action."""
    action: BattleAction
    min_damage: int
    max_damage: int
    expected_damage: float
    crit_chance: int  # percentage 0-100
    heal_amount: int = 0
    elemental_multiplier: float = 1.0


@dataclass(frozen=True)
class BattleForecast:
    """Forecast of every action an actor could take against a target."""
    actor_name: str
    target_name: str
    actions: dict[BattleAction, ActionForecast]

    def best_damage_action(self) -> BattleAction:
        """Action with the highest expected damage."""
        return max(self.actions.values(), key=lambda forecast: forecast.expected_damage).action


class BattleCalculator:
    """Calculates battle forecasts for damage prediction."""

    @staticmethod
    def calculate_forecast(actor: Fighter, target: Fighter, rules: BattleRules = DEFAULT_RULES) -> BattleForecast:
        """
        Calculate a complete forecast between two fighters.

        Args:
            actor: The fighter choosing an action
            target: The opposing fighter
            rules: Combat constants

        Returns:
            BattleForecast with one entry per action
        """
        multiplier = get_elemental_multiplier(actor.element, target.element, rules)

        attack_base = max(1, actor.attack - target.defense // 2)
        special_base = math.floor(actor.attack * rules.special_damage_multiplier)

        forecasts = {
            BattleAction.ATTACK: BattleCalculator._offensive_forecast(
                BattleAction.ATTACK, attack_base, rules.attack_crit_chance, rules.attack_crit_multiplier, multiplier
            ),
            BattleAction.SPECIAL: BattleCalculator._offensive_forecast(
                BattleAction.SPECIAL, special_base, rules.special_crit_chance, rules.special_crit_multiplier, multiplier
            ),
            BattleAction.DEFEND: ActionForecast(BattleAction.DEFEND, 0, 0, 0.0, 0),
            BattleAction.ITEM: ActionForecast(
                BattleAction.ITEM, 0, 0, 0.0, 0,
                heal_amount=math.floor(actor.max_health * rules.heal_fraction),
            ),
        }

        return BattleForecast(actor_name=actor.name, target_name=target.name, actions=forecasts)

    @staticmethod
    def _offensive_forecast(
        action: BattleAction,
        base_damage: int,
        crit_chance: float,
        crit_multiplier: float,
        elemental_multiplier: float,
    ) -> ActionForecast:
        """Damage range from a non-critical to a critical hit, elemental modifier included."""
        normal = BattleCalculator._apply_elemental(base_damage, elemental_multiplier)
        critical = BattleCalculator._apply_elemental(math.floor(base_damage * crit_multiplier), elemental_multiplier)
        expected = normal * (1 - crit_chance) + critical * crit_chance

        return ActionForecast(
            action=action,
            min_damage=min(normal, critical),
            max_damage=max(normal, critical),
            expected_damage=round(expected, 2),
            crit_chance=round(crit_chance * 100),
            elemental_multiplier=elemental_multiplier,
        )

    @staticmethod
    def _apply_elemental(damage: int, multiplier: float) -> int:
        if multiplier != 1.0:
            damage = math.floor(damage * multiplier)
        return max(0, damage)

    @staticmethod
    def turns_to_knockout(forecast: ActionForecast, target_health: int) -> int:
        """Rounds of the same action needed to knock out the target at expected damage (0 if never)."""
        if forecast.expected_damage <= 0:
            return 0
        return math.ceil(target_health / forecast.expected_damage)
