"""
AI Controller for duel opponents.

This module provides the opponent decision policy: it reads the battle state
without mutating it, starts from the archetype's base weights, applies
situational multipliers and draws one action from the normalized weights.

Design Principles:
- Weights are rebuilt for every decision and exposed as read-only mappings
- All randomness comes from the injected random source
- Never raises for valid inputs; Attack is the fallback choice
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from ...core.data import BattleAction, BattleState, Difficulty, Fighter, Side
from ...core.engine import RandomSource
from ...core.events import AIDecisionMade, EventManager, LogMessage
from ..combat.elements import has_advantage, has_disadvantage
from .ai_behaviors import ARCHETYPE_WEIGHTS, AIArchetype, determine_archetype


ACTION_ORDER: tuple[BattleAction, ...] = tuple(BattleAction)


@dataclass(frozen=True)
class TacticalAssessment:
    """Snapshot of the situation the policy reacts to."""
    own_health_percent: float
    opponent_health_percent: float
    turn_number: int
    elemental_advantage: bool
    elemental_disadvantage: bool
    own_recent_actions: tuple[BattleAction, ...] = ()       # last 3, oldest first
    opponent_recent_actions: tuple[BattleAction, ...] = ()  # last 2, oldest first


@dataclass(frozen=True)
class AIDecision:
    """An AI decision with the weights and reasoning behind it."""
    action: BattleAction
    archetype: AIArchetype
    weights: Mapping[BattleAction, float] = field(default_factory=dict)
    reasoning: str = ""


def assess_situation(
    ai_fighter: Fighter,
    ai_health: int,
    opponent_fighter: Fighter,
    opponent_health: int,
    battle_state: BattleState,
    side: Side = Side.B,
) -> TacticalAssessment:
    """Summarize the battle from the AI side's point of view."""
    return TacticalAssessment(
        own_health_percent=ai_health / ai_fighter.max_health,
        opponent_health_percent=opponent_health / opponent_fighter.max_health,
        turn_number=battle_state.turn_number,
        elemental_advantage=has_advantage(ai_fighter.element, opponent_fighter.element),
        elemental_disadvantage=has_disadvantage(ai_fighter.element, opponent_fighter.element),
        own_recent_actions=tuple(battle_state.recent_actions(side, 3)),
        opponent_recent_actions=tuple(battle_state.recent_actions(side.opponent, 2)),
    )


def _scale(weights: np.ndarray, **multipliers: float) -> None:
    for name, factor in multipliers.items():
        weights[ACTION_ORDER.index(BattleAction[name.upper()])] *= factor


def compute_action_weights(
    archetype: AIArchetype,
    assessment: TacticalAssessment,
    difficulty: Difficulty,
) -> Mapping[BattleAction, float]:
    """
    Apply situational multipliers to the archetype's base weights.

    Multipliers compose multiplicatively, so their order does not matter.

    Returns:
        Read-only mapping from action to probability, summing to 1
    """
    base = ARCHETYPE_WEIGHTS[archetype]
    weights = np.array([base[action] for action in ACTION_ORDER], dtype=np.float64)

    # Own health
    if assessment.own_health_percent < 0.3:
        _scale(weights, item=2.5, defend=1.8, attack=0.6, special=0.7)
    elif assessment.own_health_percent < 0.5:
        _scale(weights, item=1.5, defend=1.3)

    # Finish them
    if assessment.opponent_health_percent < 0.25:
        _scale(weights, attack=1.8, special=2.0, defend=0.5, item=0.3)

    if assessment.elemental_advantage:
        _scale(weights, attack=1.4, special=1.6)
    elif assessment.elemental_disadvantage:
        _scale(weights, defend=1.5, item=1.3)

    if assessment.turn_number <= 2:
        if difficulty == Difficulty.HARD:
            _scale(weights, special=1.3, attack=1.2)
    elif assessment.turn_number >= 15:
        # Desperation
        _scale(weights, attack=1.5, special=1.3, defend=0.8)

    recent = assessment.own_recent_actions
    if len(recent) >= 2:
        if recent[-1] == recent[-2]:
            weights[ACTION_ORDER.index(recent[-1])] *= 0.5
        if BattleAction.SPECIAL not in recent and assessment.own_health_percent > 0.4:
            _scale(weights, special=1.4)

    if difficulty == Difficulty.HARD:
        if BattleAction.ATTACK in assessment.opponent_recent_actions:
            _scale(weights, defend=1.3)
        if BattleAction.SPECIAL in assessment.opponent_recent_actions:
            _scale(weights, defend=1.5)
    elif difficulty == Difficulty.EASY:
        _scale(weights, attack=1.2, defend=0.8)

    total = weights.sum()
    if total > 0:
        weights = weights / total
    else:
        weights = np.full(len(ACTION_ORDER), 1.0 / len(ACTION_ORDER))

    return MappingProxyType({action: float(weight) for action, weight in zip(ACTION_ORDER, weights)})


def weighted_choice(weights: Mapping[BattleAction, float], rng: RandomSource) -> BattleAction:
    """Cumulative draw in enumeration order; Attack if drift leaves the draw unresolved.

    The first action whose cumulative weight meets or exceeds the draw wins.
    Zero-weight actions are never chosen, even for a draw of exactly 0.
    """
    draw = float(rng.random())
    values = np.array([weights.get(action, 0.0) for action in ACTION_ORDER], dtype=np.float64)
    cumulative = np.cumsum(values)
    candidates = np.flatnonzero((values > 0) & (cumulative >= draw))
    if candidates.size:
        return ACTION_ORDER[int(candidates[0])]
    return BattleAction.ATTACK


def _describe(assessment: TacticalAssessment) -> str:
    notes = []
    if assessment.own_health_percent < 0.3:
        notes.append("low health")
    elif assessment.own_health_percent < 0.5:
        notes.append("wounded")
    if assessment.opponent_health_percent < 0.25:
        notes.append("opponent nearly down")
    if assessment.elemental_advantage:
        notes.append("elemental advantage")
    elif assessment.elemental_disadvantage:
        notes.append("elemental disadvantage")
    if assessment.turn_number >= 15:
        notes.append("late game")
    return ", ".join(notes) or "neutral position"


def decide(
    ai_fighter: Fighter,
    ai_health: int,
    opponent_fighter: Fighter,
    opponent_health: int,
    battle_state: BattleState,
    difficulty: Difficulty,
    rng: RandomSource,
    side: Side = Side.B,
) -> AIDecision:
    """Full decision including archetype, final weights and reasoning.

    The random source is consumed for the archetype roll (when one is needed)
    and then once for the weighted draw.
    """
    archetype = determine_archetype(ai_fighter, difficulty, rng)
    assessment = assess_situation(ai_fighter, ai_health, opponent_fighter, opponent_health, battle_state, side)
    weights = compute_action_weights(archetype, assessment, difficulty)
    action = weighted_choice(weights, rng)
    return AIDecision(
        action=action,
        archetype=archetype,
        weights=weights,
        reasoning=f"{archetype.value} fighter, {_describe(assessment)}",
    )


def choose_action(
    ai_fighter: Fighter,
    ai_health: int,
    opponent_fighter: Fighter,
    opponent_health: int,
    battle_state: BattleState,
    difficulty: Difficulty,
    rng: RandomSource,
    side: Side = Side.B,
) -> BattleAction:
    """Choose the AI side's action for the coming round."""
    return decide(
        ai_fighter, ai_health, opponent_fighter, opponent_health, battle_state, difficulty, rng, side
    ).action


class OpponentPolicy:
    """Policy bound to one side of a battle, a difficulty and a random source."""

    def __init__(
        self,
        rng: RandomSource,
        difficulty: Difficulty = Difficulty.MEDIUM,
        side: Side = Side.B,
        event_manager: Optional[EventManager] = None,
    ):
        self.rng = rng
        self.difficulty = difficulty
        self.side = side
        self.event_manager = event_manager

    def decide(self, battle_state: BattleState) -> AIDecision:
        own = battle_state.slot(self.side)
        opponent = battle_state.slot(self.side.opponent)
        decision = decide(
            own.fighter,
            own.current_health,
            opponent.fighter,
            opponent.current_health,
            battle_state,
            self.difficulty,
            self.rng,
            self.side,
        )

        if self.event_manager:
            self.event_manager.publish(
                AIDecisionMade(
                    turn=battle_state.turn_number,
                    side=self.side,
                    action=decision.action,
                    archetype=decision.archetype.value,
                    difficulty=self.difficulty,
                    reasoning=decision.reasoning,
                ),
                source="OpponentPolicy",
            )
            self.event_manager.publish(
                LogMessage(
                    turn=battle_state.turn_number,
                    message=f"{own.fighter.name} chooses {decision.action.value} ({decision.reasoning})",
                    category="AI",
                    level="DEBUG",
                    source="OpponentPolicy",
                ),
                source="OpponentPolicy",
            )

        return decision

    def choose_action(self, battle_state: BattleState) -> BattleAction:
        return self.decide(battle_state).action
