"""AI system components.

This package contains the opponent decision policy:
- ai_controller.py: Situational weighting and weighted action draw
- ai_behaviors.py: Archetypes, base weights and archetype classification
"""

from .ai_controller import (
    ACTION_ORDER,
    AIDecision,
    OpponentPolicy,
    TacticalAssessment,
    assess_situation,
    choose_action,
    compute_action_weights,
    decide,
    weighted_choice,
)
from .ai_behaviors import ARCHETYPE_WEIGHTS, AIArchetype, determine_archetype

__all__ = [
    "ACTION_ORDER",
    "AIDecision",
    "OpponentPolicy",
    "TacticalAssessment",
    "assess_situation",
    "choose_action",
    "compute_action_weights",
    "decide",
    "weighted_choice",
    "ARCHETYPE_WEIGHTS",
    "AIArchetype",
    "determine_archetype",
]
