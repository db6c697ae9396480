"""Battle events and their payloads.

This module defines every event the battle core emits so that collaborators
(log manager, chat quips, UI renderers, settlement) can react to a duel
without reaching into the resolver.

Event Design Principles:
- Events are immutable dataclasses
- All events carry the turn number they belong to
- Events reference sides and enums, never mutable state objects
- One event per resolved action, one per round, one per battle completion
"""

from dataclasses import dataclass, field
from typing import Optional
from abc import ABC
from enum import Enum, auto

from ..data import BattleAction, Difficulty, Element, Side


class EventType(Enum):
    """Types of battle events that listeners can subscribe to."""
    # Combat Events
    ROUND_STARTED = auto()
    ACTION_RESOLVED = auto()
    ROUND_RESOLVED = auto()
    BATTLE_COMPLETED = auto()

    # AI Events
    AI_DECISION_MADE = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class BattleEvent(ABC):
    """Base class for all battle events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class RoundStarted(BattleEvent):
    """Event emitted before a round's actions are resolved."""
    battle_id: str
    first_side: Side
    action_a: BattleAction
    action_b: BattleAction

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ROUND_STARTED)


@dataclass(frozen=True)
class ActionResolved(BattleEvent):
    """Event emitted once per combatant action, in resolution order."""
    battle_id: str
    side: Side
    fighter_name: str
    element: Element
    action: BattleAction
    damage: int
    critical: bool
    effect: str
    actor_health: int
    target_health: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_RESOLVED)


@dataclass(frozen=True)
class RoundResolved(BattleEvent):
    """Event emitted after both actions of a round have been applied."""
    battle_id: str
    player1_health: int
    player2_health: int
    turn_deadline: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_RESOLVED)


@dataclass(frozen=True)
class BattleCompleted(BattleEvent):
    """Event emitted exactly once when a battle transitions to completed."""
    battle_id: str
    winner: Side
    reason: str  # "knockout" or "turn_limit"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_COMPLETED)


@dataclass(frozen=True)
class AIDecisionMade(BattleEvent):
    """Event emitted when the opponent policy picks an action."""
    side: Side
    action: BattleAction
    archetype: str
    difficulty: Difficulty
    reasoning: str = ""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.AI_DECISION_MADE)


@dataclass(frozen=True)
class LogMessage(BattleEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(BattleEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(BattleEvent):
    """Event emitted when a caller asks for the log buffer to be written to disk."""
    source: str = "unknown"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
