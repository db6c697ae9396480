"""Event system for publisher-subscriber communication.

This package contains the event-driven architecture:
- event_manager.py: Publisher-subscriber event routing
- events.py: Battle event definitions
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    BattleEvent,
    EventType,
    RoundStarted,
    ActionResolved,
    RoundResolved,
    BattleCompleted,
    AIDecisionMade,
    LogMessage,
    DebugMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "BattleEvent",
    "EventType",
    "RoundStarted",
    "ActionResolved",
    "RoundResolved",
    "BattleCompleted",
    "AIDecisionMade",
    "LogMessage",
    "DebugMessage",
    "LogSaveRequested",
]
