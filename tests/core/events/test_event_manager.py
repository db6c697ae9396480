"""
Unit tests for the Event Manager system.

Tests the publisher-subscriber bus that lets chat, logging and UI listeners
react to a battle without the resolver knowing about them.
"""

import pytest
from unittest.mock import Mock

from chainlegends.core.data import BattleAction, Difficulty, Side
from chainlegends.core.events import (
    AIDecisionMade,
    BattleCompleted,
    EventManager,
    EventPriority,
    EventType,
    LogMessage,
    QueuedEvent,
    RoundStarted,
)


def round_started(turn: int = 1) -> RoundStarted:
    return RoundStarted(
        turn=turn,
        battle_id="battle-1",
        first_side=Side.A,
        action_a=BattleAction.ATTACK,
        action_b=BattleAction.DEFEND,
    )


def log_message(text: str = "hello", turn: int = 1) -> LogMessage:
    return LogMessage(turn=turn, message=text, category="BATTLE", level="INFO", source="test")


class TestBattleEvents:
    """Test event payload objects."""

    def test_event_type_is_set_automatically(self):
        """Each event class carries its own event type."""
        assert round_started().event_type == EventType.ROUND_STARTED
        assert log_message().event_type == EventType.LOG_MESSAGE
        assert BattleCompleted(turn=3, battle_id="b", winner=Side.B, reason="knockout").event_type \
            == EventType.BATTLE_COMPLETED

    def test_events_are_immutable(self):
        """Events cannot be modified after creation."""
        event = round_started()

        with pytest.raises(AttributeError):
            event.turn = 5  # type: ignore[misc]

    def test_ai_decision_defaults(self):
        event = AIDecisionMade(turn=0, side=Side.B, action=BattleAction.SPECIAL,
                               archetype="tactical", difficulty=Difficulty.HARD)

        assert event.reasoning == ""
        assert event.event_type == EventType.AI_DECISION_MADE


class TestQueuedEvent:
    """Test QueuedEvent ordering."""

    def test_queued_event_creation(self):
        """Test basic queued event creation."""
        event = round_started()
        queued = QueuedEvent(event=event, priority=EventPriority.HIGH, source="test")

        assert queued.event == event
        assert queued.priority == EventPriority.HIGH
        assert queued.source == "test"

    def test_higher_priority_sorts_first(self):
        """Higher priority values are processed first."""
        low = QueuedEvent(round_started(), EventPriority.LOW)
        critical = QueuedEvent(round_started(), EventPriority.CRITICAL)
        normal = QueuedEvent(round_started(), EventPriority.NORMAL)

        assert sorted([low, normal, critical]) == [critical, normal, low]

    def test_same_priority_keeps_publication_order(self):
        """Events with equal priority keep the order they were created in."""
        first = QueuedEvent(round_started(), EventPriority.NORMAL)
        second = QueuedEvent(round_started(), EventPriority.NORMAL)

        assert first < second
        assert not second < first


class TestEventManager:
    """Test EventManager functionality."""

    def test_event_manager_creation(self, event_manager):
        """Test event manager initialization."""
        stats = event_manager.get_statistics()

        assert not event_manager.enable_debug_logging
        assert stats['events_published'] == 0
        assert stats['events_processed'] == 0

    def test_subscribe_counts(self, event_manager):
        event_manager.subscribe(EventType.ROUND_STARTED, Mock())
        event_manager.subscribe_all(Mock())

        stats = event_manager.get_statistics()
        assert stats['subscribers_count'] == 1
        assert stats['universal_subscribers_count'] == 1

    def test_publish_queues_until_processed(self, event_manager):
        """Published events wait in the queue until process_events."""
        subscriber = Mock()
        event_manager.subscribe(EventType.ROUND_STARTED, subscriber)

        event_manager.publish(round_started())

        subscriber.assert_not_called()
        assert event_manager.has_queued_events()

        assert event_manager.process_events() == 1
        subscriber.assert_called_once()
        assert not event_manager.has_queued_events()

    def test_subscriber_only_receives_its_type(self, event_manager):
        rounds = Mock()
        event_manager.subscribe(EventType.ROUND_STARTED, rounds)

        event_manager.publish(log_message())
        event_manager.process_events()

        rounds.assert_not_called()

    def test_universal_subscriber_receives_everything(self, event_manager):
        everything = Mock()
        event_manager.subscribe_all(everything)

        event_manager.publish(round_started())
        event_manager.publish(log_message())
        event_manager.process_events()

        assert everything.call_count == 2

    def test_publish_immediate_bypasses_queue(self, event_manager):
        """Immediate events are dispatched synchronously."""
        subscriber = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, subscriber)

        event_manager.publish_immediate(log_message())

        subscriber.assert_called_once()
        assert not event_manager.has_queued_events()
        assert event_manager.get_statistics()['events_published'] == 1

    def test_priority_order(self, event_manager):
        """Higher priority events are dispatched before earlier normal ones."""
        received = []
        event_manager.subscribe(EventType.LOG_MESSAGE, lambda event: received.append(event.message))

        event_manager.publish(log_message("normal"))
        event_manager.publish(log_message("low"), priority=EventPriority.LOW)
        event_manager.publish(log_message("high"), priority=EventPriority.HIGH)
        event_manager.process_events()

        assert received == ["high", "normal", "low"]

    def test_max_events_leaves_remainder_queued(self, event_manager):
        received = []
        event_manager.subscribe(EventType.LOG_MESSAGE, lambda event: received.append(event.message))
        for text in ("one", "two", "three"):
            event_manager.publish(log_message(text))

        assert event_manager.process_events(max_events=2) == 2
        assert received == ["one", "two"]
        assert event_manager.get_statistics()['events_queued'] == 1

        event_manager.process_events()
        assert received == ["one", "two", "three"]

    def test_failing_subscriber_does_not_block_others(self, event_manager):
        """A subscriber exception is counted and the next subscriber still runs."""
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, failing)
        event_manager.subscribe(EventType.LOG_MESSAGE, healthy)

        event_manager.publish(log_message())
        event_manager.process_events()

        healthy.assert_called_once()
        assert event_manager.get_statistics()['subscriber_errors'] == 1

    def test_unsubscribe(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.LOG_MESSAGE, subscriber)

        assert event_manager.unsubscribe(EventType.LOG_MESSAGE, subscriber) is True
        assert event_manager.unsubscribe(EventType.LOG_MESSAGE, subscriber) is False

        event_manager.publish(log_message())
        event_manager.process_events()
        subscriber.assert_not_called()

    def test_unsubscribe_all(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe_all(subscriber)

        assert event_manager.unsubscribe_all(subscriber) is True
        assert event_manager.unsubscribe_all(subscriber) is False

    def test_clear_queue(self, event_manager):
        event_manager.publish(log_message())
        event_manager.publish(log_message())

        assert event_manager.clear_queue() == 2
        assert event_manager.process_events() == 0

    def test_recent_events_history(self):
        """History is bounded by history_size."""
        manager = EventManager(history_size=2)
        for turn in range(3):
            manager.publish(round_started(turn))
        manager.process_events()

        recent = manager.get_recent_events()

        assert [entry['turn'] for entry in recent] == [1, 2]
        assert recent[0]['event_type'] == "RoundStarted"
        assert recent[0]['priority'] == "NORMAL"

    def test_debug_callback(self):
        """Debug messages reach the callback only when debug logging is enabled."""
        callback = Mock()
        manager = EventManager(enable_debug_logging=True)
        manager.set_debug_callback(callback)

        manager.publish(log_message(), source="tester")

        callback.assert_called()
        assert callback.call_args.args[0].startswith("[EVENT] Published LogMessage")

    def test_shutdown_clears_everything(self, event_manager):
        event_manager.subscribe(EventType.LOG_MESSAGE, Mock())
        event_manager.publish(log_message())

        event_manager.shutdown()

        stats = event_manager.get_statistics()
        assert stats['subscribers_count'] == 0
        assert stats['events_queued'] == 0
