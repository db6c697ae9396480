"""
Integration tests for complete battles.

Runs the battle manager end to end with the resolver, the opponent policy,
the log manager and the quip listener all attached to one event bus.
"""
import numpy as np
import pytest

from chainlegends.core.data import BattleAction, BattleStatus, Difficulty, Element, Side, create_battle
from chainlegends.core.engine import BattleRules, load_battle_rules
from chainlegends.core.errors import BattleContractError
from chainlegends.core.events import EventManager, EventType
from chainlegends.game.battle_manager import BattleManager
from chainlegends.game.battle_quips import BattleQuipGenerator
from chainlegends.game.battle_transcript import generate_battle_log, transcript_hash
from chainlegends.game.log_manager import LogCategory, LogLevel, LogManager
from chainlegends.game.progression import create_fighter
from tests.test_utils import ScriptedRandom, assert_health_bounds


def minted_battle(element_a=Element.FIRE, element_b=Element.EARTH):
    return create_battle(
        create_fighter("Blaze", element_a, fighter_id="nft-1"),
        create_fighter("Boulder", element_b, fighter_id="nft-2"),
        "0xA",
        "0xB",
        battle_id="battle-42",
        created_at=1_000,
    )


AI_VS_AI = {Side.A: Difficulty.HARD, Side.B: Difficulty.MEDIUM}


@pytest.mark.integration
class TestAIBattles:
    """AI-controlled battles from first round to settlement."""

    @pytest.mark.parametrize("seed", range(8))
    def test_battle_completes_and_settles(self, fixed_clock, seed):
        event_manager = EventManager()
        completions = []
        event_manager.subscribe(EventType.BATTLE_COMPLETED, completions.append)
        manager = BattleManager(minted_battle(), np.random.default_rng(seed), event_manager,
                                clock=fixed_clock, ai_sides=AI_VS_AI)

        final = manager.run_to_completion()
        result = manager.settle()

        assert manager.is_finished
        assert final.status == BattleStatus.COMPLETED
        assert 1 <= final.turn_number <= 20
        assert len(final.actions) == 2 * final.turn_number
        assert_health_bounds(final)
        assert len(completions) == 1
        assert completions[0].winner == final.winner

        assert result.winner == final.winner
        assert result.winner_address == final.slot(final.winner).address
        assert result.loser_level == 1
        assert result.turn_count == final.turn_number
        assert result.transcript_hash == transcript_hash(final)
        assert 40 <= result.experience_gained <= 59

    def test_same_seed_same_battle(self, fixed_clock):
        def play(seed):
            manager = BattleManager(minted_battle(), np.random.default_rng(seed), clock=fixed_clock,
                                    ai_sides=AI_VS_AI)
            return manager.run_to_completion().to_dict()

        assert play(2024) == play(2024)

    @pytest.mark.parametrize("seed", range(5))
    def test_quip_listener_does_not_change_outcome(self, fixed_clock, seed):
        """A chat listener on its own child stream leaves a seeded battle untouched."""
        def play(with_quips):
            rng = np.random.default_rng(seed)
            event_manager = EventManager()
            if with_quips:
                BattleQuipGenerator(event_manager, rng.spawn(1)[0])
            manager = BattleManager(minted_battle(), rng, event_manager, clock=fixed_clock, ai_sides=AI_VS_AI)
            return manager.run_to_completion().to_dict()

        assert play(with_quips=True) == play(with_quips=False)

    def test_settle_is_idempotent(self, fixed_clock):
        reward_rng = ScriptedRandom(integers=[7, -3, 9])
        manager = BattleManager(minted_battle(), np.random.default_rng(11), clock=fixed_clock,
                                ai_sides=AI_VS_AI, reward_rng=reward_rng)
        manager.run_to_completion()

        results = [manager.settle() for _ in range(4)]

        assert all(result == results[0] for result in results)
        assert results[0].experience_gained == 57
        assert reward_rng.calls == ["integers"]

    def test_settle_does_not_touch_battle_stream(self, fixed_clock):
        rng = np.random.default_rng(4)
        manager = BattleManager(minted_battle(), rng, clock=fixed_clock, ai_sides=AI_VS_AI,
                                reward_rng=ScriptedRandom())
        manager.run_to_completion()
        before = rng.bit_generator.state

        manager.settle()

        assert rng.bit_generator.state == before

    def test_turn_limit_rules(self, fixed_clock):
        manager = BattleManager(minted_battle(), np.random.default_rng(5), clock=fixed_clock,
                                rules=BattleRules(max_turns=3), ai_sides=AI_VS_AI)

        final = manager.run_to_completion()

        assert final.turn_number <= 3
        assert final.status == BattleStatus.COMPLETED

    def test_bundled_rules_file(self, fixed_clock):
        manager = BattleManager(minted_battle(Element.AIR, Element.WATER), np.random.default_rng(9),
                                clock=fixed_clock, rules=load_battle_rules(), ai_sides=AI_VS_AI)

        assert manager.run_to_completion().winner is not None

    def test_listeners_see_the_whole_battle(self, fixed_clock):
        event_manager = EventManager()
        logs = LogManager(event_manager)
        logs.set_log_level(LogLevel.DEBUG)
        quips = BattleQuipGenerator(event_manager, np.random.default_rng(1), max_lines=1000)
        manager = BattleManager(minted_battle(), np.random.default_rng(77), event_manager,
                                clock=fixed_clock, ai_sides=AI_VS_AI)

        final = manager.run_to_completion()

        battle_lines = [m.text for m in logs.get_messages(categories={LogCategory.BATTLE})]
        ai_lines = logs.get_messages(categories={LogCategory.AI})
        assert battle_lines[-1].startswith(final.slot(final.winner).fighter.name + " wins the battle!")
        assert len(battle_lines) == len(final.actions) + 1
        assert len(ai_lines) == 2 * final.turn_number
        assert len(quips.lines) == len(final.actions)
        assert not event_manager.has_queued_events()
        assert event_manager.get_statistics()['subscriber_errors'] == 0

        transcript = generate_battle_log(final)
        assert transcript[0] == "Battle begins! Blaze vs Boulder"
        assert transcript[1:-1] == battle_lines[:-1]


@pytest.mark.integration
class TestHumanBattles:
    """Battles with at least one caller-controlled side."""

    def test_missing_action_uses_timeout_action(self, fixed_clock):
        event_manager = EventManager()
        logs = LogManager(event_manager)
        manager = BattleManager(minted_battle(), ScriptedRandom(), event_manager,
                                clock=fixed_clock, ai_sides={Side.B: Difficulty.EASY})

        state = manager.play_round()

        assert state.records_for(Side.A)[0].action == BattleAction.DEFEND
        warnings = logs.get_messages(categories={LogCategory.WARNING})
        assert warnings[0].text == "player1 missed the deadline, using defend"
        assert warnings[0].level == LogLevel.WARNING

    def test_submitted_action_for_ai_side_is_ignored(self, fixed_clock):
        # Easy coin 0.99 -> Balanced, draw 0.99 -> Item
        manager = BattleManager(minted_battle(), ScriptedRandom(), clock=fixed_clock,
                                ai_sides={Side.B: Difficulty.EASY})

        state = manager.play_round(BattleAction.ATTACK, BattleAction.SPECIAL)

        assert state.records_for(Side.A)[0].action == BattleAction.ATTACK
        assert state.records_for(Side.B)[0].action == BattleAction.ITEM

    def test_two_humans(self, fixed_clock):
        manager = BattleManager(minted_battle(), ScriptedRandom(), clock=fixed_clock)

        for _ in range(3):
            manager.play_round(BattleAction.SPECIAL, BattleAction.ATTACK)

        # Blaze Special on Earth: floor(32 * 1.25) = 40 per round against 115 health;
        # Boulder's Attack on Fire: floor(13 * 0.8) = 10 per round
        assert manager.is_finished
        assert manager.battle.player2.current_health == 0
        assert manager.battle.player1.current_health == 70
        assert manager.settle().winner == Side.A

    def test_run_to_completion_requires_ai_on_both_sides(self, fixed_clock):
        manager = BattleManager(minted_battle(), ScriptedRandom(), clock=fixed_clock,
                                ai_sides={Side.B: Difficulty.HARD})

        with pytest.raises(BattleContractError):
            manager.run_to_completion()

    def test_settle_requires_completed_battle(self, fixed_clock):
        manager = BattleManager(minted_battle(), ScriptedRandom(), clock=fixed_clock)

        with pytest.raises(BattleContractError):
            manager.settle()

    def test_playing_after_completion_is_rejected(self, fixed_clock):
        manager = BattleManager(minted_battle(), ScriptedRandom(), clock=fixed_clock,
                                rules=BattleRules(max_turns=1))
        manager.play_round(BattleAction.DEFEND, BattleAction.DEFEND)

        with pytest.raises(BattleContractError):
            manager.play_round(BattleAction.ATTACK, BattleAction.ATTACK)
