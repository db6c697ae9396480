"""
Tests for event-driven chat quips.
"""
from unittest.mock import Mock

import pytest

from chainlegends.core.data import BattleAction, Element, Side
from chainlegends.core.events import ActionResolved
from chainlegends.game.battle_quips import QUIPS, BattleQuipGenerator, generate_battle_quip, quip_kind
from chainlegends.game.combat import advance_round
from tests.test_utils import ScriptedRandom


def action_event(action: BattleAction, critical: bool = False) -> ActionResolved:
    return ActionResolved(
        turn=1,
        battle_id="battle-1",
        side=Side.A,
        fighter_name="Blaze",
        element=Element.FIRE,
        action=action,
        damage=10,
        critical=critical,
        effect="",
        actor_health=100,
        target_health=90,
    )


class TestQuipSelection:
    """Test quip lookup."""

    @pytest.mark.parametrize("action,critical,kind", [
        (BattleAction.ATTACK, False, "hit"),
        (BattleAction.ATTACK, True, "critical"),
        (BattleAction.SPECIAL, True, "critical"),
        (BattleAction.DEFEND, True, "defend"),
        (BattleAction.ITEM, False, "heal"),
    ])
    def test_quip_kind(self, action, critical, kind):
        assert quip_kind(action, critical) == kind

    def test_scripted_pick(self):
        rng = ScriptedRandom(integers=[1])

        line = generate_battle_quip(BattleAction.ATTACK, "Blaze", Element.FIRE, "critical", rng)

        assert line == "Devastating blow from Blaze!"

    @pytest.mark.parametrize("element,name", [
        (Element.FIRE, "Fire"),
        (Element.WATER, "Water"),
        (Element.EARTH, "Earth"),
        (Element.AIR, "Air"),
    ])
    def test_special_quip_names_element(self, element, name):
        line = generate_battle_quip(BattleAction.SPECIAL, "Nova", element, "hit", ScriptedRandom(integers=[0]))

        assert line == f"Nova unleashes their {name} power!"

    def test_every_pool_formats_name(self):
        for action, pools in QUIPS.items():
            for kind, options in pools.items():
                for index in range(len(options)):
                    line = generate_battle_quip(action, "Gale", Element.AIR, kind, ScriptedRandom(integers=[index]))
                    assert "Gale" in line, (action, kind)

    def test_unknown_kind_falls_back(self):
        line = generate_battle_quip(BattleAction.DEFEND, "Tide", Element.WATER, "critical", ScriptedRandom())

        assert line == "Tide acts!"


class TestBattleQuipGenerator:
    """Test the event listener."""

    def test_quip_per_resolved_action(self, event_manager):
        on_quip = Mock()
        generator = BattleQuipGenerator(event_manager, ScriptedRandom(), on_quip=on_quip)

        event_manager.publish(action_event(BattleAction.ATTACK))
        event_manager.publish(action_event(BattleAction.ITEM))
        event_manager.process_events()

        assert list(generator.lines) == ["Blaze strikes with precision!", "Blaze recovers their strength!"]
        assert on_quip.call_count == 2

    def test_listens_to_resolver(self, fire_vs_water, fixed_clock, event_manager):
        generator = BattleQuipGenerator(event_manager, ScriptedRandom())

        advance_round(fire_vs_water, BattleAction.SPECIAL, BattleAction.DEFEND, ScriptedRandom(),
                      clock=fixed_clock, event_manager=event_manager)
        event_manager.process_events()

        assert list(generator.lines) == [
            "Blaze unleashes their Fire power!",
            "Tide takes a defensive stance!",
        ]

    def test_line_buffer_is_bounded(self, event_manager):
        generator = BattleQuipGenerator(event_manager, ScriptedRandom(), max_lines=2)

        for _ in range(5):
            event_manager.publish(action_event(BattleAction.DEFEND))
        event_manager.process_events()

        assert len(generator.lines) == 2
