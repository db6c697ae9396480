"""
Chat quips driven by battle events.

Listens for resolved actions on the event bus and turns each one into a
stream-chat line, so chat and audio layers never need hooks into the resolver.
"""
from collections import deque
from typing import Callable, Optional

from ..core.data import ELEMENT_NAMES, BattleAction, Element
from ..core.engine import RandomSource
from ..core.events import ActionResolved, EventManager, EventType


QUIPS: dict[BattleAction, dict[str, list[str]]] = {
    BattleAction.ATTACK: {
        "hit": [
            "{name} strikes with precision!",
            "A solid hit from {name}!",
            "{name} lands a clean attack!",
        ],
        "critical": [
            "{name} finds a weak spot! Critical hit!",
            "Devastating blow from {name}!",
            "{name} strikes with perfect technique!",
        ],
    },
    BattleAction.SPECIAL: {
        "hit": [
            "{name} unleashes their {element} power!",
            "{name} channels elemental energy!",
            "{name} uses their signature move!",
        ],
        "critical": [
            "{name}'s technique is unstoppable!",
            "Maximum power! {name}'s special attack devastates!",
        ],
    },
    BattleAction.DEFEND: {
        "defend": [
            "{name} takes a defensive stance!",
            "{name} prepares for the next attack!",
            "{name} focuses on protection!",
        ],
    },
    BattleAction.ITEM: {
        "heal": [
            "{name} recovers their strength!",
            "{name} uses a healing item!",
            "{name} tends to their wounds!",
        ],
    },
}


def quip_kind(action: BattleAction, critical: bool) -> str:
    if action == BattleAction.DEFEND:
        return "defend"
    if action == BattleAction.ITEM:
        return "heal"
    return "critical" if critical else "hit"


def generate_battle_quip(
    action: BattleAction,
    fighter_name: str,
    element: Element,
    kind: str,
    rng: RandomSource,
) -> str:
    """Pick one quip for an action outcome; generic line if none matches."""
    options = QUIPS.get(action, {}).get(kind)
    if not options:
        return f"{fighter_name} acts!"
    template = options[int(rng.integers(0, len(options)))]
    return template.format(name=fighter_name, element=ELEMENT_NAMES[element])


class BattleQuipGenerator:
    """Event listener that produces chat lines for resolved actions.

    ``rng`` must be a stream of its own, never the one driving the battle.
    """

    def __init__(
        self,
        event_manager: EventManager,
        rng: RandomSource,
        on_quip: Optional[Callable[[str], None]] = None,
        max_lines: int = 100,
    ):
        self.rng = rng
        self.on_quip = on_quip
        self.lines: deque[str] = deque(maxlen=max_lines)

        event_manager.subscribe(
            EventType.ACTION_RESOLVED,
            self._handle_action_resolved,
            subscriber_name="BattleQuipGenerator.action_resolved",
        )

    def _handle_action_resolved(self, event) -> None:
        if not isinstance(event, ActionResolved):
            return

        kind = quip_kind(event.action, event.critical)
        line = generate_battle_quip(event.action, event.fighter_name, event.element, kind, self.rng)
        self.lines.append(line)
        if self.on_quip:
            self.on_quip(line)
