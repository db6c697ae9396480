"""Battle data structures and conversion utilities.

This module provides the records shared by the combat resolver, the opponent
policy and every collaborator that consumes a battle:

1. Fighter (minted profile) -> CombatantSlot (fighter + live health)
2. CombatantSlot x2 + ActionRecord log -> BattleState (aggregate root)

Every record converts to and from plain dictionaries so a battle can be stored
or sent over the wire without losing any field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional
import uuid

from .game_enums import BattleAction, BattleStatus, Element, Side


@dataclass(frozen=True)
class Fighter:
    """Immutable combatant profile.

    Stats are already scaled by level and element when the fighter is minted;
    the battle core only reads them.
    """
    name: str
    element: Element
    level: int
    attack: int
    defense: int
    speed: int
    max_health: int
    fighter_id: str = ""
    experience: int = 0

    def __post_init__(self):
        if self.level < 1:
            raise ValueError(f"Fighter level must be positive, got {self.level}")
        if self.max_health <= 0:
            raise ValueError(f"Fighter max_health must be positive, got {self.max_health}")
        if min(self.attack, self.defense, self.speed) <= 0:
            raise ValueError(f"Fighter stats must be positive, got {self.attack}/{self.defense}/{self.speed}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "element": self.element.value,
            "level": self.level,
            "attack": self.attack,
            "defense": self.defense,
            "speed": self.speed,
            "max_health": self.max_health,
            "fighter_id": self.fighter_id,
            "experience": self.experience,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fighter":
        return cls(
            name=data["name"],
            element=Element(data["element"]),
            level=int(data["level"]),
            attack=int(data["attack"]),
            defense=int(data["defense"]),
            speed=int(data["speed"]),
            max_health=int(data["max_health"]),
            fighter_id=data.get("fighter_id", ""),
            experience=int(data.get("experience", 0)),
        )


@dataclass
class CombatantSlot:
    """A fighter paired with its live health and owner identity."""
    fighter: Fighter
    current_health: int
    address: str = ""

    @property
    def health_percent(self) -> float:
        """Current health as a fraction of max health (0.0-1.0)."""
        return self.current_health / self.fighter.max_health

    @property
    def is_knocked_out(self) -> bool:
        return self.current_health <= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "fighter": self.fighter.to_dict(),
            "current_health": self.current_health,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CombatantSlot":
        return cls(
            fighter=Fighter.from_dict(data["fighter"]),
            current_health=int(data["current_health"]),
            address=data.get("address", ""),
        )


@dataclass(frozen=True)
class ActionRecord:
    """One logged action. Immutable once appended to the battle log.

    ``damage`` is signed: positive is damage dealt to the opponent, negative is
    the amount the actor healed itself, zero is a no-op such as Defend.
    """
    side: Side
    action: BattleAction
    damage: int
    effect: str
    timestamp: int
    critical: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "side": self.side.value,
            "action": self.action.value,
            "damage": self.damage,
            "effect": self.effect,
            "timestamp": self.timestamp,
            "critical": self.critical,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionRecord":
        return cls(
            side=Side(data["side"]),
            action=BattleAction(data["action"]),
            damage=int(data["damage"]),
            effect=data.get("effect", ""),
            timestamp=int(data["timestamp"]),
            critical=bool(data.get("critical", False)),
        )


@dataclass(frozen=True)
class CombatOutcome:
    """Result of resolving a single action."""
    amount: int           # negative means the actor healed
    critical: bool
    effect: str
    resulting_health: int  # target health for damage, actor health for heals


@dataclass
class BattleState:
    """Aggregate root of a duel.

    ``turn_deadline`` is informational only; enforcing it belongs to the
    round timer owned by the caller.
    """
    player1: CombatantSlot
    player2: CombatantSlot
    battle_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    turn_number: int = 0
    status: BattleStatus = BattleStatus.ACTIVE
    actions: list[ActionRecord] = field(default_factory=list)
    winner: Optional[Side] = None
    created_at: int = 0
    turn_deadline: int = 0

    def slot(self, side: Side) -> CombatantSlot:
        return self.player1 if side is Side.A else self.player2

    @property
    def is_active(self) -> bool:
        return self.status == BattleStatus.ACTIVE

    def records_for(self, side: Side) -> list[ActionRecord]:
        """All logged actions taken by one side, oldest first."""
        return [record for record in self.actions if record.side is side]

    def recent_actions(self, side: Side, count: int) -> list[BattleAction]:
        """The last ``count`` actions taken by ``side``, oldest first."""
        records = self.records_for(side)
        return [record.action for record in records[-count:]] if count > 0 else []

    def copy(self) -> "BattleState":
        """Copy with independent slots and log; fighters and records are shared (immutable)."""
        return BattleState(
            player1=CombatantSlot(self.player1.fighter, self.player1.current_health, self.player1.address),
            player2=CombatantSlot(self.player2.fighter, self.player2.current_health, self.player2.address),
            battle_id=self.battle_id,
            turn_number=self.turn_number,
            status=self.status,
            actions=list(self.actions),
            winner=self.winner,
            created_at=self.created_at,
            turn_deadline=self.turn_deadline,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "battle_id": self.battle_id,
            "player1": self.player1.to_dict(),
            "player2": self.player2.to_dict(),
            "turn_number": self.turn_number,
            "status": self.status.value,
            "actions": [record.to_dict() for record in self.actions],
            "winner": self.winner.value if self.winner else None,
            "created_at": self.created_at,
            "turn_deadline": self.turn_deadline,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BattleState":
        winner = data.get("winner")
        return cls(
            player1=CombatantSlot.from_dict(data["player1"]),
            player2=CombatantSlot.from_dict(data["player2"]),
            battle_id=data["battle_id"],
            turn_number=int(data["turn_number"]),
            status=BattleStatus(data["status"]),
            actions=[ActionRecord.from_dict(item) for item in data.get("actions", [])],
            winner=Side(winner) if winner else None,
            created_at=int(data.get("created_at", 0)),
            turn_deadline=int(data.get("turn_deadline", 0)),
        )


def create_battle(
    fighter_a: Fighter,
    fighter_b: Fighter,
    address_a: str = "",
    address_b: str = "",
    battle_id: Optional[str] = None,
    created_at: int = 0,
    turn_deadline: int = 0,
) -> BattleState:
    """Create an active battle with both fighters at full health."""
    state = BattleState(
        player1=CombatantSlot(fighter_a, fighter_a.max_health, address_a),
        player2=CombatantSlot(fighter_b, fighter_b.max_health, address_b),
        created_at=created_at,
        turn_deadline=turn_deadline,
    )
    if battle_id is not None:
        state.battle_id = battle_id
    return state
