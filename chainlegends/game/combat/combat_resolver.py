"""
Combat resolution system for duels.

This module computes single-action outcomes and advances a battle by one
round. It performs no I/O: randomness, time and event publication are all
injected, so a round is reproducible given a scripted random source.

Round policy: both chosen actions are always resolved in speed order, then the
end conditions are checked once. The side that dropped to 0 health first loses,
even if the second action of the round was still applied.
"""
import math
from typing import Optional

from ...core.data import (
    ACTION_NAMES,
    OFFENSIVE_ACTIONS,
    ActionRecord,
    BattleAction,
    BattleState,
    BattleStatus,
    CombatOutcome,
    Fighter,
    Side,
)
from ...core.engine import DEFAULT_RULES, BattleRules, Clock, RandomSource, system_clock
from ...core.errors import BattleContractError
from ...core.events import (
    ActionResolved,
    BattleCompleted,
    EventManager,
    LogMessage,
    RoundResolved,
    RoundStarted,
)
from .elements import get_elemental_multiplier


DEFEND_EFFECT = "Defended! Damage reduced next turn"
HEAL_EFFECT = "Used Healing Potion!"
KNOCKED_OUT_EFFECT = "Knocked out!"


def _check_health(fighter: Fighter, health: int, role: str) -> None:
    if not 0 <= health <= fighter.max_health:
        raise BattleContractError(
            f"{role} health {health} outside [0, {fighter.max_health}] for {fighter.name}"
        )


def compute_outcome(
    actor: Fighter,
    target: Fighter,
    action: BattleAction,
    actor_health: int,
    target_health: int,
    rng: RandomSource,
    rules: BattleRules = DEFAULT_RULES,
) -> CombatOutcome:
    """
    Compute the outcome of a single action.

    Args:
        actor: The fighter taking the action
        target: The opposing fighter (ignored for Item, which targets the actor)
        action: The chosen action
        actor_health: Actor's current health
        target_health: Target's current health
        rng: Random source for critical rolls
        rules: Combat constants

    Returns:
        CombatOutcome. ``amount`` is negative for heals and ``resulting_health``
        is the actor's health for Item, the target's health otherwise.

    Raises:
        BattleContractError: On an unknown action or health outside bounds
    """
    if not isinstance(action, BattleAction):
        raise BattleContractError(f"Unrecognized action: {action!r}")
    _check_health(actor, actor_health, "Actor")
    _check_health(target, target_health, "Target")

    critical = False
    effects: list[str] = []

    if action == BattleAction.ATTACK:
        # Basic formula: Attack - Defense/2, minimum 1
        damage = max(1, actor.attack - target.defense // 2)
        critical = rng.random() < rules.attack_crit_chance
        if critical:
            damage = math.floor(damage * rules.attack_crit_multiplier)
            effects.append("Critical Hit!")

    elif action == BattleAction.DEFEND:
        # Cosmetic only: no mitigation carries into the next round
        return CombatOutcome(amount=0, critical=False, effect=DEFEND_EFFECT, resulting_health=target_health)

    elif action == BattleAction.SPECIAL:
        damage = math.floor(actor.attack * rules.special_damage_multiplier)
        critical = rng.random() < rules.special_crit_chance
        if critical:
            damage = math.floor(damage * rules.special_crit_multiplier)
            effects.append("Special Critical!")
        else:
            effects.append("Special Attack!")

    else:
        heal = math.floor(actor.max_health * rules.heal_fraction)
        amount = -heal
        return CombatOutcome(
            amount=amount,
            critical=False,
            effect=HEAL_EFFECT,
            resulting_health=min(actor.max_health, actor_health - amount),
        )

    multiplier = get_elemental_multiplier(actor.element, target.element, rules)
    if multiplier != 1.0:
        damage = math.floor(damage * multiplier)
        effects.append("Super Effective!" if multiplier > 1.0 else "Not very effective...")

    damage = max(0, damage)
    return CombatOutcome(
        amount=damage,
        critical=critical,
        effect=" ".join(effects),
        resulting_health=max(0, target_health - damage),
    )


def determine_turn_order(state: BattleState, rng: RandomSource, rules: BattleRules = DEFAULT_RULES) -> Side:
    """Return the side that acts first this round.

    Effective speed is base speed plus uniform jitter, rolled for side A then
    side B. Ties go to side A.
    """
    speed_a = state.player1.fighter.speed + float(rng.uniform(0, rules.speed_jitter))
    speed_b = state.player2.fighter.speed + float(rng.uniform(0, rules.speed_jitter))
    return Side.A if speed_a >= speed_b else Side.B


def validate_round(state: BattleState, action_a: BattleAction, action_b: BattleAction) -> None:
    """Reject a round before anything is mutated."""
    if state.status != BattleStatus.ACTIVE:
        raise BattleContractError(f"Cannot advance battle {state.battle_id} in status {state.status.value}")
    if state.winner is not None:
        raise BattleContractError(f"Active battle {state.battle_id} already has a winner")
    for side, action in ((Side.A, action_a), (Side.B, action_b)):
        if not isinstance(action, BattleAction):
            raise BattleContractError(f"Unrecognized action for {side.value}: {action!r}")
        slot = state.slot(side)
        _check_health(slot.fighter, slot.current_health, side.value)


def _apply_action(
    state: BattleState,
    side: Side,
    action: BattleAction,
    rng: RandomSource,
    rules: BattleRules,
    timestamp: int,
) -> ActionRecord:
    actor_slot = state.slot(side)
    target_slot = state.slot(side.opponent)

    outcome = compute_outcome(
        actor_slot.fighter,
        actor_slot.fighter if action == BattleAction.ITEM else target_slot.fighter,
        action,
        actor_slot.current_health,
        actor_slot.current_health if action == BattleAction.ITEM else target_slot.current_health,
        rng,
        rules,
    )

    if action == BattleAction.ITEM:
        if actor_slot.is_knocked_out:
            # Healing never revives a knocked-out fighter
            return ActionRecord(side, action, 0, KNOCKED_OUT_EFFECT, timestamp)
        actor_slot.current_health = outcome.resulting_health
    elif action in OFFENSIVE_ACTIONS:
        target_slot.current_health = outcome.resulting_health

    return ActionRecord(
        side=side,
        action=action,
        damage=outcome.amount,
        effect=outcome.effect,
        timestamp=timestamp,
        critical=outcome.critical,
    )


def _pick_loser(state: BattleState, first_knockout: Optional[Side]) -> Optional[Side]:
    knocked_out = [side for side in Side if state.slot(side).is_knocked_out]
    if not knocked_out:
        return None
    if first_knockout in knocked_out:
        return first_knockout
    if len(knocked_out) == 1:
        return knocked_out[0]
    # Both down with no known order: side A wins
    return Side.B


def _pick_turn_limit_winner(state: BattleState) -> Side:
    # Higher health percentage wins, ties go to side A
    return Side.A if state.player1.health_percent >= state.player2.health_percent else Side.B


def advance_round(
    state: BattleState,
    action_a: BattleAction,
    action_b: BattleAction,
    rng: RandomSource,
    clock: Clock = system_clock,
    rules: BattleRules = DEFAULT_RULES,
    event_manager: Optional[EventManager] = None,
) -> BattleState:
    """
    Resolve one round and return the next battle state.

    The input state is left untouched. Both actions are resolved in speed
    order, the turn counter is incremented, a new deadline is set and the end
    conditions are checked once.

    Args:
        state: An active battle
        action_a: Side A's chosen action
        action_b: Side B's chosen action
        rng: Random source for turn-order jitter and critical rolls
        clock: Epoch-millisecond time source
        rules: Combat constants
        event_manager: Optional bus that receives the round's events

    Returns:
        The next BattleState

    Raises:
        BattleContractError: If the battle is not active or inputs are invalid
    """
    validate_round(state, action_a, action_b)

    next_state = state.copy()
    round_number = state.turn_number + 1
    now = clock()
    chosen = {Side.A: action_a, Side.B: action_b}

    first_side = determine_turn_order(state, rng, rules)
    if event_manager:
        event_manager.publish(
            RoundStarted(
                turn=round_number,
                battle_id=state.battle_id,
                first_side=first_side,
                action_a=action_a,
                action_b=action_b,
            ),
            source="CombatResolver",
        )

    already_down = {side for side in Side if state.slot(side).is_knocked_out}
    first_knockout = next(iter(already_down)) if len(already_down) == 1 else None

    for side in (first_side, first_side.opponent):
        record = _apply_action(next_state, side, chosen[side], rng, rules, now)
        next_state.actions.append(record)

        target = side.opponent
        if first_knockout is None and target not in already_down and next_state.slot(target).is_knocked_out:
            first_knockout = target

        if event_manager:
            _publish_action(event_manager, next_state, record, round_number)

    next_state.turn_number = round_number
    next_state.turn_deadline = now + rules.turn_time_limit_ms

    reason = None
    loser = _pick_loser(next_state, first_knockout)
    if loser is not None:
        next_state.status = BattleStatus.COMPLETED
        next_state.winner = loser.opponent
        reason = "knockout"
    elif next_state.turn_number >= rules.max_turns:
        next_state.status = BattleStatus.COMPLETED
        next_state.winner = _pick_turn_limit_winner(next_state)
        reason = "turn_limit"

    if event_manager:
        event_manager.publish(
            RoundResolved(
                turn=round_number,
                battle_id=next_state.battle_id,
                player1_health=next_state.player1.current_health,
                player2_health=next_state.player2.current_health,
                turn_deadline=next_state.turn_deadline,
            ),
            source="CombatResolver",
        )
        if reason is not None and next_state.winner is not None:
            winner_name = next_state.slot(next_state.winner).fighter.name
            event_manager.publish(
                BattleCompleted(
                    turn=round_number,
                    battle_id=next_state.battle_id,
                    winner=next_state.winner,
                    reason=reason,
                ),
                source="CombatResolver",
            )
            _emit_log(event_manager, round_number, f"{winner_name} wins the battle! ({reason.replace('_', ' ')})")

    return next_state


def _publish_action(event_manager: EventManager, state: BattleState, record: ActionRecord, turn: int) -> None:
    actor = state.slot(record.side)
    target = state.slot(record.side.opponent)
    event_manager.publish(
        ActionResolved(
            turn=turn,
            battle_id=state.battle_id,
            side=record.side,
            fighter_name=actor.fighter.name,
            element=actor.fighter.element,
            action=record.action,
            damage=record.damage,
            critical=record.critical,
            effect=record.effect,
            actor_health=actor.current_health,
            target_health=target.current_health,
        ),
        source="CombatResolver",
    )
    _emit_log(event_manager, turn, describe_record(actor.fighter.name, record))


def describe_record(actor_name: str, record: ActionRecord) -> str:
    """Human readable line for one logged action."""
    action_name = ACTION_NAMES[record.action].upper()
    suffix = f" {record.effect}" if record.effect else ""
    if record.damage > 0:
        return f"{actor_name} uses {action_name} for {record.damage} damage!{suffix}"
    if record.damage < 0:
        return f"{actor_name} uses {action_name} and heals for {-record.damage} HP!{suffix}"
    return f"{actor_name} uses {action_name}!{suffix}"


def _emit_log(event_manager: EventManager, turn: int, message: str, level: str = "INFO") -> None:
    event_manager.publish(
        LogMessage(turn=turn, message=message, category="BATTLE", level=level, source="CombatResolver"),
        source="CombatResolver",
    )


class CombatResolver:
    """Resolver bound to a random source, clock, rules and optional event bus."""

    def __init__(
        self,
        rng: RandomSource,
        clock: Clock = system_clock,
        rules: BattleRules = DEFAULT_RULES,
        event_manager: Optional[EventManager] = None,
    ):
        self.rng = rng
        self.clock = clock
        self.rules = rules
        self.event_manager = event_manager

    def compute_outcome(
        self,
        actor: Fighter,
        target: Fighter,
        action: BattleAction,
        actor_health: int,
        target_health: int,
    ) -> CombatOutcome:
        return compute_outcome(actor, target, action, actor_health, target_health, self.rng, self.rules)

    def advance_round(self, state: BattleState, action_a: BattleAction, action_b: BattleAction) -> BattleState:
        return advance_round(
            state,
            action_a,
            action_b,
            self.rng,
            clock=self.clock,
            rules=self.rules,
            event_manager=self.event_manager,
        )
