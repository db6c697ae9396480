"""
Battle management for running a duel from first round to settlement.

This module plays the caller role around the resolver: it collects one action
per side each round (asking the opponent policy for AI-controlled sides),
advances the battle, dispatches queued events to listeners and, once the
battle is over, produces what the settlement and reward collaborators need.
"""
from dataclasses import dataclass
from typing import Optional

from ..core.data import BattleAction, BattleState, Difficulty, Side
from ..core.engine import DEFAULT_RULES, BattleRules, Clock, RandomSource, system_clock
from ..core.errors import BattleContractError
from ..core.events import EventManager, LogMessage
from .ai import OpponentPolicy
from .battle_transcript import transcript_hash
from .combat import CombatResolver
from .progression import calculate_experience_gained


@dataclass(frozen=True)
class SettlementResult:
    """Everything the on-chain settlement and reward collaborators consume."""
    battle_id: str
    winner: Side
    winner_address: str
    loser_level: int
    turn_count: int
    transcript_hash: str
    experience_gained: int


class BattleManager:
    """Runs a single battle for its caller."""

    def __init__(
        self,
        battle: BattleState,
        rng: RandomSource,
        event_manager: Optional[EventManager] = None,
        clock: Clock = system_clock,
        rules: BattleRules = DEFAULT_RULES,
        ai_sides: Optional[dict[Side, Difficulty]] = None,
        timeout_action: BattleAction = BattleAction.DEFEND,
        reward_rng: Optional[RandomSource] = None,
    ):
        """
        Args:
            battle: An active battle
            rng: Random source shared by the resolver and the policies
            event_manager: Bus whose queue is flushed after every round
            clock: Epoch-millisecond time source
            rules: Combat constants
            ai_sides: Sides controlled by the opponent policy, with their difficulty
            timeout_action: Substituted for a human side that submitted nothing
            reward_rng: Random source for the experience roll; defaults to ``rng``
        """
        self.battle = battle
        self.rng = rng
        self.reward_rng = reward_rng if reward_rng is not None else rng
        self._settlement: Optional[SettlementResult] = None
        self.event_manager = event_manager
        self.timeout_action = timeout_action
        self.resolver = CombatResolver(rng, clock=clock, rules=rules, event_manager=event_manager)
        self.policies = {
            side: OpponentPolicy(rng, difficulty=difficulty, side=side, event_manager=event_manager)
            for side, difficulty in (ai_sides or {}).items()
        }

    @property
    def is_finished(self) -> bool:
        return not self.battle.is_active

    def _collect_action(self, side: Side, submitted: Optional[BattleAction]) -> BattleAction:
        if side in self.policies:
            return self.policies[side].choose_action(self.battle)
        if submitted is None:
            if self.event_manager:
                self.event_manager.publish(
                    LogMessage(
                        turn=self.battle.turn_number,
                        message=f"{side.value} missed the deadline, using {self.timeout_action.value}",
                        category="WARNING",
                        level="WARNING",
                        source="BattleManager",
                    ),
                    source="BattleManager",
                )
            return self.timeout_action
        return submitted

    def play_round(
        self,
        action_a: Optional[BattleAction] = None,
        action_b: Optional[BattleAction] = None,
    ) -> BattleState:
        """Resolve one round. Submitted actions for AI-controlled sides are ignored."""
        chosen_a = self._collect_action(Side.A, action_a)
        chosen_b = self._collect_action(Side.B, action_b)

        self.battle = self.resolver.advance_round(self.battle, chosen_a, chosen_b)

        if self.event_manager:
            self.event_manager.process_events()
        return self.battle

    def run_to_completion(self) -> BattleState:
        """Play rounds until the battle completes. Both sides must be AI-controlled."""
        if set(self.policies) != set(Side):
            raise BattleContractError("run_to_completion requires both sides to be AI-controlled")

        while self.battle.is_active:
            self.play_round()
        return self.battle

    def settle(self) -> SettlementResult:
        """Summarize a completed battle for settlement and rewards.

        The experience roll happens once; later calls return the same result.
        """
        if self.battle.is_active or self.battle.winner is None:
            raise BattleContractError(f"Battle {self.battle.battle_id} is not completed")
        if self._settlement is not None:
            return self._settlement

        winner = self.battle.slot(self.battle.winner)
        loser = self.battle.slot(self.battle.winner.opponent)
        self._settlement = SettlementResult(
            battle_id=self.battle.battle_id,
            winner=self.battle.winner,
            winner_address=winner.address,
            loser_level=loser.fighter.level,
            turn_count=self.battle.turn_number,
            transcript_hash=transcript_hash(self.battle),
            experience_gained=calculate_experience_gained(winner.fighter, loser.fighter, self.reward_rng),
        )
        return self._settlement
