"""
Battle transcript rendering and content addressing.

The settlement collaborator needs only the winner and a content hash of the
action log; the UI wants readable lines. Both are pure functions of the state.
"""
import hashlib
import json

from ..core.data import BattleState
from .combat.combat_resolver import describe_record


def generate_battle_log(battle: BattleState) -> list[str]:
    """Readable transcript: opening line, one line per action, winner line."""
    log = [f"Battle begins! {battle.player1.fighter.name} vs {battle.player2.fighter.name}"]

    for record in battle.actions:
        log.append(describe_record(battle.slot(record.side).fighter.name, record))

    if battle.winner:
        log.append(f"{battle.slot(battle.winner).fighter.name} wins the battle!")

    return log


def canonical_action_log(battle: BattleState) -> bytes:
    """Stable byte encoding of the action log (sorted keys, no whitespace)."""
    payload = [record.to_dict() for record in battle.actions]
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def transcript_hash(battle: BattleState) -> str:
    """SHA-256 hex digest of the action log, used as the settlement damage hash."""
    return hashlib.sha256(canonical_action_log(battle)).hexdigest()
