#!/usr/bin/env python3

import argparse

from chainlegends.core.data import Difficulty, Element, Side, create_battle
from chainlegends.core.engine import create_rng, load_battle_rules
from chainlegends.core.events import EventManager, LogSaveRequested
from chainlegends.game.battle_manager import BattleManager
from chainlegends.game.battle_quips import BattleQuipGenerator
from chainlegends.game.battle_transcript import generate_battle_log
from chainlegends.game.log_manager import LogCategory, LogManager
from chainlegends.game.progression import create_fighter


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play an AI-vs-AI Chain Legends duel")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible battle")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Difficulty used by both opponents",
    )
    parser.add_argument("--element-a", choices=[e.name.lower() for e in Element], default="fire")
    parser.add_argument("--element-b", choices=[e.name.lower() for e in Element], default="water")
    parser.add_argument("--rules", default=None, help="Path to a battle rules YAML file")
    parser.add_argument("--save-log", action="store_true", help="Write the battle log to logs/")
    return parser.parse_args()


def main():
    args = parse_args()

    rules = load_battle_rules(args.rules)
    rng = create_rng(args.seed)
    # Child streams for chat and rewards; the battle stream is reserved for combat and AI rolls
    quip_rng, reward_rng = rng.spawn(2)
    difficulty = Difficulty(args.difficulty)

    fighter_a = create_fighter("Challenger", Element[args.element_a.upper()])
    fighter_b = create_fighter("Defender", Element[args.element_b.upper()])
    battle = create_battle(fighter_a, fighter_b, "0xChallenger", "0xDefender")

    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    quips = BattleQuipGenerator(event_manager, quip_rng, on_quip=lambda line: print(f"  [chat] {line}"))
    log_manager.system(f"Battle {battle.battle_id} created (seed: {args.seed})")

    manager = BattleManager(
        battle,
        rng,
        event_manager,
        rules=rules,
        ai_sides={Side.A: difficulty, Side.B: difficulty},
        reward_rng=reward_rng,
    )

    try:
        final = manager.run_to_completion()
    except KeyboardInterrupt:
        print("\n\nBattle interrupted by user")
        return

    print()
    for line in generate_battle_log(final):
        print(line)

    result = manager.settle()
    print(f"\nWinner: {result.winner.value} ({result.winner_address}) after {result.turn_count} turns")
    print(f"Experience gained: {result.experience_gained}")
    print(f"Transcript hash: {result.transcript_hash}")
    print(f"Chat lines: {len(quips.lines)}")

    for entry in log_manager.get_messages(categories={LogCategory.WARNING, LogCategory.ERROR}):
        print(entry.format())

    if args.save_log:
        event_manager.publish(LogSaveRequested(turn=final.turn_number, source="main"))
        event_manager.process_events()
        print(log_manager.get_messages(count=1)[0].text)


if __name__ == "__main__":
    main()
