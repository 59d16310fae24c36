"""
Morris CLI - Command-line interface for the engine.

Usage:
    morris topology                  Print the board adjacency and mills
    morris selfplay [--seed N]       Play a random-vs-random game
"""

import argparse
import sys

from loguru import logger

from .config import EngineConfig


def main(argv=None):
    """Main CLI entry point."""
    config = EngineConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Morris - Nine Men's Morris Rules Engine",
        prog="morris",
    )
    parser.add_argument("--log-level", default=config.log_level, help="Log level for stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Topology command
    subparsers.add_parser("topology", help="Print adjacency and mill tables")

    # Self-play command
    selfplay_parser = subparsers.add_parser("selfplay", help="Play a random-vs-random game")
    selfplay_parser.add_argument("--seed", type=int, default=config.seed, help="Random seed")
    selfplay_parser.add_argument(
        "--max-turns", type=int, default=500, help="Stop after this many moves"
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "topology":
        return cmd_topology(args)
    elif args.command == "selfplay":
        return cmd_selfplay(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def configure_logging(level: str):
    """Send engine logs to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def cmd_topology(args):
    """Print adjacency and mills."""
    from .engine_core.state import ADJACENCY, MILLS

    print("Adjacency:")
    for node_id, neighbours in ADJACENCY.items():
        print(f"  {node_id:2d}: {sorted(neighbours)}")

    print("\nMills:")
    for mill_id, mill in enumerate(MILLS):
        print(f"  {mill_id:2d}: {list(mill)}")
    return 0


def cmd_selfplay(args, config: EngineConfig):
    """Play random moves on snapshots until someone loses."""
    from .bots import RandomPolicy
    from .engine_core import Board, GameSnapshot, Player, PlayerColour, PlayerNumber

    board = Board()
    p1 = Player(
        config.player_one_name,
        PlayerColour.GREEN,
        is_starting_player=True,
        player_number=PlayerNumber.P1,
    )
    p2 = Player(config.player_two_name, PlayerColour.RED, player_number=PlayerNumber.P2)
    snapshot = GameSnapshot(board=board, current_player=p1, opponent=p2)
    policy = RandomPolicy(seed=args.seed)

    print(f"Self-play: {p1.name} vs {p2.name} (seed {args.seed})")

    for turn in range(1, args.max_turns + 1):
        if snapshot.is_game_over:
            print(f"\n{snapshot.opponent.name} wins after {turn - 1} moves")
            return 0

        actor = snapshot.current_player
        moves = snapshot.get_possible_moves()
        if not moves:
            print(f"\n{actor.name} has no legal moves")
            return 0

        decision = policy.select_move(snapshot, moves)
        snapshot = snapshot.make(decision.move)

        line = f"{turn:4d}. {actor.name}: {snapshot.last_move.describe()}"
        if snapshot.last_move.forms_mill:
            line += " (mill)"
        print(line)

    print(f"\nNo result after {args.max_turns} moves")
    return 0


if __name__ == "__main__":
    sys.exit(main())
