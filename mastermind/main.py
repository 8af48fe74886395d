"""CLI entry point for playing Mastermind in the terminal."""

import argparse
import json
import random
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from .console import ConsolePlayer
from .errors import ConfigurationError
from .game import Configuration
from .runner import GameRunner
from .settings import diag_enabled, load_config, load_env_file


def parse_secret(secret_str: str, config: Configuration) -> list[int]:
    """Parse secret from comma-separated string."""
    try:
        secret = [int(x.strip()) for x in secret_str.split(',')]
    except ValueError as e:
        raise ConfigurationError(f"Invalid secret format: {e}")
    if len(secret) != config.hole_count:
        raise ConfigurationError(f"Secret must have {config.hole_count} values")
    if not all(config.is_legal_peg(x) for x in secret):
        raise ConfigurationError(f"Secret values must be in {list(config.legal_pegs)}")
    return secret


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mastermind puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play with the settings from the environment / .env file
  python -m mastermind.main

  # Classic 6 colors, 4 holes, 10 guesses, no repeated colors
  python -m mastermind.main --colors 6 --holes 4 --guesses 10 --no-duplicates

  # Diagnostic mode: show the secret while playing
  python -m mastermind.main --diag --secret "1,2,3,4,5"

Settings (environment or .env):
  MASTERMIND_NUM_COLORS, MASTERMIND_NUM_HOLES, MASTERMIND_NUM_GUESSES,
  MASTERMIND_DUPS_ALLOWED, MASTERMIND_BLANKS_ALLOWED, MASTERMIND_DIAG
"""
    )

    # Game configuration
    game_group = parser.add_argument_group('game configuration')
    game_group.add_argument('--colors', type=int, default=None,
                            help='Number of colors (default: MASTERMIND_NUM_COLORS or 8)')
    game_group.add_argument('--holes', type=int, default=None,
                            help='Number of holes (default: MASTERMIND_NUM_HOLES or 5)')
    game_group.add_argument('--guesses', type=int, default=None,
                            help='Guesses allowed (default: MASTERMIND_NUM_GUESSES or 12)')
    dup_group = game_group.add_mutually_exclusive_group()
    dup_group.add_argument('--no-duplicates', dest='duplicates', action='store_false', default=None,
                           help='Disallow repeated colors in the secret')
    dup_group.add_argument('--duplicates', dest='duplicates', action='store_true',
                           help='Allow repeated colors in the secret')
    blank_group = game_group.add_mutually_exclusive_group()
    blank_group.add_argument('--blanks', dest='blanks', action='store_true', default=None,
                             help='Allow blank (empty) holes')
    blank_group.add_argument('--no-blanks', dest='blanks', action='store_false',
                             help='Disallow blank holes')
    game_group.add_argument('--secret', type=str, default=None,
                            help='Predefined secret as comma-separated integers (e.g., "1,2,3,4,5")')

    # Execution
    exec_group = parser.add_argument_group('execution')
    exec_group.add_argument('--runs', type=int, default=1,
                            help='Number of games to play (default: 1)')
    exec_group.add_argument('--output', type=str, default=None,
                            help='Output JSONL file (default: outputs/games_TIMESTAMP.jsonl)')
    exec_group.add_argument('--no-record', action='store_true',
                            help='Do not write results to a file')
    exec_group.add_argument('--seed', type=int, default=None,
                            help='Random seed for reproducibility')
    exec_group.add_argument('--diag', action='store_true',
                            help='Diagnostic mode: show the secret while playing')
    exec_group.add_argument('--env-file', type=str, default=None,
                            help='Settings file to load (default: .env)')

    # Unset flags fall back to the environment settings
    parser.set_defaults(duplicates=None, blanks=None)
    return parser


def resolve_config(args: argparse.Namespace, environ=None) -> Configuration:
    """Environment settings overridden by command line flags."""
    return load_config(
        environ,
        color_count=args.colors,
        hole_count=args.holes,
        guess_limit=args.guesses,
        duplicates_allowed=args.duplicates,
        blanks_allowed=args.blanks,
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.runs < 1:
        parser.error("--runs must be at least 1")

    load_env_file(args.env_file)

    try:
        config = resolve_config(args)
        predefined_secret = parse_secret(args.secret, config) if args.secret else None
        reveal = args.diag or diag_enabled()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    rng = random.Random(args.seed)

    output_path = None
    if not args.no_record:
        if args.output is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = Path("outputs") / f"games_{timestamp}.jsonl"
        else:
            output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"Config: {config.color_count} colors, {config.hole_count} holes, "
          f"{config.guess_limit} guesses, duplicates={'yes' if config.duplicates_allowed else 'no'}, "
          f"blanks={'yes' if config.blanks_allowed else 'no'}")
    if output_path:
        print(f"Output: {output_path}")
    print()

    player = ConsolePlayer(config, reveal=reveal, rng=rng)
    results_summary = {"win": 0, "loss": 0, "quit": 0}

    for run in range(1, args.runs + 1):
        if args.runs > 1:
            print(f"Game {run}/{args.runs}")

        try:
            result = GameRunner(config, player, secret=predefined_secret, rng=rng).run()
        except ConfigurationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        results_summary[result.outcome] += 1

        if output_path:
            with open(output_path, 'a') as f:
                f.write(json.dumps(asdict(result)) + '\n')

        if result.outcome == "quit":
            print(f"Quit after {result.total_turns} turns. The secret was {result.secret}")
            break
        print()

    played = sum(results_summary.values())
    if played > 1:
        print("=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Games: {played}")
        print(f"Wins: {results_summary['win']} ({results_summary['win']/played*100:.1f}%)")
        print(f"Losses: {results_summary['loss']}")
        print(f"Quit: {results_summary['quit']}")
    if output_path:
        print(f"\nResults saved to: {output_path}")


if __name__ == '__main__':
    main()
