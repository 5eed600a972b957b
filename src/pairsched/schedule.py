#!/usr/bin/env python3
"""Doubles Round Schedule Builder.

Generate mode (default):
    python schedule.py [config.yaml] [--courts N] [--max-rounds N] [-o DIR]

    Generates rounds of 2v2 matches from the YAML roster and writes:
      {DIR}/schedule.txt  - Human-readable round-by-round + per-player schedule
      {DIR}/schedule.csv  - One row per match (round, court, players 1-4)
      {DIR}/stats.txt     - Validation report + statistics

Verify mode:
    python schedule.py --verify <schedule.csv> [config.yaml]

    Re-imports a schedule CSV and checks all constraints against the roster.
    Exit code 0 if valid, 1 if violations found.

Examples:
    python schedule.py                            # default config
    python schedule.py --courts 3 -o thursday     # override court count
    python schedule.py --target-games 6           # fixed-length mode
    python schedule.py --verify output/schedule.csv
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from pairsched.config import load_config
from pairsched.constraints import validate_schedule, format_validation_report
from pairsched.generator import generate
from pairsched.models import BalancePolicy, GenerationState
from pairsched.output import write_schedule
from pairsched.stats import compute_stats, format_stats_report


def main():
    parser = argparse.ArgumentParser(
        description="Doubles Round Schedule Builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (generate mode):
  {prefix}/schedule.txt   Human-readable schedule (round view + per-player)
  {prefix}/schedule.csv   One row per match
  {prefix}/stats.txt      Validation report + balance statistics

Exit codes:
  0  Schedule valid (completed, or exhausted with at least one round)
  1  Invalid input, no rounds generated, or constraint violations
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--courts", type=int, default=None,
        help="Override the number of courts from the config"
    )
    parser.add_argument(
        "--max-rounds", type=int, default=None,
        help="Stop after this many rounds"
    )
    parser.add_argument(
        "--target-games", type=int, default=None,
        help="Stop once every player has played this many games"
    )
    parser.add_argument(
        "--strict-balance", action="store_true",
        help="Leave a court empty rather than re-split a foursome for balance"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing schedule CSV instead of generating"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)
    roster = config["roster"]
    courts = args.courts if args.courts is not None else config["tournament"]["courts"]

    if args.verify:
        from pairsched.verify import parse_csv_schedule
        print(f"Verifying schedule from {args.verify}...")
        rounds = parse_csv_schedule(args.verify, roster)
        print(f"Loaded {sum(len(r.matches) for r in rounds)} matches")

        result = validate_schedule(rounds, roster, courts)
        print(format_validation_report(result))
        stats = compute_stats(rounds, roster)
        print("\n" + format_stats_report(stats))
        sys.exit(0 if result["valid"] else 1)

    gen_config = config["generation"]
    overrides = {}
    if args.max_rounds is not None:
        overrides["max_rounds"] = args.max_rounds
    if args.target_games is not None:
        overrides["target_games_per_player"] = args.target_games
    if args.strict_balance:
        overrides["balance_policy"] = BalancePolicy.STRICT
    if overrides:
        gen_config = dataclasses.replace(gen_config, **overrides)

    # Generation mode
    print(f"Generating schedule ({len(roster)} players, {courts} courts)...")
    gen = generate(roster, courts, gen_config, verbose=True)

    if gen.state is GenerationState.FAILED:
        for e in gen.errors:
            print(f"Error: {e}")
        sys.exit(1)
    if not gen.rounds:
        print("Error: no rounds were generated!")
        sys.exit(1)
    if gen.state is GenerationState.EXHAUSTED:
        print(f"  No further round possible after round {gen.rounds_generated}; "
              f"{gen.unused_partnerships} partnerships never used")

    print("\nValidating...")
    result = validate_schedule(gen.rounds, roster, courts)
    report = format_validation_report(result)
    print(report)

    stats = compute_stats(gen.rounds, roster)
    stats_text = format_stats_report(stats)
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_schedule(gen.rounds, roster, output_prefix=args.output_prefix,
                   title=config["tournament"]["name"])

    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if result["valid"]:
        print("\nSchedule generated successfully!")
    else:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)


if __name__ == "__main__":
    main()
