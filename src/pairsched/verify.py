"""Standalone verifier for doubles schedules.

Can validate a schedule by reading a CSV file + tournament YAML.
Usage: python verify.py [schedule_csv] [config_yaml]
"""

import csv
import sys
from pathlib import Path

from pairsched.config import load_config
from pairsched.constraints import validate_schedule, format_validation_report
from pairsched.models import Match, Round
from pairsched.stats import compute_stats, format_stats_report


def parse_csv_schedule(csv_path: str | Path, roster: list | None = None) -> list[Round]:
    """Parse a schedule CSV (as written by output.py) back into Rounds.

    Rows with a missing or non-numeric round/court are skipped. When a
    roster is given, each round's sitting_out list is rebuilt from it.
    """
    by_round: dict[int, list[Match]] = {}

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            round_str = (row.get("Round") or "").strip()
            court_str = (row.get("Court") or "").strip()
            if not round_str.isdigit() or not court_str.isdigit():
                continue

            players = [(row.get(f"Player{i}") or "").strip() for i in range(1, 5)]
            if not all(players):
                continue

            rnum = int(round_str)
            by_round.setdefault(rnum, []).append(Match(
                round_number=rnum,
                court=int(court_str),
                team1=(players[0], players[1]),
                team2=(players[2], players[3]),
                relaxed=(row.get("Relaxed") or "").strip().lower() == "yes",
            ))

    rounds = []
    for rnum in sorted(by_round):
        matches = sorted(by_round[rnum], key=lambda m: m.court)
        playing = {p for m in matches for p in m.players}
        sitting_out = [p for p in roster if p not in playing] if roster else []
        rounds.append(Round(number=rnum, matches=matches, sitting_out=sitting_out))
    return rounds


def main():
    if len(sys.argv) < 2:
        print("Usage: python verify.py <schedule.csv> [config.yaml]")
        print("  Validates a schedule CSV against the roster in config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    config = load_config(config_path)
    roster = config["roster"]

    print(f"Parsing schedule from {csv_path}...")
    rounds = parse_csv_schedule(csv_path, roster)
    print(f"Loaded {sum(len(r.matches) for r in rounds)} matches "
          f"in {len(rounds)} rounds")

    if not rounds:
        print("No matches found in CSV. Check the format.")
        sys.exit(1)

    result = validate_schedule(rounds, roster, config["tournament"]["courts"])
    print(format_validation_report(result))

    stats = compute_stats(rounds, roster)
    print("\n" + format_stats_report(stats))
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
