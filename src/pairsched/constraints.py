"""Constraint validation for doubles schedules.

Can validate either a freshly generated schedule or a re-imported CSV.
"""

from collections import defaultdict
from itertools import combinations

from pairsched.models import Round, partnership
from pairsched.trackers import PartnershipTracker


def validate_schedule(rounds: list[Round], roster: list,
                      courts: int | None = None) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues (repeats, imbalance)
    """
    errors = []
    warnings = []

    known = set(roster)
    partnerships = PartnershipTracker(roster)
    foursome_counts: dict[frozenset, int] = defaultdict(int)
    games: dict = {p: 0 for p in roster}

    for expected, rnd in enumerate(rounds, 1):
        if rnd.number != expected:
            errors.append(
                f"Round {rnd.number} found where round {expected} was expected"
            )
        if courts is not None and len(rnd.matches) > courts:
            errors.append(
                f"Round {rnd.number}: {len(rnd.matches)} matches on {courts} courts"
            )

        players_in_round = set()
        courts_in_round = set()
        for m in rnd.matches:
            label = f"Round {rnd.number} court {m.court}"
            if m.round_number != rnd.number:
                errors.append(f"{label}: match says round {m.round_number}")
            if m.court < 1 or (courts is not None and m.court > courts):
                errors.append(f"{label}: court out of range")
            if m.court in courts_in_round:
                errors.append(f"{label}: court used twice")
            courts_in_round.add(m.court)

            if len(set(m.players)) != 4:
                errors.append(f"{label}: players not distinct {m.players}")
            for p in m.players:
                if p not in known:
                    errors.append(f"{label}: unknown player {p}")
                    continue
                if p in players_in_round:
                    errors.append(f"Round {rnd.number}: {p} appears twice")
                players_in_round.add(p)
                games[p] += 1

            for team in (m.team1, m.team2):
                if team[0] != team[1]:
                    partnerships.mark_played(*team)
            foursome_counts[frozenset(m.players)] += 1

    for a, b in combinations(sorted(known, key=str), 2):
        count = partnerships.times_played(a, b)
        if count > 1:
            a, b = partnership(a, b)
            warnings.append(f"Partnership {a} & {b} used {count} times")

    for group, count in foursome_counts.items():
        if count > 1 and len(group) == 4:
            names = ", ".join(sorted(str(p) for p in group))
            warnings.append(f"Foursome {names} shared a court {count} times")

    if games:
        lo = min(games.values())
        hi = max(games.values())
        if hi - lo > 1:
            over = [
                f"{p}({games[p]})" for p in roster if games[p] > lo + 1
            ]
            warnings.append(
                f"Game count spread {hi - lo} exceeds 1: min={lo}, max={hi}. "
                f"Over limit: {', '.join(over)}"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
