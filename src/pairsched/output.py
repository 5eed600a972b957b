"""Output formatters for doubles schedules."""

import csv
from io import StringIO
from pathlib import Path

from pairsched.models import Round


CSV_HEADER = ["Round", "Court", "Player1", "Player2", "Player3", "Player4",
              "Relaxed"]


def format_schedule(rounds: list[Round], roster: list, title: str = "") -> str:
    """Format schedule as human-readable text, organized by round."""
    lines = []
    lines.append("=" * 80)
    lines.append((title or "DOUBLES SCHEDULE").upper())
    lines.append("=" * 80)

    width = max([len(str(p)) for p in roster] + [4])

    for rnd in rounds:
        lines.append(f"\n--- ROUND {rnd.number} ---")
        for m in rnd.matches:
            a, b = (str(p) for p in m.team1)
            c, d = (str(p) for p in m.team2)
            note = "  (repeat team)" if m.relaxed else ""
            lines.append(
                f"  Court {m.court}:  {a:<{width}} & {b:<{width}}  vs  "
                f"{c:<{width}} & {d:<{width}}{note}"
            )
        if rnd.sitting_out:
            lines.append(f"  Sitting out: {', '.join(str(p) for p in rnd.sitting_out)}")

    # Per-player schedule
    lines.append("\n" + "=" * 80)
    lines.append("PER-PLAYER SCHEDULES")
    lines.append("=" * 80)

    for player in roster:
        lines.append(f"\n{player}:")
        for rnd in rounds:
            match = next((m for m in rnd.matches if m.involves(player)), None)
            if match is None:
                lines.append(f"  R{rnd.number:>2}  (sits out)")
                continue
            opp = " & ".join(str(p) for p in match.opponents(player))
            lines.append(
                f"  R{rnd.number:>2}  court {match.court}  with "
                f"{str(match.partner(player)):<{width}}  vs {opp}"
            )

    return "\n".join(lines)


def format_schedule_csv(rounds: list[Round]) -> str:
    """Format schedule as CSV, one row per match."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    for rnd in rounds:
        for m in sorted(rnd.matches, key=lambda x: x.court):
            writer.writerow([
                rnd.number, m.court, *m.players, "yes" if m.relaxed else "",
            ])

    return output.getvalue()


def write_schedule(rounds: list[Round], roster: list,
                   output_prefix: str = "output", title: str = ""):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(rounds, roster, title=title))
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(rounds))
    print(f"Written: {csv_path}")
