"""Statistics and balance reporting for doubles schedules."""

from collections import defaultdict

from pairsched.models import Round, partnership


def compute_stats(rounds: list[Round], roster: list) -> dict:
    """Compute per-player balance and pairing statistics for a schedule."""
    all_players = list(roster)

    games = defaultdict(int)
    sit_outs = defaultdict(int)
    partner_counts = defaultdict(lambda: defaultdict(int))  # player -> partner -> count
    opponent_counts = defaultdict(lambda: defaultdict(int))
    courts_per_round = {}
    relaxed_matches = 0

    for rnd in rounds:
        courts_per_round[rnd.number] = len(rnd.matches)
        playing = set()
        for m in rnd.matches:
            if m.relaxed:
                relaxed_matches += 1
            for p in m.players:
                games[p] += 1
                playing.add(p)
                partner_counts[p][m.partner(p)] += 1
                for o in m.opponents(p):
                    opponent_counts[p][o] += 1
        for p in all_players:
            if p not in playing:
                sit_outs[p] += 1

    n = len(all_players)
    total_pairs = n * (n - 1) // 2
    used_pairs = set()
    repeated_pairs = 0
    for p in all_players:
        for q, c in partner_counts[p].items():
            key = partnership(p, q)
            if key in used_pairs:
                continue
            used_pairs.add(key)
            if c > 1:
                repeated_pairs += 1

    game_values = [games[p] for p in all_players]
    return {
        "all_players": all_players,
        "games": dict(games),
        "sit_outs": dict(sit_outs),
        "partner_counts": partner_counts,
        "opponent_counts": opponent_counts,
        "distinct_partners": {p: len(partner_counts[p]) for p in all_players},
        "courts_per_round": courts_per_round,
        "total_partnerships": total_pairs,
        "used_partnerships": len(used_pairs),
        "repeated_partnerships": repeated_pairs,
        "relaxed_matches": relaxed_matches,
        "min_games": min(game_values, default=0),
        "max_games": max(game_values, default=0),
    }


def format_stats_report(stats: dict) -> str:
    """Format statistics as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 60)

    players = stats["all_players"]
    rounds = len(stats["courts_per_round"])
    matches = sum(stats["courts_per_round"].values())
    lines.append(f"\nRounds: {rounds}   Matches: {matches}")
    lines.append(
        f"Partnerships used: {stats['used_partnerships']} of "
        f"{stats['total_partnerships']}"
        f" ({stats['repeated_partnerships']} repeated)"
    )
    if stats["relaxed_matches"]:
        lines.append(f"Relaxed matches (one repeated team): {stats['relaxed_matches']}")
    spread = stats["max_games"] - stats["min_games"]
    lines.append(f"Games per player: {stats['min_games']}-{stats['max_games']}"
                 f" (spread {spread})")

    width = max([len(str(p)) for p in players] + [6])

    def _z(v, w=5):
        """Format an integer, suppressing zeros to blank."""
        if v == 0:
            return " " * w
        return f"{v:>{w}}"

    lines.append("\n--- PLAYER BALANCE ---")
    lines.append(f"{'Player':<{width}} {'Games':>5} {'Sit':>5} {'Prtn':>5}")
    lines.append("-" * (width + 18))
    for p in players:
        g = stats["games"].get(p, 0)
        s = stats["sit_outs"].get(p, 0)
        d = stats["distinct_partners"].get(p, 0)
        flag = " ***" if g > stats["min_games"] + 1 else ""
        lines.append(f"{str(p):<{width}} {g:>5} {_z(s)} {_z(d)}{flag}")

    for title, key in (("PARTNER MATRIX", "partner_counts"),
                       ("OPPONENT MATRIX", "opponent_counts")):
        lines.append(f"\n--- {title} ---")
        header = f"{'':>{width}}"
        for p in players:
            header += f" {str(p)[:5]:>5}"
        lines.append(header)
        lines.append("-" * (width + 6 * len(players)))
        for p1 in players:
            row = f"{str(p1):>{width}}"
            for p2 in players:
                if p1 == p2:
                    row += "     -"
                else:
                    c = stats[key].get(p1, {}).get(p2, 0)
                    row += f" {c:>5}"
            lines.append(row)

    return "\n".join(lines)
