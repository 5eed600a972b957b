"""Partnership and game-count bookkeeping for one schedule generation."""

from collections import defaultdict

from pairsched.models import PlayerId, partnership


class PartnershipTracker:
    """Records which pairs have teamed up and which foursomes have met."""

    def __init__(self, roster: list):
        self.roster = list(roster)
        self._pairs: dict[tuple, int] = defaultdict(int)
        self._foursomes: set[frozenset] = set()

    @property
    def total(self) -> int:
        n = len(self.roster)
        return n * (n - 1) // 2

    def has_played(self, a: PlayerId, b: PlayerId) -> bool:
        return self._pairs.get(partnership(a, b), 0) > 0

    def times_played(self, a: PlayerId, b: PlayerId) -> int:
        return self._pairs.get(partnership(a, b), 0)

    def mark_played(self, a: PlayerId, b: PlayerId):
        if a == b:
            raise ValueError(f"Player {a} cannot partner themselves")
        self._pairs[partnership(a, b)] += 1

    def used(self) -> int:
        return sum(1 for c in self._pairs.values() if c > 0)

    def remaining(self) -> int:
        return self.total - self.used()

    def unused_pairs(self) -> list[tuple]:
        ordered = sorted(self.roster)
        return [
            (a, b)
            for i, a in enumerate(ordered)
            for b in ordered[i + 1:]
            if not self.has_played(a, b)
        ]

    def has_grouped(self, players) -> bool:
        return frozenset(players) in self._foursomes

    def mark_grouped(self, players):
        self._foursomes.add(frozenset(players))


class GameCountTracker:
    """Per-player games played; sitting out never counts."""

    def __init__(self, roster: list):
        self._counts: dict = {p: 0 for p in roster}

    def count(self, player: PlayerId) -> int:
        return self._counts[player]

    def increment(self, players):
        for p in players:
            self._counts[p] += 1

    def min(self) -> int:
        return min(self._counts.values())

    def max(self) -> int:
        return max(self._counts.values())

    def skew(self) -> int:
        return self.max() - self.min()

    def ranked(self, players) -> list:
        """Order players by games played ascending, then by id."""
        return sorted(players, key=lambda p: (self._counts[p], p))

    def as_dict(self) -> dict:
        return dict(self._counts)
