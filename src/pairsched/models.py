"""Data models for the doubles round scheduler."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Optional


PlayerId = Hashable


class GenerationState(Enum):
    BUILDING = "building"
    COMPLETED = "completed"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not GenerationState.BUILDING


class BalancePolicy(Enum):
    PRIORITY = "priority"
    STRICT = "strict"

    @classmethod
    def from_str(cls, s: str) -> "BalancePolicy":
        return cls(s.strip().lower())


class InvalidInput(ValueError):
    """Roster or court/stopping parameters cannot produce any schedule."""


def partnership(a: PlayerId, b: PlayerId) -> tuple:
    """Canonical (sorted) key for an unordered pair of players."""
    return (a, b) if a <= b else (b, a)


@dataclass
class Match:
    """One court in one round: team1 (p1, p2) against team2 (p3, p4)."""
    round_number: int
    court: int
    team1: tuple
    team2: tuple
    relaxed: bool = False  # chosen under the at-least-one-new-team rule

    @property
    def players(self) -> tuple:
        return self.team1 + self.team2

    @property
    def partnerships(self) -> list[tuple]:
        return [partnership(*self.team1), partnership(*self.team2)]

    def involves(self, player: PlayerId) -> bool:
        return player in self.players

    def partner(self, player: PlayerId) -> PlayerId:
        if player == self.team1[0]:
            return self.team1[1]
        if player == self.team1[1]:
            return self.team1[0]
        if player == self.team2[0]:
            return self.team2[1]
        return self.team2[0]

    def opponents(self, player: PlayerId) -> tuple:
        if player in self.team1:
            return self.team2
        return self.team1


@dataclass
class Round:
    """A set of matches where each player appears at most once."""
    number: int
    matches: list[Match]
    sitting_out: list = field(default_factory=list)

    @property
    def players(self) -> list:
        return [p for m in self.matches for p in m.players]


@dataclass
class GenerationConfig:
    """Stopping and search configuration for one generate() call."""
    max_rounds: int = 20
    target_games_per_player: Optional[int] = None
    backtrack_budget: Optional[int] = None  # None: k * k per court
    allow_relaxed: bool = True
    allow_resplits: bool = False
    balance_policy: BalancePolicy = BalancePolicy.PRIORITY


@dataclass
class GenerationResult:
    """Schedule plus the report a caller needs to accept or reject it."""
    rounds: list[Round]
    state: GenerationState
    game_counts: dict
    stop_reason: str = ""
    errors: list[str] = field(default_factory=list)
    relaxed_matches: int = 0
    unused_partnerships: int = 0

    @property
    def rounds_generated(self) -> int:
        return len(self.rounds)

    @property
    def matches(self) -> list[Match]:
        return [m for r in self.rounds for m in r.matches]

    @property
    def skew(self) -> int:
        if not self.game_counts:
            return 0
        return max(self.game_counts.values()) - min(self.game_counts.values())

    @property
    def degraded_fairness(self) -> bool:
        return self.skew > 1

    def raise_for_state(self):
        """Raise InvalidInput if generation never started."""
        if self.state is GenerationState.FAILED:
            raise InvalidInput("; ".join(self.errors))
