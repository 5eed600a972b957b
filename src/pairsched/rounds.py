"""Round building: fill up to `courts` matches, commit only whole rounds.

Every committed match keeps the roster-wide game-count skew within 1. Under
the `priority` policy, when a court could only be filled by breaking that
balance, the same four players may share a court again (a re-split) as long
as balance holds. The `strict` policy never re-splits for balance and leaves
such a court empty.
"""

from typing import Optional

from pairsched.models import BalancePolicy, Match, Round
from pairsched.selector import MatchSelector
from pairsched.trackers import GameCountTracker, PartnershipTracker


class RoundBuilder:
    def __init__(self, roster: list, courts: int,
                 partnerships: PartnershipTracker,
                 game_counts: GameCountTracker,
                 selector: MatchSelector,
                 balance_policy: BalancePolicy = BalancePolicy.PRIORITY):
        self.roster = list(roster)
        self.courts = courts
        self.partnerships = partnerships
        self.game_counts = game_counts
        self.selector = selector
        self.balance_policy = balance_policy

    def build(self, round_number: int) -> Optional[Round]:
        """Build and commit one round.

        Courts that cannot be filled are skipped. Returns None (and leaves
        the trackers untouched) when not a single court could be filled.
        """
        matches: list[Match] = []
        busy: set = set()

        for _ in range(self.courts):
            eligible = [p for p in self.roster if p not in busy]
            if len(eligible) < 4:
                break

            picked = self._pick(self.game_counts.ranked(eligible), matches)
            if picked is None:
                # Later courts would search the same eligible set
                break

            team1, team2, relaxed = picked
            match = Match(
                round_number=round_number,
                court=len(matches) + 1,
                team1=team1,
                team2=team2,
                relaxed=relaxed,
            )
            matches.append(match)
            busy.update(match.players)

        if not matches:
            return None

        rnd = Round(number=round_number, matches=matches)
        rnd.sitting_out = [p for p in self.roster if p not in busy]
        self._commit(rnd)
        return rnd

    def _pick(self, ranked: list, matches: list[Match]):
        pending = [p for m in matches for p in m.players]

        def admissible(players):
            return self._keeps_balance(pending, players)

        picked = self.selector.select(ranked, admissible=admissible)
        if picked is not None or self.balance_policy is BalancePolicy.STRICT:
            return picked

        # Only an unbalanced match is left: re-split a foursome instead
        if self.selector.select(ranked) is None:
            return None
        return self.selector.select(ranked, admissible=admissible,
                                    allow_resplits=True)

    def _commit(self, rnd: Round):
        for m in rnd.matches:
            self.partnerships.mark_played(*m.team1)
            self.partnerships.mark_played(*m.team2)
            self.partnerships.mark_grouped(m.players)
        self.game_counts.increment(rnd.players)

    def _keeps_balance(self, pending: list, players: tuple) -> bool:
        """True if the projected roster-wide skew stays within 1.

        Players not yet placed this round can only gain games later, so
        the projected minimum is a lower bound and the check is safe.
        """
        extra = set(pending) | set(players)
        projected = [
            self.game_counts.count(p) + (1 if p in extra else 0)
            for p in self.roster
        ]
        return max(projected) - min(projected) <= 1
