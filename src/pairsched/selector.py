"""Match selection: four players split into two fresh partnerships.

The search is deterministic. Candidates arrive ranked (fewest games first,
then id), and the first acceptable match in that order wins, so the players
who have sat out the most are pulled onto a court first.

Search order for candidates c0, c1, ...:
1. p1 = head of the list.
2. p2 = first later candidate that has never partnered p1.
3. p3, p4 are found the same way among the remaining candidates.
4. If no (p3, p4) completes the match, try the next p2; once p1 runs out of
   partners, drop p1 and start again from the next head.

Every partner check costs one step. When the step budget runs out (or the
search space is exhausted) the search is repeated once under the relaxed
rule, which accepts a match as long as at least one of its two teams is new.
"""

from typing import Callable, Optional

from pairsched.trackers import PartnershipTracker


class MatchSelector:
    def __init__(self, partnerships: PartnershipTracker,
                 backtrack_budget: int | None = None,
                 allow_relaxed: bool = True,
                 allow_resplits: bool = False):
        self.partnerships = partnerships
        self.backtrack_budget = backtrack_budget
        self.allow_relaxed = allow_relaxed
        self.allow_resplits = allow_resplits

    def budget_for(self, candidates: list) -> int:
        if self.backtrack_budget is not None:
            return self.backtrack_budget
        return len(candidates) * len(candidates)

    def select(self, candidates: list,
               admissible: Optional[Callable[[tuple], bool]] = None,
               allow_resplits: Optional[bool] = None,
               ) -> Optional[tuple[tuple, tuple, bool]]:
        """Pick one match from ranked candidates.

        `allow_resplits` overrides the selector's own setting for this call.
        Returns (team1, team2, relaxed) or None if no court can be filled.
        """
        if len(candidates) < 4:
            return None
        if allow_resplits is None:
            allow_resplits = self.allow_resplits

        found = self._search(candidates, True, admissible, allow_resplits)
        if found is not None:
            return found[0], found[1], False

        if not self.allow_relaxed:
            return None

        found = self._search(candidates, False, admissible, allow_resplits)
        if found is not None:
            return found[0], found[1], True
        return None

    def _search(self, candidates: list, strict: bool,
                admissible: Optional[Callable[[tuple], bool]],
                allow_resplits: bool) -> Optional[tuple[tuple, tuple]]:
        budget = self.budget_for(candidates)
        steps = 0

        for i, p1 in enumerate(candidates):
            pool = candidates[i + 1:]
            if len(pool) < 3:
                break
            for j, p2 in enumerate(pool):
                if steps >= budget:
                    return None
                steps += 1
                if strict and self.partnerships.has_played(p1, p2):
                    continue

                rest = pool[:j] + pool[j + 1:]
                for k, p3 in enumerate(rest):
                    tail = rest[k + 1:]
                    if not tail:
                        break
                    for p4 in tail:
                        if steps >= budget:
                            return None
                        steps += 1
                        if strict and self.partnerships.has_played(p3, p4):
                            continue
                        team1, team2 = (p1, p2), (p3, p4)
                        if self._acceptable(team1, team2, strict, admissible,
                                            allow_resplits):
                            return team1, team2
        return None

    def _acceptable(self, team1: tuple, team2: tuple, strict: bool,
                    admissible: Optional[Callable[[tuple], bool]],
                    allow_resplits: bool) -> bool:
        if not strict:
            # Relaxed: at least one of the two teams must be new
            if (self.partnerships.has_played(*team1)
                    and self.partnerships.has_played(*team2)):
                return False

        players = team1 + team2
        if not allow_resplits and self.partnerships.has_grouped(players):
            return False
        if admissible is not None and not admissible(players):
            return False
        return True
