"""Schedule generation engine for doubles rounds.

Each call builds rounds one at a time until a stop condition holds:
1. Validate inputs (roster size, unique ids, courts, stopping config)
2. Before each round, check the stop conditions:
   - every partnership has been used
   - max_rounds reached
   - every player has reached target_games_per_player
3. Build a round (rounds.py); a round with no fillable court ends generation

Trackers are created fresh per call and never outlive it, so concurrent
calls share no state and identical inputs give identical schedules.
"""

from pairsched.models import (
    GenerationConfig, GenerationResult, GenerationState, Round,
)
from pairsched.rounds import RoundBuilder
from pairsched.selector import MatchSelector
from pairsched.trackers import GameCountTracker, PartnershipTracker


STOP_ALL_PARTNERSHIPS = "all_partnerships_used"
STOP_MAX_ROUNDS = "max_rounds"
STOP_TARGET_GAMES = "target_games"
STOP_NO_FILLABLE_COURT = "no_fillable_court"
STOP_INVALID_INPUT = "invalid_input"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_inputs(roster: list, courts: int,
                    config: GenerationConfig) -> list[str]:
    """Return a list of reasons this input cannot be scheduled."""
    errors = []

    if len(roster) < 4:
        errors.append(f"At least 4 players are required, got {len(roster)}")
    if len(set(roster)) != len(roster):
        seen = set()
        dups = []
        for p in roster:
            if p in seen and p not in dups:
                dups.append(p)
            seen.add(p)
        errors.append(f"Duplicate player ids: {', '.join(str(p) for p in dups)}")
    try:
        sorted(roster)
    except TypeError:
        errors.append("Player ids must be mutually comparable")

    if not _is_int(courts) or courts < 1:
        errors.append(f"Courts must be a positive integer, got {courts!r}")

    if not _is_int(config.max_rounds) or config.max_rounds < 1:
        errors.append(
            f"max_rounds must be an integer of at least 1, got {config.max_rounds!r}"
        )
    for name in ("target_games_per_player", "backtrack_budget"):
        value = getattr(config, name)
        if value is not None and (not _is_int(value) or value < 1):
            errors.append(f"{name} must be an integer of at least 1, got {value!r}")

    return errors


class ScheduleGenerator:
    """Generates a doubles schedule for one roster and court count."""

    def __init__(self, roster: list, courts: int,
                 config: GenerationConfig | None = None):
        self.roster = list(roster)
        self.courts = courts
        self.config = config or GenerationConfig()

    def generate(self, verbose: bool = False) -> GenerationResult:
        errors = validate_inputs(self.roster, self.courts, self.config)
        if errors:
            if verbose:
                for e in errors:
                    print(f"  Invalid input: {e}")
            return GenerationResult(
                rounds=[],
                state=GenerationState.FAILED,
                game_counts={},
                stop_reason=STOP_INVALID_INPUT,
                errors=errors,
            )

        partnerships = PartnershipTracker(self.roster)
        game_counts = GameCountTracker(self.roster)
        selector = MatchSelector(
            partnerships,
            backtrack_budget=self.config.backtrack_budget,
            allow_relaxed=self.config.allow_relaxed,
            allow_resplits=self.config.allow_resplits,
        )
        builder = RoundBuilder(
            self.roster, self.courts, partnerships, game_counts, selector,
            balance_policy=self.config.balance_policy,
        )

        rounds: list[Round] = []
        state = GenerationState.BUILDING
        stop_reason = ""

        while not state.is_terminal:
            stop_reason = self._stop_reason(partnerships, game_counts, rounds)
            if stop_reason:
                state = GenerationState.COMPLETED
                break

            rnd = builder.build(len(rounds) + 1)
            if rnd is None:
                state = GenerationState.EXHAUSTED
                stop_reason = STOP_NO_FILLABLE_COURT
                break

            rounds.append(rnd)
            if verbose:
                relaxed = sum(1 for m in rnd.matches if m.relaxed)
                note = f" ({relaxed} relaxed)" if relaxed else ""
                out = ", ".join(str(p) for p in rnd.sitting_out) or "none"
                print(f"  Round {rnd.number}: {len(rnd.matches)} matches{note}, "
                      f"sitting out: {out}")

        result = GenerationResult(
            rounds=rounds,
            state=state,
            game_counts=game_counts.as_dict(),
            stop_reason=stop_reason,
            relaxed_matches=sum(1 for r in rounds for m in r.matches if m.relaxed),
            unused_partnerships=partnerships.remaining(),
        )

        if verbose:
            print(f"  Generated {result.rounds_generated} rounds "
                  f"({state.value}: {stop_reason})")
            print(f"  Games per player: min={game_counts.min()}, "
                  f"max={game_counts.max()}")
            if result.degraded_fairness:
                print(f"  Warning: game count skew {result.skew} > 1")
            if state is GenerationState.EXHAUSTED:
                unused = partnerships.unused_pairs()
                shown = ", ".join(f"{a}&{b}" for a, b in unused[:10])
                more = f" (+{len(unused) - 10} more)" if len(unused) > 10 else ""
                print(f"  Unused partnerships: {shown or 'none'}{more}")
        return result

    def _stop_reason(self, partnerships: PartnershipTracker,
                     game_counts: GameCountTracker,
                     rounds: list[Round]) -> str:
        if partnerships.remaining() == 0:
            return STOP_ALL_PARTNERSHIPS
        if len(rounds) >= self.config.max_rounds:
            return STOP_MAX_ROUNDS
        target = self.config.target_games_per_player
        if target is not None and game_counts.min() >= target:
            return STOP_TARGET_GAMES
        return ""


def generate(roster: list, courts: int,
             config: GenerationConfig | None = None,
             verbose: bool = False) -> GenerationResult:
    """Generate a schedule; see ScheduleGenerator."""
    return ScheduleGenerator(roster, courts, config).generate(verbose=verbose)
