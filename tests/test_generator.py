"""Tests for generator.py — stop conditions, terminal states and scenarios."""

import pytest

from pairsched.generator import (
    STOP_ALL_PARTNERSHIPS, STOP_INVALID_INPUT, STOP_MAX_ROUNDS,
    STOP_NO_FILLABLE_COURT, STOP_TARGET_GAMES, ScheduleGenerator, generate,
    validate_inputs,
)
from pairsched.models import (
    BalancePolicy, GenerationConfig, GenerationState, InvalidInput, partnership,
)


def _teams(rnd):
    return [(m.team1, m.team2) for m in rnd.matches]


class TestValidateInputs:
    def test_ok(self):
        assert validate_inputs([1, 2, 3, 4], 1, GenerationConfig()) == []

    def test_too_few_players(self):
        errors = validate_inputs([1, 2, 3], 1, GenerationConfig())
        assert any("At least 4 players" in e for e in errors)

    def test_duplicates(self):
        errors = validate_inputs(["A", "B", "C", "D", "A"], 1, GenerationConfig())
        assert any("Duplicate player ids: A" in e for e in errors)

    def test_courts(self):
        assert validate_inputs([1, 2, 3, 4], 0, GenerationConfig())
        assert validate_inputs([1, 2, 3, 4], -2, GenerationConfig())
        assert validate_inputs([1, 2, 3, 4], True, GenerationConfig())

    def test_mixed_id_types(self):
        errors = validate_inputs([1, "B", 3, 4], 1, GenerationConfig())
        assert any("comparable" in e for e in errors)

    def test_bad_stopping_config(self):
        assert validate_inputs([1, 2, 3, 4], 1, GenerationConfig(max_rounds=0))
        assert validate_inputs(
            [1, 2, 3, 4], 1, GenerationConfig(target_games_per_player=0)
        )
        assert validate_inputs([1, 2, 3, 4], 1, GenerationConfig(backtrack_budget=0))

    def test_non_integer_stopping_config(self):
        for config in [
            GenerationConfig(max_rounds=None),
            GenerationConfig(max_rounds="10"),
            GenerationConfig(max_rounds=2.5),
            GenerationConfig(target_games_per_player="3"),
            GenerationConfig(backtrack_budget=True),
        ]:
            result = generate([1, 2, 3, 4], 1, config)
            assert result.state is GenerationState.FAILED, config
            assert result.stop_reason == STOP_INVALID_INPUT
            assert any("must be an integer" in e for e in result.errors)


class TestScenarios:
    def test_four_players_one_court(self):
        result = generate([0, 1, 2, 3], 1)

        assert result.state is GenerationState.EXHAUSTED
        assert result.stop_reason == STOP_NO_FILLABLE_COURT
        assert result.rounds_generated == 1
        assert _teams(result.rounds[0]) == [((0, 1), (2, 3))]
        assert result.game_counts == {0: 1, 1: 1, 2: 1, 3: 1}

    def test_four_players_resplits_allowed(self):
        result = generate([0, 1, 2, 3], 1, GenerationConfig(allow_resplits=True))

        assert result.state is GenerationState.COMPLETED
        assert result.stop_reason == STOP_ALL_PARTNERSHIPS
        assert [_teams(r) for r in result.rounds] == [
            [((0, 1), (2, 3))],
            [((0, 2), (1, 3))],
            [((0, 3), (1, 2))],
        ]

    def test_eight_players_two_courts(self):
        result = generate(list(range(8)), 2)

        assert result.state is GenerationState.COMPLETED
        assert result.stop_reason == STOP_ALL_PARTNERSHIPS
        assert result.rounds_generated == 7
        assert result.game_counts == {p: 7 for p in range(8)}
        assert result.relaxed_matches == 0
        assert result.unused_partnerships == 0
        assert not result.degraded_fairness

        pairs = [pair for m in result.matches for pair in m.partnerships]
        assert len(pairs) == 28
        assert len(set(pairs)) == 28

    def test_eight_players_exact_rounds(self):
        result = generate(list(range(8)), 2)
        assert _teams(result.rounds[0]) == [((0, 1), (2, 3)), ((4, 5), (6, 7))]
        assert _teams(result.rounds[1]) == [((0, 2), (1, 4)), ((3, 6), (5, 7))]
        assert _teams(result.rounds[6]) == [((0, 7), (2, 5)), ((1, 6), (3, 4))]

    def test_six_players_one_court(self):
        result = generate(list(range(6)), 1)

        assert result.state is GenerationState.COMPLETED
        assert result.rounds_generated == 8
        assert result.skew <= 1
        assert result.relaxed_matches == 1
        for rnd in result.rounds:
            assert len(rnd.matches) == 1
            assert len(rnd.sitting_out) == 2
        # Round 6 must re-split 0, 2, 4, 5 to keep 0..5 within one game
        assert _teams(result.rounds[5]) == [((0, 4), (2, 5))]
        last = result.rounds[-1].matches[0]
        assert last.relaxed
        assert (last.team1, last.team2) == ((3, 4), (0, 1))

    def test_six_players_strict_partnerships(self):
        result = generate(list(range(6)), 1, GenerationConfig(allow_relaxed=False))

        assert result.state is GenerationState.EXHAUSTED
        assert result.rounds_generated == 7
        assert result.relaxed_matches == 0
        assert result.unused_partnerships == 1
        assert result.skew <= 1

    def test_five_players_two_courts(self):
        result = generate(list(range(5)), 2)

        assert result.state is not GenerationState.FAILED
        assert result.state is GenerationState.COMPLETED
        assert result.rounds_generated == 5
        assert result.game_counts == {p: 4 for p in range(5)}
        for rnd in result.rounds:
            assert len(rnd.matches) == 1
            assert len(rnd.sitting_out) == 1
        sat_out = [rnd.sitting_out[0] for rnd in result.rounds]
        assert sorted(sat_out) == [0, 1, 2, 3, 4]

    def test_three_players(self):
        for courts in [1, 2, 5]:
            result = generate([1, 2, 3], courts)
            assert result.state is GenerationState.FAILED
            assert result.stop_reason == STOP_INVALID_INPUT
            assert result.rounds == []
            assert result.errors
            with pytest.raises(InvalidInput):
                result.raise_for_state()

    def test_zero_courts(self):
        result = generate(list(range(8)), 0)
        assert result.state is GenerationState.FAILED
        assert result.rounds == []

    def test_excess_courts_never_fail(self):
        wide = generate(list(range(8)), 5)
        narrow = generate(list(range(8)), 2)
        assert wide.state is GenerationState.COMPLETED
        assert [_teams(r) for r in wide.rounds] == [_teams(r) for r in narrow.rounds]


class TestStopConditions:
    def test_max_rounds(self):
        result = generate(list(range(8)), 2, GenerationConfig(max_rounds=3))
        assert result.state is GenerationState.COMPLETED
        assert result.stop_reason == STOP_MAX_ROUNDS
        assert result.rounds_generated == 3

    def test_target_games(self):
        result = generate(list(range(8)), 2,
                          GenerationConfig(target_games_per_player=2))
        assert result.state is GenerationState.COMPLETED
        assert result.stop_reason == STOP_TARGET_GAMES
        assert result.rounds_generated == 2
        assert min(result.game_counts.values()) == 2

    def test_target_games_with_sit_outs(self):
        result = generate(list(range(6)), 1,
                          GenerationConfig(target_games_per_player=2))
        assert result.stop_reason == STOP_TARGET_GAMES
        assert min(result.game_counts.values()) >= 2
        assert result.skew <= 1

    def test_rounds_never_exceed_max(self):
        for n in range(4, 17):
            result = generate(list(range(n)), 2, GenerationConfig(max_rounds=4))
            assert result.rounds_generated <= 4


class TestProperties:
    @pytest.mark.parametrize("n", list(range(4, 15)))
    @pytest.mark.parametrize("courts", [1, 2, 3])
    def test_matches_and_rounds_valid(self, n, courts):
        result = generate(list(range(n)), courts)
        assert result.state in (GenerationState.COMPLETED, GenerationState.EXHAUSTED)
        assert result.rounds_generated >= 1

        for expected, rnd in enumerate(result.rounds, 1):
            assert rnd.number == expected
            assert len(rnd.matches) <= courts
            seen = set()
            for m in rnd.matches:
                assert len(set(m.players)) == 4, f"Round {rnd.number}: {m.players}"
                for p in m.players:
                    assert p not in seen, f"{p} plays twice in round {rnd.number}"
                    seen.add(p)
            assert set(rnd.sitting_out) == set(range(n)) - seen

    @pytest.mark.parametrize("n", list(range(4, 15)))
    @pytest.mark.parametrize("courts", [1, 2, 3])
    def test_strict_matches_use_new_partnerships(self, n, courts):
        result = generate(list(range(n)), courts)
        used = set()
        for m in result.matches:
            if not m.relaxed:
                for pair in m.partnerships:
                    assert pair not in used, f"{pair} repeated in round {m.round_number}"
            used.update(m.partnerships)

    @pytest.mark.parametrize("n", list(range(4, 15)))
    def test_game_counts_match_schedule(self, n):
        result = generate(list(range(n)), 2)
        counts = {p: 0 for p in range(n)}
        for m in result.matches:
            for p in m.players:
                counts[p] += 1
        assert counts == result.game_counts

    @pytest.mark.parametrize("n", list(range(4, 25)))
    @pytest.mark.parametrize("courts", [1, 2, 3, 4, 5, 6])
    def test_default_keeps_skew(self, n, courts):
        result = generate(list(range(n)), courts)
        assert result.skew <= 1, f"skew {result.skew}: {result.game_counts}"
        assert not result.degraded_fairness

    @pytest.mark.parametrize("n", [10, 13, 16])
    def test_default_keeps_skew_every_round(self, n):
        roster = list(range(n))
        counts = {p: 0 for p in roster}
        for rnd in generate(roster, 3).rounds:
            for p in rnd.players:
                counts[p] += 1
            spread = max(counts.values()) - min(counts.values())
            assert spread <= 1, f"Round {rnd.number}: spread {spread}"

    @pytest.mark.parametrize("n", list(range(4, 15)))
    @pytest.mark.parametrize("courts", [1, 2, 3])
    def test_strict_balance_keeps_skew(self, n, courts):
        config = GenerationConfig(balance_policy=BalancePolicy.STRICT)
        result = generate(list(range(n)), courts, config)
        assert result.skew <= 1
        assert not result.degraded_fairness

    def test_deterministic(self):
        roster = [f"P{i:02d}" for i in range(1, 14)]
        r1 = generate(roster, 3)
        r2 = generate(roster, 3)
        assert [_teams(r) for r in r1.rounds] == [_teams(r) for r in r2.rounds]
        assert r1.state is r2.state
        assert r1.game_counts == r2.game_counts

    def test_roster_order_irrelevant(self):
        r1 = generate(list(range(9)), 2)
        r2 = generate(list(reversed(range(9))), 2)
        assert [_teams(r) for r in r1.rounds] == [_teams(r) for r in r2.rounds]

    def test_no_state_between_calls(self):
        gen = ScheduleGenerator(list(range(8)), 2)
        first = gen.generate()
        second = gen.generate()
        assert [_teams(r) for r in first.rounds] == [_teams(r) for r in second.rounds]

    def test_string_ids(self):
        roster = ["Alice", "Bea", "Cam", "Dev"]
        result = generate(roster, 1)
        assert result.rounds[0].matches[0].partnerships == [
            partnership("Alice", "Bea"), partnership("Cam", "Dev"),
        ]


class TestVerbose:
    def test_prints_progress(self, capsys):
        generate(list(range(8)), 2, verbose=True)
        out = capsys.readouterr().out
        assert "Round 1: 2 matches" in out
        assert "Generated 7 rounds (completed: all_partnerships_used)" in out

    def test_prints_invalid_input(self, capsys):
        generate([1, 2], 1, verbose=True)
        out = capsys.readouterr().out
        assert "Invalid input" in out

    def test_silent_by_default(self, capsys):
        generate(list(range(8)), 2)
        assert capsys.readouterr().out == ""
