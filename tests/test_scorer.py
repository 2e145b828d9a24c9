"""Tests for the VIKOR scorer and compromise validator.

This test suite validates that the scorer:
1. Computes S, R and Q with the documented tie rules
2. Ranks alternatives by ascending Q with stable ties
3. Rounds half-up to 4 decimals
4. Refuses to score an empty alternative list
5. Applies the two acceptance conditions correctly
"""

import pytest

from placement_vikor.compromise import CompromiseValidator
from placement_vikor.errors import NoAlternativesError
from placement_vikor.schema import (
    Alternative,
    CompromiseType,
    CriteriaValues,
    Individual,
    ScoredAlternative,
)
from placement_vikor.scorer import VikorScorer, round_half_up
from placement_vikor.validation import parse_weights


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def weights():
    return parse_weights([0.3, 0.2, 0.1, 0.25, 0.15])


@pytest.fixture
def student() -> Individual:
    return Individual(name="Siti Nurhaliza", c1=90, c2=85, c4=88, c5=90)


@pytest.fixture
def banks() -> list[Alternative]:
    return [
        Alternative(code="A1", name="Bank BJB Syariah KC Jakarta (Soepomo)", distance=5.2),
        Alternative(code="A2", name="Bank Jakarta KCP Matraman", distance=3.8),
        Alternative(code="A3", name="Bank BRI KCP Saharjo", distance=4.5),
        Alternative(code="A4", name="Bank Mandiri KCP Jatinegara", distance=6.1),
        Alternative(code="A5", name="Bank BNI KCP Tebet", distance=2.9),
    ]


def scored(code: str, q: float, s: float, r: float, rank: int) -> ScoredAlternative:
    return ScoredAlternative(
        code=code,
        name=f"Bank {code}",
        distance=1.0,
        s=s,
        r=r,
        q=q,
        rank=rank,
        criteria_values=CriteriaValues(c1=80, c2=80, c3=1.0, c4=80, c5=80),
    )


# =============================================================================
# Rounding
# =============================================================================


class TestRoundHalfUp:
    """Tests for 4-decimal half-up rounding."""

    def test_half_rounds_up(self):
        assert round_half_up(0.71875) == 0.7188

    def test_differs_from_bankers_rounding(self):
        assert round_half_up(2.5, 0) == 3.0
        assert round(2.5) == 2

    def test_plain_values_unchanged(self):
        assert round_half_up(0.25) == 0.25
        assert round_half_up(0.0) == 0.0


# =============================================================================
# Scorer
# =============================================================================


class TestVikorScorer:
    """Tests for S/R/Q computation and ranking."""

    def test_ranks_by_distance_when_only_distance_varies(self, weights, student, banks):
        score = VikorScorer(weights, v=0.5).score(student, banks)

        assert [a.code for a in score.ranking] == ["A5", "A2", "A3", "A1", "A4"]
        assert [a.rank for a in score.ranking] == [1, 2, 3, 4, 5]

    def test_best_has_minimum_q(self, weights, student, banks):
        score = VikorScorer(weights, v=0.5).score(student, banks)

        assert score.best.rank == 1
        assert score.best.q == min(a.q for a in score.ranking)
        assert score.best.q == 0.0

    def test_q_values_within_unit_interval(self, weights, student, banks):
        score = VikorScorer(weights, v=0.5).score(student, banks)

        assert all(0 <= a.q <= 1 for a in score.ranking)
        worst = score.ranking[-1]
        assert worst.code == "A4"
        assert worst.q == 1.0

    def test_s_and_r_use_distance_weight(self, weights, student, banks):
        score = VikorScorer(weights, v=0.5).score(student, banks)

        # Only C3 varies, so S == R == 0.1 * normalized distance
        by_code = {a.code: a for a in score.ranking}
        assert by_code["A4"].s == 0.1
        assert by_code["A4"].r == 0.1
        assert by_code["A5"].s == 0.0
        assert by_code["A1"].s == by_code["A1"].r

    def test_calculation_details(self, weights, student, banks):
        score = VikorScorer(weights, v=0.5).score(student, banks)
        details = score.details

        assert details.criteria_types == ["Benefit", "Benefit", "Cost", "Benefit", "Benefit"]
        assert details.f_best[2] == 2.9
        assert details.f_worst[2] == 6.1
        assert details.f_best[0] == details.f_worst[0] == 90
        assert len(details.criteria_names) == 5

    def test_all_tied_gives_zero_q_and_input_order(self, weights, student):
        alternatives = [
            Alternative(code="B1", name="Bank Satu", distance=4.0),
            Alternative(code="B2", name="Bank Dua", distance=4.0),
            Alternative(code="B3", name="Bank Tiga", distance=4.0),
        ]
        score = VikorScorer(weights, v=0.5).score(student, alternatives)

        assert [a.q for a in score.ranking] == [0.0, 0.0, 0.0]
        assert [a.s for a in score.ranking] == [0.0, 0.0, 0.0]
        assert [a.code for a in score.ranking] == ["B1", "B2", "B3"]
        assert [a.rank for a in score.ranking] == [1, 2, 3]

    def test_single_alternative(self, weights, student):
        score = VikorScorer(weights).score(
            student, [Alternative(code="A1", name="Bank Satu", distance=1.0)]
        )
        assert len(score.ranking) == 1
        assert score.best.q == 0.0
        assert score.best.rank == 1

    def test_missing_distance_treated_as_zero(self, weights, student):
        alternatives = [
            Alternative(code="A1", name="Bank Satu"),
            Alternative(code="A2", name="Bank Dua", distance=2.0),
        ]
        score = VikorScorer(weights).score(student, alternatives)
        assert score.best.code == "A1"
        assert score.best.distance == 0.0

    def test_v_parameter_one_uses_only_s(self, weights, student, banks):
        score = VikorScorer(weights, v=1.0).score(student, banks)
        by_code = {a.code: a for a in score.ranking}
        assert by_code["A4"].q == 1.0
        assert by_code["A5"].q == 0.0

    def test_empty_alternatives_raises(self, weights, student):
        with pytest.raises(NoAlternativesError):
            VikorScorer(weights).score(student, [])

    def test_scoring_is_idempotent(self, weights, student, banks):
        scorer = VikorScorer(weights, v=0.5)
        first = scorer.score(student, banks)
        second = scorer.score(student, banks)

        assert [a.model_dump() for a in first.ranking] == [a.model_dump() for a in second.ranking]
        assert first.q_values == second.q_values

    def test_does_not_mutate_alternatives(self, weights, student, banks):
        before = [a.model_dump() for a in banks]
        VikorScorer(weights).score(student, banks)
        assert [a.model_dump() for a in banks] == before


# =============================================================================
# Compromise Validator
# =============================================================================


class TestCompromiseValidator:
    """Tests for the acceptance conditions."""

    def test_single_alternative_is_trivially_valid(self):
        result = CompromiseValidator().validate([scored("A1", 0.0, 0.0, 0.0, 1)])

        assert result.condition1_satisfied
        assert result.condition2_satisfied
        assert result.compromise_set == ["A1"]
        assert result.conclusion == CompromiseType.SINGLE
        assert result.dq is None

    def test_two_alternatives_small_advantage_is_extended(self):
        ranking = [
            scored("A1", 0.10, 0.2, 0.1, 1),
            scored("A2", 0.60, 0.3, 0.2, 2),
        ]
        result = CompromiseValidator().validate(ranking)

        assert result.dq == 1.0
        assert result.advantage == 0.5
        assert not result.condition1_satisfied
        assert result.conclusion == CompromiseType.EXTENDED
        assert result.compromise_set == ["A1", "A2"]

    def test_both_conditions_give_single_compromise(self):
        ranking = [
            scored("A1", 0.0, 0.1, 0.05, 1),
            scored("A2", 0.6, 0.3, 0.2, 2),
            scored("A3", 1.0, 0.5, 0.3, 3),
        ]
        result = CompromiseValidator().validate(ranking)

        assert result.dq == 0.5
        assert result.condition1_satisfied
        assert result.condition2_satisfied
        assert result.compromise_set == ["A1"]
        assert result.conclusion == CompromiseType.SINGLE

    def test_stability_failure_gives_double_compromise(self):
        ranking = [
            scored("A1", 0.0, 0.5, 0.3, 1),
            scored("A2", 0.6, 0.4, 0.2, 2),
            scored("A3", 1.0, 0.6, 0.4, 3),
        ]
        result = CompromiseValidator().validate(ranking)

        assert result.condition1_satisfied
        assert not result.condition2_satisfied
        assert result.best_by_s == ["A2"]
        assert result.best_by_r == ["A2"]
        assert result.compromise_set == ["A1", "A2"]
        assert result.conclusion == CompromiseType.DOUBLE

    def test_stability_satisfied_by_r_alone(self):
        ranking = [
            scored("A1", 0.0, 0.5, 0.1, 1),
            scored("A2", 0.6, 0.4, 0.2, 2),
            scored("A3", 1.0, 0.6, 0.4, 3),
        ]
        result = CompromiseValidator().validate(ranking)

        assert result.condition2_satisfied
        assert "R" in result.condition2_detail

    def test_stability_uses_unrounded_measures(self):
        ranking = [
            scored("A1", 0.0, 0.1, 0.3, 1),
            scored("A2", 0.6, 0.1, 0.2, 2),
            scored("A3", 1.0, 0.5, 0.4, 3),
        ]
        validator = CompromiseValidator()

        # Rounded S ties A1 with A2, so A1 counts as best by S
        assert validator.validate(ranking).condition2_satisfied

        raw_s = {"A1": 0.10004, "A2": 0.10001, "A3": 0.5}
        raw_r = {"A1": 0.3, "A2": 0.2, "A3": 0.4}
        result = validator.validate(ranking, raw_s, raw_r)

        assert result.best_by_s == ["A2"]
        assert not result.condition2_satisfied
        assert result.conclusion == CompromiseType.DOUBLE

    def test_scorer_exposes_unrounded_measures_by_code(self, weights, student, banks):
        score = VikorScorer(weights).score(student, banks)

        assert list(score.s_by_code) == ["A1", "A2", "A3", "A4", "A5"]
        assert score.s_by_code["A5"] == 0.0
        assert score.r_by_code["A4"] == score.r_values[3]

    def test_extended_set_excludes_far_alternatives(self):
        ranking = [
            scored("A1", 0.0, 0.0, 0.0, 1),
            scored("A2", 0.1, 0.1, 0.1, 2),
            scored("A3", 0.2, 0.2, 0.2, 3),
            scored("A4", 0.9, 0.9, 0.9, 4),
        ]
        result = CompromiseValidator().validate(ranking)

        # DQ = 1/3 rounded
        assert result.dq == 0.3333
        assert result.conclusion == CompromiseType.EXTENDED
        assert result.compromise_set == ["A1", "A2", "A3"]

    def test_formulas_are_reported(self):
        ranking = [
            scored("A1", 0.10, 0.2, 0.1, 1),
            scored("A2", 0.60, 0.3, 0.2, 2),
        ]
        result = CompromiseValidator().validate(ranking)

        assert result.dq_formula == "DQ = 1/(n-1) = 1/(2-1) = 1.0"
        assert "< DQ" in result.condition1_formula
