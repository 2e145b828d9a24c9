"""VIKOR Scorer - ranks alternatives for a single individual.

Builds the decision matrix (C1, C2, C4, C5 come from the individual, C3
is the resolved distance of each alternative), computes the best/worst
reference values, the utility (S) and regret (R) measures and the VIKOR
index (Q), then ranks alternatives by ascending Q.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from .config import get_config
from .errors import NoAlternativesError
from .schema import (
    CRITERIA_DIRECTIONS,
    Alternative,
    CalculationDetails,
    CriteriaValues,
    CriterionDirection,
    Individual,
    ScoredAlternative,
    WeightVector,
)


def round_half_up(value: float, decimals: int = 4) -> float:
    """Round to ``decimals`` places with halves rounded up.

    Matches ``floor(x * 10^d + 0.5) / 10^d``; Python's ``round`` uses
    banker's rounding instead.
    """
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


@dataclass
class VikorScore:
    """Ranked scores for one individual plus the raw measures."""
    ranking: list[ScoredAlternative]
    details: CalculationDetails
    s_values: list[float] = field(default_factory=list)
    r_values: list[float] = field(default_factory=list)
    q_values: list[float] = field(default_factory=list)
    codes: list[str] = field(default_factory=list)  # Input order of the raw values

    @property
    def best(self) -> ScoredAlternative:
        return self.ranking[0]

    @property
    def s_by_code(self) -> dict[str, float]:
        return dict(zip(self.codes, self.s_values))

    @property
    def r_by_code(self) -> dict[str, float]:
        return dict(zip(self.codes, self.r_values))


class VikorScorer:
    """Computes the VIKOR index for an individual across alternatives.

    Principles:
    - Criterion order and direction are fixed (C3 is the only cost)
    - A tied column contributes zero regret, never a division error
    - A tied S (or R) drops that term from Q; both tied gives Q = 0
    - Ties in Q keep the input order of alternatives
    """

    def __init__(self, weights: WeightVector, v: Optional[float] = None):
        """Initialize scorer with validated weights and strategy parameter."""
        self.weights = weights
        self.v = get_config().weights.v_parameter if v is None else v
        self.directions = list(CRITERIA_DIRECTIONS)

    def score(self, individual: Individual, alternatives: list[Alternative]) -> VikorScore:
        """Score and rank alternatives for one individual.

        Args:
            individual: Qualified individual
            alternatives: Distance-resolved alternatives

        Returns:
            VikorScore with the ranking (rank 1 first) and calculation details

        Raises:
            NoAlternativesError: If ``alternatives`` is empty
        """
        if not alternatives:
            raise NoAlternativesError(
                f"Tidak ada alternatif untuk dihitung bagi {individual.name}"
            )

        matrix = self._build_matrix(individual, alternatives)
        f_best, f_worst = self._reference_values(matrix)
        s_values, r_values = self._utility_and_regret(matrix, f_best, f_worst)
        q_values = self._vikor_index(s_values, r_values)

        scored = []
        for idx, alt in enumerate(alternatives):
            row = matrix[idx]
            scored.append(ScoredAlternative(
                code=alt.code,
                name=alt.name,
                distance=row[2],
                s=round_half_up(s_values[idx]),
                r=round_half_up(r_values[idx]),
                q=round_half_up(q_values[idx]),
                rank=idx + 1,  # Replaced after sorting
                criteria_values=CriteriaValues(c1=row[0], c2=row[1], c3=row[2], c4=row[3], c5=row[4]),
            ))

        # sorted() is stable, so equal Q keeps input order
        ranking = [
            alt.model_copy(update={"rank": position})
            for position, alt in enumerate(sorted(scored, key=lambda a: a.q), 1)
        ]

        cfg = get_config().criteria
        details = CalculationDetails(
            f_best=[round_half_up(x) for x in f_best],
            f_worst=[round_half_up(x) for x in f_worst],
            criteria_types=[d.value for d in self.directions],
            criteria_names=list(cfg.labels),
            weights=self.weights.as_list(),
            v_parameter=self.v,
        )

        return VikorScore(
            ranking=ranking,
            details=details,
            s_values=s_values,
            r_values=r_values,
            q_values=q_values,
            codes=[alt.code for alt in alternatives],
        )

    def _build_matrix(self, individual: Individual, alternatives: list[Alternative]) -> list[list[float]]:
        """One row per alternative: [C1, C2, C3, C4, C5]."""
        return [
            [
                individual.c1,
                individual.c2,
                alt.distance if alt.distance is not None else 0.0,
                individual.c4,
                individual.c5,
            ]
            for alt in alternatives
        ]

    def _reference_values(self, matrix: list[list[float]]) -> tuple[list[float], list[float]]:
        """Best (f*) and worst (f-) value per criterion."""
        f_best = []
        f_worst = []
        for j, direction in enumerate(self.directions):
            column = [row[j] for row in matrix]
            if direction == CriterionDirection.BENEFIT:
                f_best.append(max(column))
                f_worst.append(min(column))
            else:
                f_best.append(min(column))
                f_worst.append(max(column))
        return f_best, f_worst

    def _utility_and_regret(
        self,
        matrix: list[list[float]],
        f_best: list[float],
        f_worst: list[float],
    ) -> tuple[list[float], list[float]]:
        """S (weighted sum) and R (weighted max) of normalized regrets."""
        s_values = []
        r_values = []

        for row in matrix:
            s = 0.0
            r = 0.0
            for j, direction in enumerate(self.directions):
                weighted = self.weights[j] * self._normalized_regret(
                    row[j], f_best[j], f_worst[j], direction
                )
                s += weighted
                r = max(r, weighted)
            s_values.append(s)
            r_values.append(r)

        return s_values, r_values

    @staticmethod
    def _normalized_regret(
        value: float, best: float, worst: float, direction: CriterionDirection
    ) -> float:
        if best == worst:
            return 0.0
        if direction == CriterionDirection.BENEFIT:
            return (best - value) / (best - worst)
        return (value - best) / (worst - best)

    def _vikor_index(self, s_values: list[float], r_values: list[float]) -> list[float]:
        """Q per alternative, dropping a term whose measure is tied."""
        s_min, s_max = min(s_values), max(s_values)
        r_min, r_max = min(r_values), max(r_values)
        s_denom = s_max - s_min
        r_denom = r_max - r_min

        q_values = []
        for s, r in zip(s_values, r_values):
            q = 0.0
            if s_denom != 0:
                q += self.v * (s - s_min) / s_denom
            if r_denom != 0:
                q += (1 - self.v) * (r - r_min) / r_denom
            q_values.append(q)
        return q_values
