"""Compromise Validator - VIKOR acceptance conditions.

Checks acceptable advantage (C1) and acceptable stability (C2) on a
ranked list and derives the compromise solution set. The output is
informational and never changes the ranking or allocation.
"""

from collections.abc import Mapping
from typing import Optional

from .schema import CompromiseType, CompromiseValidation, ScoredAlternative
from .scorer import round_half_up


class CompromiseValidator:
    """Applies the two VIKOR acceptance conditions to a ranking."""

    CONCLUSIONS = {
        CompromiseType.SINGLE: "Solusi kompromi tunggal: {first} memenuhi kedua kondisi",
        CompromiseType.DOUBLE: (
            "Solusi kompromi ganda: {first} dan {second} "
            "(kondisi stabilitas tidak terpenuhi)"
        ),
        CompromiseType.EXTENDED: (
            "Solusi kompromi diperluas: {members} "
            "(kondisi keunggulan tidak terpenuhi)"
        ),
    }

    def validate(
        self,
        ranking: list[ScoredAlternative],
        s_values: Optional[Mapping[str, float]] = None,
        r_values: Optional[Mapping[str, float]] = None,
    ) -> CompromiseValidation:
        """Validate a ranking sorted by rank (rank 1 first).

        Args:
            ranking: Scored alternatives for one individual, n >= 1
            s_values: Unrounded S per alternative code. Acceptable
                stability compares these when given, since two S values
                can round to the same 4 decimals without being equal.
            r_values: Unrounded R per alternative code, as ``s_values``

        Returns:
            CompromiseValidation with conditions, set and conclusion
        """
        ordered = sorted(ranking, key=lambda a: a.rank)
        first = ordered[0]
        n = len(ordered)

        if n < 2:
            return CompromiseValidation(
                alternative_count=n,
                condition1_satisfied=True,
                condition1_formula="Hanya satu alternatif; kondisi keunggulan tidak berlaku",
                condition2_satisfied=True,
                condition2_detail="Hanya satu alternatif; kondisi stabilitas tidak berlaku",
                best_by_s=[first.code],
                best_by_r=[first.code],
                compromise_set=[first.code],
                conclusion=CompromiseType.SINGLE,
                conclusion_text=self.CONCLUSIONS[CompromiseType.SINGLE].format(first=first.name),
            )

        second = ordered[1]
        dq = round_half_up(1 / (n - 1))
        advantage = round_half_up(second.q - first.q)
        condition1 = advantage >= dq

        s_of = {a.code: a.s for a in ordered} if s_values is None else s_values
        r_of = {a.code: a.r for a in ordered} if r_values is None else r_values
        s_min = min(s_of[a.code] for a in ordered)
        r_min = min(r_of[a.code] for a in ordered)
        best_by_s = [a.code for a in ordered if s_of[a.code] == s_min]
        best_by_r = [a.code for a in ordered if r_of[a.code] == r_min]
        condition2 = first.code in best_by_s or first.code in best_by_r

        if condition1 and condition2:
            conclusion = CompromiseType.SINGLE
            members = [first]
        elif not condition1:
            conclusion = CompromiseType.EXTENDED
            members = [a for a in ordered if round_half_up(a.q - first.q) < dq]
        else:
            conclusion = CompromiseType.DOUBLE
            members = [first, second]

        return CompromiseValidation(
            alternative_count=n,
            dq=dq,
            dq_formula=f"DQ = 1/(n-1) = 1/({n}-1) = {dq}",
            advantage=advantage,
            condition1_satisfied=condition1,
            condition1_formula=(
                f"Q({second.code}) - Q({first.code}) = {second.q} - {first.q} = {advantage} "
                f"{'>=' if condition1 else '<'} DQ ({dq})"
            ),
            condition2_satisfied=condition2,
            condition2_detail=self._stability_detail(first, best_by_s, best_by_r, condition2),
            best_by_s=best_by_s,
            best_by_r=best_by_r,
            compromise_set=[a.code for a in members],
            conclusion=conclusion,
            conclusion_text=self.CONCLUSIONS[conclusion].format(
                first=first.name,
                second=second.name,
                members=", ".join(a.name for a in members),
            ),
        )

    @staticmethod
    def _stability_detail(
        first: ScoredAlternative,
        best_by_s: list[str],
        best_by_r: list[str],
        satisfied: bool,
    ) -> str:
        if satisfied:
            measures = []
            if first.code in best_by_s:
                measures.append("S")
            if first.code in best_by_r:
                measures.append("R")
            return f"{first.code} memiliki nilai {' dan '.join(measures)} terkecil"
        return (
            f"{first.code} tidak memiliki nilai S terkecil ({', '.join(best_by_s)}) "
            f"maupun R terkecil ({', '.join(best_by_r)})"
        )
