"""Explainer - narratives, summaries and the assembled run result.

Generates human-readable explanations for each placement and builds the
final output structure. Pure aggregation: no scoring happens here.
"""

from collections import Counter
from typing import Optional

from .config import get_config
from .schema import (
    AllocationResult,
    CalculationDetails,
    CapacityStatus,
    CompromiseValidation,
    DisqualifiedIndividual,
    Individual,
    IndividualResult,
    RunMetadata,
    RunSummary,
    ScoredAlternative,
    Thresholds,
    VikorResult,
    WeightShare,
    WeightVector,
)


class ResultExplainer:
    """Builds narratives and the final ``VikorResult``.

    Principles:
    - Every recommendation must be explainable
    - The narrative states the rank-1 choice and, when it differs,
      the final allocation
    """

    def __init__(self):
        """Initialize explainer with configured criterion labels."""
        cfg = get_config().criteria
        self.summary_labels = list(cfg.summary_labels)

    def generate_narrative(
        self,
        individual: Individual,
        ranking: list[ScoredAlternative],
        allocation: Optional[AllocationResult] = None,
        compromise: Optional[CompromiseValidation] = None,
    ) -> str:
        """Generate the placement narrative for one individual."""
        best = ranking[0]

        parts = [
            "Berdasarkan analisis menggunakan metode VIKOR (VlseKriterijumska Optimizacija I Kompromisno Resenje), ",
            f"siswa {individual.name} direkomendasikan untuk melaksanakan Program Kerja Industri (Prakerin) di ",
            f"**{best.name}** ({best.code}).",
            "\n\n",
            f"Rekomendasi ini didasarkan pada nilai indeks VIKOR (Q) terendah sebesar **{best.q}**, ",
            "yang menunjukkan kompromi optimal antara kriteria benefit (Akumulasi Nilai, Penilaian Sikap, ",
            "Nilai Sertifikasi, dan Rekomendasi Guru) dengan kriteria cost (Jarak tempuh).",
            "\n\n",
            f"Profil akademik {individual.name}: Akumulasi Nilai = {_fmt(individual.c1)}, ",
            f"Penilaian Sikap = {_fmt(individual.c2)}, ",
            f"Nilai Sertifikasi = {_fmt(individual.c4)}, dan Rekomendasi Guru = {_fmt(individual.c5)}.",
            "\n\n",
            "Urutan peringkat alternatif berdasarkan nilai Q:\n",
        ]

        for alt in ranking:
            parts.append(f"{alt.rank}. {alt.name} (Q = {alt.q}, S = {alt.s}, R = {alt.r})\n")

        if compromise is not None:
            parts.append(f"\n{compromise.conclusion_text}.\n")

        if allocation is not None and allocation.displaced:
            parts.append(
                f"\nPenempatan akhir: **{allocation.assigned_name}** ({allocation.assigned_code}). "
                f"{allocation.displacement_reason}.\n"
            )
        elif allocation is not None and allocation.over_capacity:
            parts.append(f"\nCatatan: {allocation.displacement_reason}.\n")

        parts.append(
            f"\nDengan demikian, {best.name} merupakan pilihan terbaik yang mengakomodasi "
            "keseimbangan antara potensi akademik siswa dan faktor operasional seperti jarak tempuh "
            "dari domisili ke lokasi magang."
        )

        return "".join(parts)

    def build_individual_result(
        self,
        individual: Individual,
        ranking: list[ScoredAlternative],
        compromise: CompromiseValidation,
        details: CalculationDetails,
        allocation: Optional[AllocationResult],
    ) -> IndividualResult:
        return IndividualResult(
            individual=individual.score_profile(),
            ranking=ranking,
            recommendation=ranking[0],
            allocation=allocation,
            narrative=self.generate_narrative(individual, ranking, allocation, compromise),
            compromise=compromise,
            calculation_details=details,
        )

    def generate_summary(
        self,
        qualified: list[IndividualResult],
        metadata: RunMetadata,
    ) -> RunSummary:
        """Roll up placement distribution and weight breakdown."""
        distribution = Counter(
            (r.allocation.assigned_name if r.allocation else r.recommendation.name)
            for r in qualified
        )

        return RunSummary(
            total_individuals=metadata.total_individuals,
            qualified_count=metadata.qualified_count,
            disqualified_count=metadata.disqualified_count,
            distribution=dict(distribution),
            displaced_count=sum(1 for r in qualified if r.allocation and r.allocation.displaced),
            over_capacity_count=sum(1 for r in qualified if r.allocation and r.allocation.over_capacity),
            weight_breakdown=[
                WeightShare(
                    criterion=self.summary_labels[i] if i < len(self.summary_labels) else f"C{i + 1}",
                    weight=w,
                    percentage=f"{w * 100:.0f}%",
                )
                for i, w in enumerate(metadata.weights)
            ],
            thresholds=metadata.thresholds,
            v_parameter=metadata.v_parameter,
        )

    def assemble(
        self,
        qualified: list[IndividualResult],
        disqualified: list[DisqualifiedIndividual],
        capacity_summary: list[CapacityStatus],
        weights: WeightVector,
        thresholds: Thresholds,
        v: float,
        priority_weights: dict[str, float],
        alternative_count: int,
        warnings: Optional[list[str]] = None,
    ) -> VikorResult:
        """Build the complete run result."""
        metadata = RunMetadata(
            total_individuals=len(qualified) + len(disqualified),
            qualified_count=len(qualified),
            disqualified_count=len(disqualified),
            alternative_count=alternative_count,
            weights=weights.as_list(),
            thresholds=thresholds,
            v_parameter=v,
            priority_weights=priority_weights,
            capacity_utilization=capacity_summary,
        )

        return VikorResult(
            qualified=qualified,
            disqualified=disqualified,
            capacity_summary=capacity_summary,
            metadata=metadata,
            summary=self.generate_summary(qualified, metadata),
            warnings=warnings or [],
        )


def _fmt(value: float) -> str:
    return str(int(value)) if value == int(value) else f"{value:g}"
