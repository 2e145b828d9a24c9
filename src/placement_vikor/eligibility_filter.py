"""Eligibility Filter - first phase of a placement run.

Splits individuals into qualified and disqualified sets using the
threshold-gated criteria (C1 and C4) and records why each
disqualified individual failed.
"""

from typing import Optional

from .config import get_config
from .errors import ValidationFailure
from .schema import DisqualifiedIndividual, Individual, Thresholds
from .validation import to_number, validate_thresholds


class EligibilityFilter:
    """Filters individuals based on minimum-score thresholds.

    Both thresholds must be met. Order is preserved within each partition.
    """

    GATED_CRITERIA = {
        "c1": "Akumulasi Nilai",
        "c4": "Nilai Sertifikasi",
    }

    def __init__(self, c1_threshold: Optional[float] = None, c4_threshold: Optional[float] = None):
        """Initialize filter, falling back to configured thresholds.

        Raises:
            ValidationFailure: A threshold is not a number in [0, 100].
        """
        issues = validate_thresholds({"c1": c1_threshold, "c4": c4_threshold})
        if issues:
            raise ValidationFailure(issues, subject="batas minimum")

        cfg = get_config().thresholds
        self.thresholds = Thresholds(
            c1=cfg.c1 if c1_threshold is None else to_number(c1_threshold),
            c4=cfg.c4 if c4_threshold is None else to_number(c4_threshold),
        )

    def filter(
        self, individuals: list[Individual]
    ) -> tuple[list[Individual], list[DisqualifiedIndividual]]:
        """Partition individuals by eligibility.

        Args:
            individuals: Validated individuals

        Returns:
            Tuple of (qualified_individuals, disqualified_individuals)
        """
        qualified = []
        disqualified = []

        for individual in individuals:
            failures = self._check_eligibility(individual)
            if failures:
                disqualified.append(DisqualifiedIndividual(
                    name=individual.name,
                    c1=individual.c1,
                    c4=individual.c4,
                    failed_criteria=[key.upper() for key, _ in failures],
                    reason="; ".join(message for _, message in failures),
                ))
            else:
                qualified.append(individual)

        return qualified, disqualified

    def is_qualified(self, individual: Individual) -> bool:
        return not self._check_eligibility(individual)

    def _check_eligibility(self, individual: Individual) -> list[tuple[str, str]]:
        """Check every gated criterion.

        Returns list of (criterion_key, reason) pairs (empty if qualified).
        """
        failures = []
        for key, label in self.GATED_CRITERIA.items():
            reason = self._check_threshold(key, label, getattr(individual, key))
            if reason:
                failures.append((key, reason))
        return failures

    def _check_threshold(self, key: str, label: str, value: float) -> Optional[str]:
        threshold = getattr(self.thresholds, key)
        if value >= threshold:
            return None
        margin = threshold - value
        return (
            f"{label} ({key.upper()} = {_fmt(value)}) di bawah batas minimum "
            f"{_fmt(threshold)} (kurang {_fmt(margin)})"
        )


def _fmt(value: float) -> str:
    """Format a score without a trailing .0 for whole numbers."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:g}"
