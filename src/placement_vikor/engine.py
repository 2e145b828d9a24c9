"""Placement Engine - orchestrates a full VIKOR placement run.

Phases:
1. Validation (all issues reported before any scoring)
2. Eligibility filtering
3. Distance resolution, VIKOR scoring and compromise validation
   per qualified individual
4. Capacity allocation in priority order
5. Result assembly
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from .allocator import CapacityAllocator, CapacityTracker, PriorityWeights
from .compromise import CompromiseValidator
from .config import get_config
from .distance_resolver import DistanceResolver, KeyNormalizer, normalize_key
from .eligibility_filter import EligibilityFilter
from .errors import ValidationFailure, VikorError
from .explainer import ResultExplainer
from .schema import VikorResult
from .scorer import VikorScorer
from .validation import WeightsInput, to_number, validate_run_input, validate_thresholds

logger = logging.getLogger(__name__)


class PlacementEngine:
    """Runs the placement pipeline.

    Each call to ``run`` builds fresh state; nothing is kept between runs.
    """

    def __init__(
        self,
        c1_threshold: Optional[float] = None,
        c4_threshold: Optional[float] = None,
        priority_weights: Optional[PriorityWeights] = None,
        key_normalizer: KeyNormalizer = normalize_key,
    ):
        self.eligibility_filter = EligibilityFilter(c1_threshold, c4_threshold)
        self.allocator = CapacityAllocator(priority_weights)
        self.validator = CompromiseValidator()
        self.explainer = ResultExplainer()
        self.key_normalizer = key_normalizer

    def run(
        self,
        individuals: Sequence[Any],
        alternatives: Sequence[Any],
        weights: WeightsInput = None,
        v: Optional[float] = None,
        distance_overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> VikorResult:
        """Run a complete placement.

        Args:
            individuals: Individual records (mappings or ``Individual``)
            alternatives: Alternative records (mappings or ``Alternative``)
            weights: Five weights as a list or comma-separated string;
                configured defaults when None
            v: Strategy parameter in [0, 1]; configured default when None
            distance_overrides: Optional individual -> alternative -> distance map

        Returns:
            VikorResult with qualified, disqualified, capacity and metadata

        Raises:
            EmptyInputError, InvalidWeightsError, ValidationFailure:
                Before any scoring happens.
        """
        if v is None:
            v = get_config().weights.v_parameter

        people, alts, weight_vector, overrides = validate_run_input(
            individuals, alternatives, weights, v, distance_overrides,
            key_normalizer=self.key_normalizer,
        )
        v = to_number(v)

        logger.info(
            "Starting placement run: %d individuals, %d alternatives, v=%s",
            len(people), len(alts), v,
        )

        warnings = []
        qualified, disqualified = self.eligibility_filter.filter(people)
        for item in disqualified:
            logger.debug("Disqualified %s: %s", item.name, item.reason)

        if overrides:
            known = {self.key_normalizer(p.name) for p in people}
            for name in overrides:
                if self.key_normalizer(name) not in known:
                    warnings.append(f"Data jarak untuk '{name}' tidak cocok dengan siswa manapun")

        resolver = DistanceResolver(overrides, key_normalizer=self.key_normalizer)
        scorer = VikorScorer(weight_vector, v)

        scored = []
        for individual in qualified:
            resolved = resolver.resolve(individual, alts)
            score = scorer.score(individual, resolved)
            compromise = self.validator.validate(score.ranking, score.s_by_code, score.r_by_code)
            scored.append((individual, score, compromise))
            logger.debug(
                "%s: best %s (Q=%s), compromise %s",
                individual.name, score.best.code, score.best.q, compromise.conclusion.value,
            )

        tracker = CapacityTracker.from_alternatives(alts)
        allocations = self.allocator.allocate(
            [(individual, score.ranking) for individual, score, _ in scored],
            tracker,
        )

        results = [
            self.explainer.build_individual_result(
                individual,
                score.ranking,
                compromise,
                score.details,
                allocations.get(individual.name),
            )
            for individual, score, compromise in scored
        ]

        result = self.explainer.assemble(
            qualified=results,
            disqualified=disqualified,
            capacity_summary=tracker.summary(),
            weights=weight_vector,
            thresholds=self.eligibility_filter.thresholds,
            v=v,
            priority_weights=self.allocator.priority_weights.as_dict(),
            alternative_count=len(alts),
            warnings=warnings,
        )

        logger.info(
            "Placement run complete: %d qualified, %d disqualified, %d displaced",
            result.metadata.qualified_count,
            result.metadata.disqualified_count,
            result.summary.displaced_count,
        )
        return result


def run_vikor(
    individuals: Sequence[Any],
    alternatives: Sequence[Any],
    weights: WeightsInput = None,
    v: Optional[float] = None,
    distance_overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    c1_threshold: Optional[float] = None,
    c4_threshold: Optional[float] = None,
) -> VikorResult:
    """Convenience wrapper around ``PlacementEngine.run``."""
    engine = PlacementEngine(c1_threshold=c1_threshold, c4_threshold=c4_threshold)
    return engine.run(individuals, alternatives, weights, v, distance_overrides)


def validate_input(
    individuals: Sequence[Any],
    alternatives: Sequence[Any],
    weights: WeightsInput = None,
    v: Optional[float] = None,
    distance_overrides: Optional[Mapping] = None,
    thresholds: Optional[Mapping] = None,
) -> tuple[bool, list[str]]:
    """Validate run input without scoring.

    Args:
        thresholds: Optional ``{c1, c4}`` mapping, checked alongside the rows

    Returns:
        Tuple of (is_valid, issues)
    """
    if v is None:
        v = get_config().weights.v_parameter
    issues = validate_thresholds(thresholds)
    try:
        validate_run_input(individuals, alternatives, weights, v, distance_overrides)
    except ValidationFailure as e:
        issues.extend(e.messages)
    except VikorError as e:
        issues.append(str(e))
    return not issues, issues
