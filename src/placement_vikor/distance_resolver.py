"""Distance Resolver - per-individual cost criterion.

Resolves the distance (C3) each individual has to each alternative.
Shared ``Alternative`` objects are never mutated; resolved copies are
returned instead.
"""

import logging
import re
from collections.abc import Mapping
from typing import Callable, Optional

from .schema import Alternative, Individual

logger = logging.getLogger(__name__)

KeyNormalizer = Callable[[str], str]


def normalize_key(value: str) -> str:
    """Default identifier normalizer: case-folded, whitespace collapsed."""
    return re.sub(r"\s+", " ", str(value)).strip().casefold()


class DistanceResolver:
    """Resolves alternative distances for individuals.

    Resolution order per alternative:
    1. The individual's own ``distance_overrides`` entry
    2. The run-level ``distance_overrides[individual][alternative]`` entry
    3. The alternative's base distance
    4. 0

    Keys are matched against the alternative code or name through
    ``key_normalizer``.
    """

    def __init__(
        self,
        distance_overrides: Optional[Mapping[str, Mapping[str, float]]] = None,
        key_normalizer: KeyNormalizer = normalize_key,
    ):
        self.key_normalizer = key_normalizer
        self._run_overrides: dict[str, dict[str, float]] = {}
        for individual_name, per_alt in (distance_overrides or {}).items():
            self._run_overrides[key_normalizer(individual_name)] = self._normalize_map(per_alt)

    def resolve(self, individual: Individual, alternatives: list[Alternative]) -> list[Alternative]:
        """Return copies of ``alternatives`` with individual-specific distances.

        Args:
            individual: The individual being scored
            alternatives: Shared alternative list (left untouched)

        Returns:
            New list of alternatives in the same order
        """
        own = self._normalize_map(individual.distance_overrides)
        shared = self._run_overrides.get(self.key_normalizer(individual.name), {})

        if own and shared:
            logger.warning(
                "Individual %s has both record-level and run-level distances; "
                "record-level values take precedence",
                individual.name,
            )

        if not own and not shared:
            return [
                alt if alt.distance is not None else alt.model_copy(update={"distance": 0.0})
                for alt in alternatives
            ]

        resolved = []
        for alt in alternatives:
            distance = self._lookup(own, alt)
            if distance is None:
                distance = self._lookup(shared, alt)
            if distance is None:
                distance = alt.distance if alt.distance is not None else 0.0
            resolved.append(alt.model_copy(update={"distance": float(distance)}))
        return resolved

    def _lookup(self, distances: dict[str, float], alt: Alternative) -> Optional[float]:
        if not distances:
            return None
        for key in (alt.code, alt.name):
            value = distances.get(self.key_normalizer(key))
            if value is not None:
                return value
        return None

    def _normalize_map(self, distances: Optional[Mapping[str, float]]) -> dict[str, float]:
        return {
            self.key_normalizer(key): float(value)
            for key, value in (distances or {}).items()
        }
