"""Capacity Allocator - assigns each qualified individual to one alternative.

Individuals are processed strictly in descending priority score; each one
takes the best-ranked alternative that still has room. Capacity is
advisory: when everything is full the individual still gets their
first choice and the over-capacity is flagged.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import get_config
from .schema import (
    AllocationResult,
    Alternative,
    CapacityStatus,
    Individual,
    ScoredAlternative,
)
from .scorer import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class CapacitySlot:
    """Capacity state of one alternative."""
    code: str
    name: str
    total: int
    unlimited: bool = False
    used: int = 0

    @property
    def remaining(self) -> int:
        return max(self.total - self.used, 0)

    @property
    def over_capacity(self) -> int:
        return max(self.used - self.total, 0)


@dataclass
class CapacityTracker:
    """Per-run capacity state. ``used`` only ever increases."""
    slots: dict[str, CapacitySlot] = field(default_factory=dict)

    @classmethod
    def from_alternatives(
        cls, alternatives: list[Alternative], unlimited_sentinel: Optional[int] = None
    ) -> "CapacityTracker":
        sentinel = get_config().capacity.unlimited_sentinel if unlimited_sentinel is None else unlimited_sentinel
        tracker = cls()
        for alt in alternatives:
            tracker.slots[alt.code] = CapacitySlot(
                code=alt.code,
                name=alt.name,
                total=sentinel if alt.capacity is None else alt.capacity,
                unlimited=alt.capacity is None,
            )
        return tracker

    def has_room(self, code: str) -> bool:
        slot = self.slots.get(code)
        return slot is not None and slot.remaining > 0

    def take(self, code: str) -> CapacitySlot:
        slot = self.slots[code]
        slot.used += 1
        return slot

    @property
    def total_used(self) -> int:
        return sum(slot.used for slot in self.slots.values())

    def summary(self) -> list[CapacityStatus]:
        """Utilization per alternative, in input order."""
        statuses = []
        for slot in self.slots.values():
            if slot.unlimited:
                statuses.append(CapacityStatus(code=slot.code, name=slot.name, used=slot.used))
                continue
            percentage = round(slot.used / slot.total * 100, 1) if slot.total else None
            statuses.append(CapacityStatus(
                code=slot.code,
                name=slot.name,
                total=slot.total,
                used=slot.used,
                remaining=slot.remaining,
                percentage=percentage,
                over_capacity=slot.over_capacity,
            ))
        return statuses


@dataclass
class PriorityWeights:
    """Weights for the allocation priority score."""
    c1: float = 0.40
    c2: float = 0.20
    c4: float = 0.30
    c5: float = 0.10

    @classmethod
    def from_config(cls) -> "PriorityWeights":
        cfg = get_config().priority_weights
        return cls(c1=cfg.c1, c2=cfg.c2, c4=cfg.c4, c5=cfg.c5)

    def as_dict(self) -> dict[str, float]:
        return {"c1": self.c1, "c2": self.c2, "c4": self.c4, "c5": self.c5}


class CapacityAllocator:
    """Allocates individuals to alternatives under capacity limits."""

    def __init__(self, priority_weights: Optional[PriorityWeights] = None):
        """Initialize allocator with optional custom priority weights."""
        self.priority_weights = priority_weights or PriorityWeights.from_config()

    def priority_score(self, individual: Individual) -> float:
        """Fixed-weight combination of the four criterion scores."""
        w = self.priority_weights
        score = w.c1 * individual.c1 + w.c2 * individual.c2 + w.c4 * individual.c4 + w.c5 * individual.c5
        return round_half_up(score)

    def allocate(
        self,
        rankings: list[tuple[Individual, list[ScoredAlternative]]],
        tracker: CapacityTracker,
    ) -> dict[str, AllocationResult]:
        """Allocate every individual exactly once.

        Args:
            rankings: (individual, ranking) pairs; ranking sorted by rank
            tracker: Capacity state for this run (mutated)

        Returns:
            Mapping of individual name to allocation result
        """
        # sorted() is stable, so equal priority keeps input order
        ordered = sorted(
            rankings,
            key=lambda pair: self.priority_score(pair[0]),
            reverse=True,
        )

        results = {}
        for order, (individual, ranking) in enumerate(ordered, 1):
            result = self._allocate_one(individual, ranking, tracker, order)
            results[individual.name] = result

        return results

    def _allocate_one(
        self,
        individual: Individual,
        ranking: list[ScoredAlternative],
        tracker: CapacityTracker,
        order: int,
    ) -> AllocationResult:
        top = ranking[0]
        priority = self.priority_score(individual)

        chosen = next((alt for alt in ranking if tracker.has_room(alt.code)), None)

        if chosen is None:
            slot = tracker.take(top.code)
            logger.warning(
                "All alternatives full for %s; assigned to %s over capacity (%d/%d)",
                individual.name, top.code, slot.used, slot.total,
            )
            return AllocationResult(
                individual=individual.name,
                assigned_code=top.code,
                assigned_name=top.name,
                assigned_rank=top.rank,
                original_code=top.code,
                original_name=top.name,
                over_capacity=True,
                displacement_reason=(
                    f"Semua alternatif penuh; tetap ditempatkan di pilihan utama "
                    f"{top.name} ({top.code}) melebihi kapasitas ({slot.used}/{slot.total})"
                ),
                priority_score=priority,
                allocation_order=order,
            )

        tracker.take(chosen.code)

        if chosen.code == top.code:
            return AllocationResult(
                individual=individual.name,
                assigned_code=chosen.code,
                assigned_name=chosen.name,
                assigned_rank=chosen.rank,
                original_code=top.code,
                original_name=top.name,
                priority_score=priority,
                allocation_order=order,
            )

        top_slot = tracker.slots[top.code]
        logger.info(
            "%s displaced from %s to %s (rank %d)",
            individual.name, top.code, chosen.code, chosen.rank,
        )
        return AllocationResult(
            individual=individual.name,
            assigned_code=chosen.code,
            assigned_name=chosen.name,
            assigned_rank=chosen.rank,
            original_code=top.code,
            original_name=top.name,
            displaced=True,
            displacement_reason=(
                f"Pilihan utama {top.name} ({top.code}) penuh "
                f"(kuota {top_slot.total} terisi); dialihkan ke peringkat {chosen.rank}"
            ),
            priority_score=priority,
            allocation_order=order,
        )
