"""Pydantic models for the placement VIKOR engine.

Input schemas for individuals and alternatives, and output schemas for
rankings, compromise validation, allocation and the assembled run result.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


# =============================================================================
# Criteria
# =============================================================================


class CriterionDirection(str, Enum):
    """Whether a higher or lower raw value is preferred."""
    BENEFIT = "Benefit"  # Higher is better
    COST = "Cost"  # Lower is better


# Fixed order C1..C5; C3 (distance) is the only cost criterion.
CRITERIA_DIRECTIONS = (
    CriterionDirection.BENEFIT,
    CriterionDirection.BENEFIT,
    CriterionDirection.COST,
    CriterionDirection.BENEFIT,
    CriterionDirection.BENEFIT,
)
SCORE_FIELDS = ("c1", "c2", "c4", "c5")


# =============================================================================
# Input Models
# =============================================================================


class Individual(BaseModel):
    """A candidate to be placed (a student)."""
    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "nama"))
    c1: float = Field(..., ge=0, le=100)  # Threshold-gated
    c2: float = Field(..., ge=0, le=100)
    c4: float = Field(..., ge=0, le=100)  # Threshold-gated
    c5: float = Field(..., ge=0, le=100)
    distance_overrides: dict[str, float] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("distance_overrides", "jarakKeBanks"),
        description="Distance to specific alternatives, keyed by code or name",
    )

    class Config:
        frozen = True

    def score_profile(self) -> "IndividualProfile":
        return IndividualProfile(name=self.name, c1=self.c1, c2=self.c2, c4=self.c4, c5=self.c5)


class Alternative(BaseModel):
    """A placement site (a DUDI / bank branch)."""
    code: str = Field(..., min_length=1, validation_alias=AliasChoices("code", "kode"))
    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "nama"))
    distance: Optional[float] = Field(None, ge=0, validation_alias=AliasChoices("distance", "jarak"))
    capacity: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("capacity", "kapasitas"))

    class Config:
        frozen = True


class WeightVector(BaseModel):
    """Five criterion weights in C1..C5 order.

    Build through ``validation.parse_weights`` so length and sum are checked.
    """
    values: tuple[float, float, float, float, float]

    class Config:
        frozen = True

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def __len__(self) -> int:
        return len(self.values)

    def as_list(self) -> list[float]:
        return list(self.values)


# =============================================================================
# Scoring Models
# =============================================================================


class CriteriaValues(BaseModel):
    """Decision-matrix row for one alternative."""
    c1: float
    c2: float
    c3: float
    c4: float
    c5: float


class ScoredAlternative(BaseModel):
    """An alternative scored for one individual."""
    code: str
    name: str
    distance: float
    s: float
    r: float
    q: float
    rank: int = Field(..., ge=1)
    criteria_values: CriteriaValues


class CalculationDetails(BaseModel):
    """Reference values used to compute S, R and Q."""
    f_best: list[float]
    f_worst: list[float]
    criteria_types: list[str]
    criteria_names: list[str]
    weights: list[float]
    v_parameter: float


class CompromiseType(str, Enum):
    """Outcome of the VIKOR acceptance conditions."""
    SINGLE = "single"
    DOUBLE = "double"
    EXTENDED = "extended"


class CompromiseValidation(BaseModel):
    """Traceable result of the two VIKOR acceptance conditions."""
    alternative_count: int
    dq: Optional[float] = None
    dq_formula: Optional[str] = None
    advantage: Optional[float] = None  # Q(rank2) - Q(rank1)
    condition1_satisfied: bool
    condition1_formula: str
    condition2_satisfied: bool
    condition2_detail: str
    best_by_s: list[str] = Field(default_factory=list)
    best_by_r: list[str] = Field(default_factory=list)
    compromise_set: list[str]  # Alternative codes
    conclusion: CompromiseType
    conclusion_text: str


# =============================================================================
# Allocation Models
# =============================================================================


class AllocationResult(BaseModel):
    """Final placement of one individual."""
    individual: str
    assigned_code: str
    assigned_name: str
    assigned_rank: int
    original_code: str
    original_name: str
    displaced: bool = False
    displacement_reason: Optional[str] = None
    over_capacity: bool = False
    priority_score: float
    allocation_order: int


class CapacityStatus(BaseModel):
    """Utilization of one alternative after allocation."""
    code: str
    name: str
    total: Optional[int] = None  # None = unlimited
    used: int = 0
    remaining: Optional[int] = None
    percentage: Optional[float] = None
    over_capacity: int = 0


# =============================================================================
# Output Models
# =============================================================================


class IndividualProfile(BaseModel):
    """Criterion scores of an individual, as echoed in results."""
    name: str
    c1: float
    c2: float
    c4: float
    c5: float


class IndividualResult(BaseModel):
    """Complete outcome for one qualified individual."""
    individual: IndividualProfile
    ranking: list[ScoredAlternative]
    recommendation: ScoredAlternative
    allocation: Optional[AllocationResult] = None
    narrative: str = ""
    compromise: CompromiseValidation
    calculation_details: CalculationDetails


class DisqualifiedIndividual(BaseModel):
    """An individual that failed an eligibility threshold."""
    name: str
    c1: float
    c4: float
    failed_criteria: list[str]
    reason: str


class Thresholds(BaseModel):
    """Eligibility thresholds for the gated criteria."""
    c1: float
    c4: float


class RunMetadata(BaseModel):
    """Run-level parameters and counts."""
    total_individuals: int
    qualified_count: int
    disqualified_count: int
    alternative_count: int
    weights: list[float]
    thresholds: Thresholds
    v_parameter: float
    priority_weights: dict[str, float]
    capacity_utilization: list[CapacityStatus] = Field(default_factory=list)


class WeightShare(BaseModel):
    """One row of the weight breakdown."""
    criterion: str
    weight: float
    percentage: str


class RunSummary(BaseModel):
    """Human-oriented roll-up of a run."""
    total_individuals: int
    qualified_count: int
    disqualified_count: int
    distribution: dict[str, int] = Field(default_factory=dict)
    displaced_count: int = 0
    over_capacity_count: int = 0
    weight_breakdown: list[WeightShare] = Field(default_factory=list)
    thresholds: Thresholds
    v_parameter: float


class VikorResult(BaseModel):
    """Complete output of a placement run."""
    engine_version: str = Field(default="1.0.0")
    computed_at: datetime = Field(default_factory=datetime.utcnow)

    qualified: list[IndividualResult] = Field(default_factory=list)
    disqualified: list[DisqualifiedIndividual] = Field(default_factory=list)
    capacity_summary: list[CapacityStatus] = Field(default_factory=list)
    metadata: RunMetadata
    summary: RunSummary

    warnings: list[str] = Field(default_factory=list)
