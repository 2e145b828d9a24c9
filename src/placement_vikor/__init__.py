"""VIKOR placement engine."""

from placement_vikor import app_logging  # noqa: F401  (installs NullHandler)
from placement_vikor.engine import PlacementEngine, run_vikor, validate_input
from placement_vikor.errors import (
    EmptyInputError,
    InvalidWeightsError,
    NoAlternativesError,
    ValidationFailure,
    VikorError,
)
from placement_vikor.schema import Alternative, Individual, VikorResult, WeightVector

__all__ = [
    "PlacementEngine",
    "run_vikor",
    "validate_input",
    "VikorError",
    "InvalidWeightsError",
    "EmptyInputError",
    "ValidationFailure",
    "NoAlternativesError",
    "Alternative",
    "Individual",
    "VikorResult",
    "WeightVector",
]
