"""Input validation - the typed boundary in front of the engine.

Turns already-normalized records (mappings or schema models) into typed
``Individual``/``Alternative`` objects and a ``WeightVector``. Row checks
return every issue found so callers can fix the input in one pass.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel

from .config import get_config
from .distance_resolver import KeyNormalizer, normalize_key
from .errors import EmptyInputError, InvalidWeightsError, ValidationFailure
from .schema import Alternative, Individual, SCORE_FIELDS, WeightVector

WeightsInput = Union[str, Sequence[Any], WeightVector, None]

# Accepted key spellings per field (canonical first)
INDIVIDUAL_KEYS = {
    "name": ("name", "nama"),
    "distance_overrides": ("distance_overrides", "jarakKeBanks"),
}
ALTERNATIVE_KEYS = {
    "code": ("code", "kode"),
    "name": ("name", "nama"),
    "distance": ("distance", "jarak"),
    "capacity": ("capacity", "kapasitas"),
}


def _as_mapping(row: Any) -> Mapping:
    if isinstance(row, BaseModel):
        return row.model_dump()
    if isinstance(row, Mapping):
        return row
    return {}


def _lookup(row: Mapping, keys: Sequence[str]) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_number(value: Any) -> Optional[float]:
    """Coerce to float, returning None for non-numeric or NaN values."""
    if isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


# =============================================================================
# Weights
# =============================================================================


def parse_weights(value: WeightsInput = None, tolerance: Optional[float] = None) -> WeightVector:
    """Normalize a weight input into a validated ``WeightVector``.

    Accepts a list/tuple of numbers, a comma-separated string such as
    ``"0.3,0.2,0.1,0.25,0.15"``, an existing ``WeightVector``, or None
    (configured defaults).

    Raises:
        InvalidWeightsError: Wrong count, non-numeric or negative entry,
            or sum outside 1.0 +/- tolerance.
    """
    cfg = get_config().weights
    tol = cfg.tolerance if tolerance is None else tolerance

    if value is None:
        raw: list[Any] = list(cfg.default)
    elif isinstance(value, WeightVector):
        raw = value.as_list()
    elif isinstance(value, str):
        raw = [part for part in value.split(",")]
    else:
        raw = list(value)

    weights = []
    for idx, item in enumerate(raw, 1):
        number = to_number(item)
        if number is None:
            raise InvalidWeightsError(f"Bobot ke-{idx} bukan angka valid: {item!r}")
        weights.append(number)

    if len(weights) != 5:
        raise InvalidWeightsError(
            f"Harus ada tepat 5 bobot kriteria (C1-C5), diterima {len(weights)}"
        )

    negative = [f"C{i}" for i, w in enumerate(weights, 1) if w < 0]
    if negative:
        raise InvalidWeightsError(f"Bobot tidak boleh negatif: {', '.join(negative)}")

    total = sum(weights)
    if abs(total - 1) > tol:
        raise InvalidWeightsError(
            f"Total bobot harus sama dengan 1. Total saat ini: {total:.2f}"
        )

    return WeightVector(values=tuple(weights))


def validate_v_parameter(v: Any) -> list[str]:
    """Check the VIKOR strategy parameter lies in [0, 1]."""
    number = to_number(v)
    if number is None or number < 0 or number > 1:
        return [f"Parameter v harus angka antara 0-1, diterima {v!r}"]
    return []


# =============================================================================
# Rows
# =============================================================================


def validate_individual_rows(
    rows: Sequence[Any], key_normalizer: KeyNormalizer = normalize_key
) -> list[str]:
    """Validate individual records.

    Names must stay unique after ``key_normalizer``, the same rule the
    distance resolver uses to match run-level distances to individuals.

    Returns:
        List of issues, one message per violation (empty if valid).
    """
    errors = []
    seen: dict[str, tuple[int, str]] = {}

    for idx, raw in enumerate(rows, 1):
        row = _as_mapping(raw)
        if not row:
            errors.append(f"Siswa baris {idx}: Data harus berupa objek")
            continue

        name = _lookup(row, INDIVIDUAL_KEYS["name"])
        if _is_blank(name):
            errors.append(f"Siswa baris {idx}: Field 'nama' tidak boleh kosong")
        else:
            display = str(name).strip()
            key = key_normalizer(display)
            if key in seen:
                first_idx, first_name = seen[key]
                detail = "" if first_name == display else f" ('{first_name}')"
                errors.append(
                    f"Siswa baris {idx}: Nama '{display}' duplikat dengan baris {first_idx}{detail}"
                )
            else:
                seen[key] = (idx, display)

        for field in SCORE_FIELDS:
            value = row.get(field)
            if _is_blank(value):
                errors.append(f"Siswa baris {idx}: Field '{field}' tidak boleh kosong")
                continue
            number = to_number(value)
            if number is None or number < 0 or number > 100:
                errors.append(
                    f"Siswa baris {idx}: Nilai '{field}' harus angka valid antara 0-100"
                )

        overrides = _lookup(row, INDIVIDUAL_KEYS["distance_overrides"])
        if overrides is not None:
            errors.extend(_validate_distance_map(overrides, f"Siswa baris {idx}"))

    return errors


def validate_alternative_rows(rows: Sequence[Any], require_distance: bool = True) -> list[str]:
    """Validate alternative records.

    Args:
        rows: Alternative records
        require_distance: Whether a base distance is mandatory. It is
            optional when a run-level distance map supplies distances.

    Returns:
        List of issues, one message per violation (empty if valid).
    """
    errors = []
    seen: dict[str, int] = {}

    for idx, raw in enumerate(rows, 1):
        row = _as_mapping(raw)
        if not row:
            errors.append(f"Alternatif baris {idx}: Data harus berupa objek")
            continue

        code = _lookup(row, ALTERNATIVE_KEYS["code"])
        if _is_blank(code):
            errors.append(f"Alternatif baris {idx}: Field 'kode' tidak boleh kosong")
        else:
            key = str(code).strip()
            if key in seen:
                errors.append(
                    f"Alternatif baris {idx}: Kode '{key}' duplikat dengan baris {seen[key]}"
                )
            else:
                seen[key] = idx

        if _is_blank(_lookup(row, ALTERNATIVE_KEYS["name"])):
            errors.append(f"Alternatif baris {idx}: Field 'nama' tidak boleh kosong")

        distance = _lookup(row, ALTERNATIVE_KEYS["distance"])
        if _is_blank(distance):
            if require_distance:
                errors.append(f"Alternatif baris {idx}: Field 'jarak' tidak boleh kosong")
        else:
            number = to_number(distance)
            if number is None or number < 0:
                errors.append(f"Alternatif baris {idx}: Jarak harus angka positif")

        capacity = _lookup(row, ALTERNATIVE_KEYS["capacity"])
        if not _is_blank(capacity):
            number = to_number(capacity)
            if number is None or number < 0 or number != int(number):
                errors.append(
                    f"Alternatif baris {idx}: Kapasitas harus bilangan bulat tidak negatif"
                )

    return errors


def _validate_distance_map(value: Any, where: str) -> list[str]:
    if not isinstance(value, Mapping):
        return [f"{where}: Data jarak harus berupa pemetaan alternatif ke jarak"]
    errors = []
    for alt_key, distance in value.items():
        number = to_number(distance)
        if number is None or number < 0:
            errors.append(f"{where}: Jarak ke '{alt_key}' harus angka positif")
    return errors


def validate_distance_overrides(
    overrides: Optional[Mapping], key_normalizer: KeyNormalizer = normalize_key
) -> list[str]:
    """Validate a run-level ``individual -> alternative -> distance`` map.

    Two entries whose names normalize to the same key would overwrite
    each other, so they are reported.
    """
    if overrides is None:
        return []
    if not isinstance(overrides, Mapping):
        return ["Data jarak per siswa harus berupa pemetaan nama siswa ke jarak"]
    errors = []
    seen: dict[str, str] = {}
    for name, per_alt in overrides.items():
        key = key_normalizer(str(name))
        if key in seen:
            errors.append(f"Jarak siswa '{name}': Nama bentrok dengan '{seen[key]}'")
        else:
            seen[key] = str(name)
        errors.extend(_validate_distance_map(per_alt, f"Jarak siswa '{name}'"))
    return errors


def validate_thresholds(thresholds: Any) -> list[str]:
    """Check eligibility thresholds given as a ``{c1, c4}`` mapping.

    None (or a missing key) means the configured default applies.
    """
    if thresholds is None:
        return []
    if not isinstance(thresholds, Mapping):
        return [f"Batas minimum harus berupa pemetaan {{c1, c4}}, diterima {thresholds!r}"]
    errors = []
    for key in ("c1", "c4"):
        value = thresholds.get(key)
        if value is None:
            continue
        number = to_number(value)
        if number is None or number < 0 or number > 100:
            errors.append(
                f"Batas minimum {key.upper()} harus angka antara 0-100, diterima {value!r}"
            )
    return errors


# =============================================================================
# Construction
# =============================================================================


def build_individuals(rows: Sequence[Any]) -> list[Individual]:
    """Build typed individuals from validated rows."""
    individuals = []
    for raw in rows:
        if isinstance(raw, Individual):
            individuals.append(raw)
            continue
        row = dict(_as_mapping(raw))
        for field in SCORE_FIELDS:
            row[field] = to_number(row[field])
        name_key = next(k for k in INDIVIDUAL_KEYS["name"] if k in row)
        row[name_key] = str(row[name_key]).strip()
        for key in INDIVIDUAL_KEYS["distance_overrides"]:
            if row.get(key) is not None:
                row[key] = _distance_map(row[key])
        individuals.append(Individual.model_validate(row))
    return individuals


def _distance_map(distances: Mapping) -> dict[str, float]:
    return {str(key): to_number(value) for key, value in distances.items()}


def build_distance_overrides(
    overrides: Optional[Mapping],
) -> Optional[dict[str, dict[str, float]]]:
    """Coerce a validated run-level distance map to floats."""
    if overrides is None:
        return None
    return {str(name): _distance_map(per_alt) for name, per_alt in overrides.items()}


def build_alternatives(rows: Sequence[Any]) -> list[Alternative]:
    """Build typed alternatives from validated rows."""
    alternatives = []
    for raw in rows:
        if isinstance(raw, Alternative):
            alternatives.append(raw)
            continue
        row = _as_mapping(raw)
        distance = _lookup(row, ALTERNATIVE_KEYS["distance"])
        capacity = _lookup(row, ALTERNATIVE_KEYS["capacity"])
        alternatives.append(Alternative(
            code=str(_lookup(row, ALTERNATIVE_KEYS["code"])).strip(),
            name=str(_lookup(row, ALTERNATIVE_KEYS["name"])).strip(),
            distance=None if _is_blank(distance) else to_number(distance),
            capacity=None if _is_blank(capacity) else int(to_number(capacity)),
        ))
    return alternatives


def validate_run_input(
    individuals: Sequence[Any],
    alternatives: Sequence[Any],
    weights: WeightsInput = None,
    v: Any = 0.5,
    distance_overrides: Optional[Mapping] = None,
    key_normalizer: KeyNormalizer = normalize_key,
) -> tuple[list[Individual], list[Alternative], WeightVector, Optional[dict[str, dict[str, float]]]]:
    """Validate a full run request before any scoring happens.

    ``key_normalizer`` must be the one the distance resolver uses, so that
    names unique here stay unique when distances are matched.

    Returns:
        Tuple of (individuals, alternatives, weights, distance_overrides),
        all typed and coerced.

    Raises:
        EmptyInputError: No individuals or no alternatives.
        InvalidWeightsError: Weight vector is malformed.
        ValidationFailure: One or more row-level issues (all listed).
    """
    if not individuals:
        raise EmptyInputError("Data siswa diperlukan dan tidak boleh kosong")
    if not alternatives:
        raise EmptyInputError("Data alternatif (DUDI) diperlukan dan tidak boleh kosong")

    weight_vector = parse_weights(weights)

    errors = []
    errors.extend(validate_v_parameter(v))
    errors.extend(validate_individual_rows(individuals, key_normalizer))
    errors.extend(validate_alternative_rows(
        alternatives, require_distance=distance_overrides is None
    ))
    errors.extend(validate_distance_overrides(distance_overrides, key_normalizer))
    if errors:
        raise ValidationFailure(errors, subject="data masukan")

    return (
        build_individuals(individuals),
        build_alternatives(alternatives),
        weight_vector,
        build_distance_overrides(distance_overrides),
    )
