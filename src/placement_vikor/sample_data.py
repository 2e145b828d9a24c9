"""Default sample dataset: eight students and five bank branches."""

from .config import get_config

SAMPLE_INDIVIDUALS = [
    {"name": "Ahmad Rizki", "c1": 85, "c2": 80, "c4": 78, "c5": 82},
    {"name": "Siti Nurhaliza", "c1": 90, "c2": 85, "c4": 88, "c5": 90},
    {"name": "Budi Santoso", "c1": 75, "c2": 78, "c4": 72, "c5": 75},
    {"name": "Dewi Lestari", "c1": 82, "c2": 88, "c4": 80, "c5": 85},
    {"name": "Eko Prasetyo", "c1": 65, "c2": 70, "c4": 68, "c5": 72},
    {"name": "Fajar Ramadhan", "c1": 88, "c2": 82, "c4": 85, "c5": 80},
    {"name": "Gita Pertiwi", "c1": 78, "c2": 75, "c4": 76, "c5": 78},
    {"name": "Hendra Wijaya", "c1": 92, "c2": 90, "c4": 95, "c5": 88},
]

SAMPLE_ALTERNATIVES = [
    {"code": "A1", "name": "Bank BJB Syariah KC Jakarta (Soepomo)", "distance": 5.2},
    {"code": "A2", "name": "Bank Jakarta KCP Matraman", "distance": 3.8},
    {"code": "A3", "name": "Bank BRI KCP Saharjo", "distance": 4.5},
    {"code": "A4", "name": "Bank Mandiri KCP Jatinegara", "distance": 6.1},
    {"code": "A5", "name": "Bank BNI KCP Tebet", "distance": 2.9},
]

SAMPLE_WEIGHTS = [0.3, 0.2, 0.1, 0.25, 0.15]


def sample_dataset() -> dict:
    """Return the sample run input, in the layout the CLI reads as a run input file."""
    cfg = get_config()
    return {
        "individuals": [dict(row) for row in SAMPLE_INDIVIDUALS],
        "alternatives": [dict(row) for row in SAMPLE_ALTERNATIVES],
        "weights": list(SAMPLE_WEIGHTS),
        "v": cfg.weights.v_parameter,
        "labels": list(cfg.criteria.summary_labels),
        "types": ["Benefit", "Benefit", "Cost", "Benefit", "Benefit"],
        "thresholds": {"c1": cfg.thresholds.c1, "c4": cfg.thresholds.c4},
    }
