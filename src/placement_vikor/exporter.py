"""Export a placement result to CSV or JSON.

The caller owns the result and passes it in explicitly; there is no
cached "last result".
"""

import csv
import logging
from pathlib import Path

from .schema import VikorResult

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Nama Siswa",
    "Akumulasi Nilai (C1)",
    "Penilaian Sikap (C2)",
    "Nilai Sertifikasi (C4)",
    "Rekomendasi Guru (C5)",
    "Rekomendasi DUDI",
    "Kode DUDI",
    "Jarak (km)",
    "Nilai S",
    "Nilai R",
    "Nilai Q",
    "Ranking",
    "Penempatan DUDI",
    "Kode Penempatan",
    "Kompromi",
    "Keterangan",
]


def export_rows(result: VikorResult) -> list[dict]:
    """Flatten a result into one row per individual.

    Qualified individuals come first in input order, followed by the
    disqualified ones marked ``TIDAK LOLOS``.
    """
    rows = []

    for item in result.qualified:
        rec = item.recommendation
        alloc = item.allocation
        rows.append({
            "Nama Siswa": item.individual.name,
            "Akumulasi Nilai (C1)": item.individual.c1,
            "Penilaian Sikap (C2)": item.individual.c2,
            "Nilai Sertifikasi (C4)": item.individual.c4,
            "Rekomendasi Guru (C5)": item.individual.c5,
            "Rekomendasi DUDI": rec.name,
            "Kode DUDI": rec.code,
            "Jarak (km)": rec.distance,
            "Nilai S": rec.s,
            "Nilai R": rec.r,
            "Nilai Q": rec.q,
            "Ranking": rec.rank,
            "Penempatan DUDI": alloc.assigned_name if alloc else rec.name,
            "Kode Penempatan": alloc.assigned_code if alloc else rec.code,
            "Kompromi": item.compromise.conclusion.value,
            "Keterangan": (alloc.displacement_reason or "") if alloc else "",
        })

    for item in result.disqualified:
        rows.append({
            "Nama Siswa": item.name,
            "Akumulasi Nilai (C1)": item.c1,
            "Penilaian Sikap (C2)": "-",
            "Nilai Sertifikasi (C4)": item.c4,
            "Rekomendasi Guru (C5)": "-",
            "Rekomendasi DUDI": "TIDAK LOLOS",
            "Kode DUDI": "-",
            "Jarak (km)": "-",
            "Nilai S": "-",
            "Nilai R": "-",
            "Nilai Q": "-",
            "Ranking": "-",
            "Penempatan DUDI": "-",
            "Kode Penempatan": "-",
            "Kompromi": "-",
            "Keterangan": item.reason,
        })

    return rows


def export_csv(result: VikorResult, path: Path) -> Path:
    """Write result rows as CSV with a UTF-8 BOM (opens cleanly in Excel)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8-sig', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS, quoting=csv.QUOTE_NONNUMERIC)
        writer.writeheader()
        writer.writerows(export_rows(result))

    logger.info("Result exported to %s", path)
    return path


def export_json(result: VikorResult, path: Path) -> Path:
    """Write the full result as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        f.write(result.model_dump_json(indent=2))

    logger.info("Result exported to %s", path)
    return path
