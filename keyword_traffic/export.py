"""
Export of projected keywords to tabular files.

Rounding to 2 decimals happens here and nowhere in the model.
"""

import logging
from io import BytesIO
from typing import Sequence

import pandas as pd

from .buckets import BUCKET_LABELS, TARGET_BUCKETS
from .errors import EmptyExportError
from .models import ProjectedKeyword

logger = logging.getLogger(__name__)

SHEET_NAME = "Keyword Analysis"
EXCEL_FILE_NAME = "keyword-analysis.xlsx"
CSV_FILE_NAME = "keyword-analysis.csv"
EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_columns():
    columns = ["Keyword", "Current Position", "Search Volume", "Current Traffic"]
    columns += [f"Traffic {BUCKET_LABELS[b]}" for b in TARGET_BUCKETS]
    columns += [f"Gain {BUCKET_LABELS[b]}" for b in TARGET_BUCKETS]
    columns += ["Expected Traffic", "Expected Gain"]
    return columns


def export_row(p: ProjectedKeyword) -> dict:
    row = {
        "Keyword": p.keyword,
        "Current Position": p.position,
        "Search Volume": p.search_volume,
        "Current Traffic": round(p.estimated_current_traffic, 2),
    }
    for bucket in TARGET_BUCKETS:
        row[f"Traffic {BUCKET_LABELS[bucket]}"] = round(p.traffic_per_bucket[bucket], 2)
    for bucket in TARGET_BUCKETS:
        row[f"Gain {BUCKET_LABELS[bucket]}"] = round(p.gain_per_bucket[bucket], 2)
    row["Expected Traffic"] = round(p.expected_traffic, 2)
    row["Expected Gain"] = round(p.expected_gain, 2)
    return row


def export_frame(projected: Sequence[ProjectedKeyword]) -> pd.DataFrame:
    if not projected:
        raise EmptyExportError("No data to export")
    return pd.DataFrame([export_row(p) for p in projected], columns=export_columns())


def to_excel_bytes(projected: Sequence[ProjectedKeyword]) -> bytes:
    df = export_frame(projected)
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
    logger.info(f"Exported {len(df)} keywords to Excel")
    return buffer.getvalue()


def to_csv_bytes(projected: Sequence[ProjectedKeyword]) -> bytes:
    df = export_frame(projected)
    logger.info(f"Exported {len(df)} keywords to CSV")
    return df.to_csv(index=False).encode("utf-8")
