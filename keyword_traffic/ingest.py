"""
Keyword export ingestion.

Reads CSV / Excel exports (SEMrush Organic Research and similar), resolves
the many header spellings to logical fields, and keeps only rows with a
keyword, a position above 0 and a search volume above 0. Rows that fail
are dropped silently; only an unreadable file is an error.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence

import pandas as pd

from .errors import InputParseError
from .models import KeywordRecord

logger = logging.getLogger(__name__)

# Candidate headers per field, in priority order
KEYWORD_COLUMNS = ("Keyword", "keyword", "KEYWORD", "query", "Query")
POSITION_COLUMNS = ("Position", "position", "POSITION", "rank", "Rank", "Avg. Position")
VOLUME_COLUMNS = (
    "Search Volume",
    "search volume",
    "Volume",
    "volume",
    "search_volume",
    "Monthly Search Volume",
    "Avg. Monthly Searches",
)
TRAFFIC_COLUMNS = (
    "Traffic",
    "traffic",
    "TRAFFIC",
    "Current Traffic",
    "current traffic",
    "Est. Traffic",
    "Estimated Traffic",
    "Monthly Traffic",
)
DIFFICULTY_COLUMNS = ("Keyword Difficulty", "KD", "KD%", "Difficulty", "difficulty")
SERP_COLUMNS = ("SERP Features by Keyword", "SERP Features", "serp features")
INTENT_COLUMNS = ("Keyword Intents", "Intent", "intent")
COUNTRY_COLUMNS = ("Country", "country", "Database")
DEVICE_COLUMNS = ("Device", "device")

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def resolve_field(row: Mapping[str, Any], candidates: Sequence[str]):
    """First populated value among the candidate headers, or None."""
    for name in candidates:
        value = row.get(name)
        if not _blank(value):
            return value
    return None


def _to_number(value) -> Optional[float]:
    if _blank(value):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number) or math.isinf(number):
        return None
    return float(number)


def _to_int(value) -> int:
    number = _to_number(value)
    return 0 if number is None else int(number)


def _to_text(value) -> Optional[str]:
    return None if _blank(value) else str(value).strip()


def _to_tags(value) -> tuple:
    text = _to_text(value)
    if text is None:
        return ()
    return tuple(tag.strip() for tag in text.split(",") if tag.strip())


# --- Row -> Record ---
def record_from_row(row: Mapping[str, Any]) -> KeywordRecord:
    keyword = _to_text(resolve_field(row, KEYWORD_COLUMNS)) or ""
    # Zero traffic is treated as "not reported"
    traffic = _to_number(resolve_field(row, TRAFFIC_COLUMNS)) or None

    return KeywordRecord(
        keyword=keyword,
        position=_to_int(resolve_field(row, POSITION_COLUMNS)),
        search_volume=_to_int(resolve_field(row, VOLUME_COLUMNS)),
        observed_traffic=traffic,
        difficulty=_to_number(resolve_field(row, DIFFICULTY_COLUMNS)),
        serp_features=_to_tags(resolve_field(row, SERP_COLUMNS)),
        intent=_to_text(resolve_field(row, INTENT_COLUMNS)),
        country=_to_text(resolve_field(row, COUNTRY_COLUMNS)),
        device=_to_text(resolve_field(row, DEVICE_COLUMNS)),
    )


def is_valid_record(record: KeywordRecord) -> bool:
    return bool(record.keyword) and record.position > 0 and record.search_volume > 0


def records_from_frame(df: pd.DataFrame) -> List[KeywordRecord]:
    records = [record_from_row(row) for row in df.to_dict("records")]
    valid = [record for record in records if is_valid_record(record)]

    dropped = len(records) - len(valid)
    if dropped:
        logger.info(f"Dropped {dropped} rows without keyword, position or search volume")
    return valid


# --- File Reading ---
def read_keyword_file(source, filename: str = "") -> pd.DataFrame:
    """
    Read the first sheet of an uploaded export into a DataFrame.

    Args:
        source: path or file-like object (e.g. a Streamlit UploadedFile)
        filename (str, optional): name used to pick the reader when source
            is a file-like object without one

    Raises:
        InputParseError: the file is unreadable or not a supported format
    """
    name = (filename or getattr(source, "name", "") or str(source)).lower()
    if not name.endswith(SUPPORTED_EXTENSIONS):
        raise InputParseError(f"Unsupported file type: {name or 'unknown'}", detail=SUPPORTED_EXTENSIONS)

    try:
        if name.endswith(".csv"):
            df = pd.read_csv(source)
        else:
            df = pd.read_excel(source, sheet_name=0)
    except Exception as e:
        logger.error(f"Error parsing keyword file {name}: {e}")
        raise InputParseError(
            "Error parsing file. Please use a keyword export (XLSX or CSV) with "
            "Keyword, Position and Search Volume columns.",
            detail=str(e),
        ) from e

    df.columns = df.columns.astype(str).str.strip()
    return df


def load_keywords(source, filename: str = "") -> List[KeywordRecord]:
    df = read_keyword_file(source, filename)
    records = records_from_frame(df)
    logger.info(f"Loaded {len(records)} keywords from {len(df)} rows")
    return records
