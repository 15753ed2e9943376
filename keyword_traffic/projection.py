"""
Current traffic estimate and per-bucket outcome projection.
"""

from typing import Dict, Optional, Tuple

from .buckets import TARGET_BUCKETS, Bucket
from .ctr import CtrTable, ctr_of
from .models import KeywordRecord


def traffic_at(search_volume: int, ctr_pct: float) -> float:
    return search_volume * ctr_pct / 100


# --- Current Traffic ---
def estimate_current_traffic(record: KeywordRecord, table: CtrTable, uplift_pct: float = 0.0) -> float:
    """Observed traffic when the export carried one, otherwise volume x CTR."""
    if record.observed_traffic is not None:
        return record.observed_traffic
    return traffic_at(record.search_volume, ctr_of(record.position, table, uplift_pct))


# --- Per-Bucket Outcomes ---
def project_outcomes(
    record: KeywordRecord,
    table: CtrTable,
    uplift_pct: float = 0.0,
    current_traffic: Optional[float] = None,
) -> Tuple[Dict[Bucket, float], Dict[Bucket, float]]:
    """
    Traffic the keyword would get in each target bucket, and the signed gain
    against its current traffic. Negative gains are kept as they are.
    """
    if current_traffic is None:
        current_traffic = estimate_current_traffic(record, table, uplift_pct)

    traffic = {}
    gains = {}
    for bucket in TARGET_BUCKETS:
        traffic[bucket] = traffic_at(record.search_volume, ctr_of(bucket, table, uplift_pct))
        gains[bucket] = traffic[bucket] - current_traffic

    return traffic, gains
