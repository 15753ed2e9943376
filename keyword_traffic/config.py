"""
Analysis configuration.

``AnalysisConfig`` is an immutable snapshot of every tunable the projection
engine reads. Editors build a new config (``dataclasses.replace``) rather
than mutating one in place.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .cohorts import DEFAULT_COHORT_PROFILES, Cohort, CohortRule
from .ctr import BucketCtrTable, CtrTable
from .models import TransitionProbabilities

DEFAULT_MIN_SEARCH_VOLUME = 10
DEFAULT_MAX_POSITION = 50
DEFAULT_UPLIFT_CTR = 0.0


@dataclass(frozen=True)
class AnalysisConfig:
    min_search_volume: int = DEFAULT_MIN_SEARCH_VOLUME
    max_position: int = DEFAULT_MAX_POSITION
    uplift_ctr: float = DEFAULT_UPLIFT_CTR
    ctr_table: CtrTable = field(default_factory=BucketCtrTable)
    transitions: TransitionProbabilities = field(default_factory=TransitionProbabilities)
    cohort_rules: Tuple[CohortRule, ...] = (CohortRule(),)
    cohort_profiles: Dict[Cohort, TransitionProbabilities] = field(
        default_factory=lambda: dict(DEFAULT_COHORT_PROFILES)
    )


# --- Input Coercion ---
def _parse_float(value) -> Optional[float]:
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    # NaN and +/-inf
    return parsed if math.isfinite(parsed) else None


def _parse_int(value) -> Optional[int]:
    parsed = _parse_float(value)
    return None if parsed is None else int(parsed)


def coerce_min_search_volume(value) -> int:
    parsed = _parse_int(value)
    if parsed is None or parsed < 0:
        return DEFAULT_MIN_SEARCH_VOLUME
    return parsed


def coerce_max_position(value) -> int:
    parsed = _parse_int(value)
    if parsed is None or parsed < 1:
        return DEFAULT_MAX_POSITION
    return parsed


def coerce_uplift(value) -> float:
    parsed = _parse_float(value)
    return DEFAULT_UPLIFT_CTR if parsed is None else parsed


def coerce_percentage(value) -> float:
    """CTR cells and probability inputs fall back to 0 when unparsable."""
    parsed = _parse_float(value)
    return 0.0 if parsed is None else parsed
