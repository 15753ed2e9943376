"""
Data classes shared by the projection engine.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .buckets import Bucket


@dataclass(frozen=True)
class KeywordRecord:
    """One ranked keyword parsed from an export row."""
    keyword: str
    position: int
    search_volume: int
    observed_traffic: Optional[float] = None
    # Only used by cohort rule matching
    difficulty: Optional[float] = None
    serp_features: Tuple[str, ...] = ()
    intent: Optional[str] = None
    country: Optional[str] = None
    device: Optional[str] = None


@dataclass(frozen=True)
class TransitionProbabilities:
    """
    Percentage mass for landing in each target bucket after one move.

    The Pos 11-20 mass is derived from the other four and floored at 0.
    Inputs are not normalized: if they already exceed 100 the total mass
    exceeds 100 as well.
    """
    p13: float = 5.0
    p46: float = 15.0
    p710: float = 30.0
    pstay: float = 20.0

    @property
    def p1120(self) -> float:
        return max(0.0, 100 - self.p13 - self.p46 - self.p710 - self.pstay)

    @property
    def total(self) -> float:
        return self.p13 + self.p46 + self.p710 + self.p1120 + self.pstay

    def bucket_weights(self) -> Dict[Bucket, float]:
        """Fractional weights for the fixed destination buckets (stay excluded)."""
        return {
            Bucket.TOP_3: self.p13 / 100,
            Bucket.POS_4_6: self.p46 / 100,
            Bucket.POS_7_10: self.p710 / 100,
            Bucket.POS_11_20: self.p1120 / 100,
        }


@dataclass(frozen=True)
class ProjectedKeyword:
    record: KeywordRecord
    estimated_current_traffic: float
    traffic_per_bucket: Dict[Bucket, float] = field(default_factory=dict)
    gain_per_bucket: Dict[Bucket, float] = field(default_factory=dict)
    expected_traffic: float = 0.0
    expected_gain: float = 0.0

    @property
    def keyword(self) -> str:
        return self.record.keyword

    @property
    def position(self) -> int:
        return self.record.position

    @property
    def search_volume(self) -> int:
        return self.record.search_volume
