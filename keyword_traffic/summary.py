"""
Portfolio-level rollups over projected keywords.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .buckets import REPORTING_RANGES, TARGET_BUCKETS, Bucket, reporting_range
from .models import ProjectedKeyword

TOP_OPPORTUNITIES = 10
DISPLAY_KEYWORD_LENGTH = 25


@dataclass(frozen=True)
class Opportunity:
    keyword: str
    current: float
    potential: float
    gain: float


@dataclass(frozen=True)
class PortfolioSummary:
    keyword_count: int
    total_current_traffic: float
    total_expected_traffic: float
    total_gain: float
    position_distribution: Dict[str, int] = field(default_factory=dict)
    top_opportunities: List[Opportunity] = field(default_factory=list)
    total_positive_gain_per_bucket: Dict[Bucket, float] = field(default_factory=dict)


def display_keyword(keyword: str, limit: int = DISPLAY_KEYWORD_LENGTH) -> str:
    return keyword[:limit] + "..." if len(keyword) > limit else keyword


def position_distribution(projected: Sequence[ProjectedKeyword]) -> Dict[str, int]:
    counts = {label: 0 for label in REPORTING_RANGES}
    for p in projected:
        counts[reporting_range(p.position)] += 1
    return counts


def top_opportunities(projected: Sequence[ProjectedKeyword], limit: int = TOP_OPPORTUNITIES) -> List[Opportunity]:
    """Keywords with positive expected gain, largest gain first."""
    winners = sorted(
        (p for p in projected if p.expected_gain > 0),
        key=lambda p: p.expected_gain,
        reverse=True,
    )
    return [
        Opportunity(
            keyword=display_keyword(p.keyword),
            current=p.estimated_current_traffic,
            potential=p.expected_traffic,
            gain=p.expected_gain,
        )
        for p in winners[:limit]
    ]


def positive_gain_per_bucket(projected: Sequence[ProjectedKeyword]) -> Dict[Bucket, float]:
    return {
        bucket: sum(max(0.0, p.gain_per_bucket.get(bucket, 0.0)) for p in projected)
        for bucket in TARGET_BUCKETS
    }


def summarize(projected: Sequence[ProjectedKeyword], top_n: int = TOP_OPPORTUNITIES) -> PortfolioSummary:
    total_current = sum(p.estimated_current_traffic for p in projected)
    total_expected = sum(p.expected_traffic for p in projected)

    return PortfolioSummary(
        keyword_count=len(projected),
        total_current_traffic=total_current,
        total_expected_traffic=total_expected,
        total_gain=total_expected - total_current,
        position_distribution=position_distribution(projected),
        top_opportunities=top_opportunities(projected, top_n),
        total_positive_gain_per_bucket=positive_gain_per_bucket(projected),
    )
