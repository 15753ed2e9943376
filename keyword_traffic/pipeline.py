"""
End-to-end projection over a keyword set.

Every call recomputes from scratch; nothing is cached between runs.
"""

import logging
from typing import Iterable, List, Optional

from .cohorts import CohortAssignment, assign_cohorts
from .config import AnalysisConfig
from .forecast import cohort_expected_traffic, expected_traffic
from .models import KeywordRecord, ProjectedKeyword
from .projection import estimate_current_traffic, project_outcomes

logger = logging.getLogger(__name__)


def filter_records(records: Iterable[KeywordRecord], config: AnalysisConfig) -> List[KeywordRecord]:
    return [
        record for record in records
        if record.search_volume >= config.min_search_volume and record.position <= config.max_position
    ]


def project_keyword(record: KeywordRecord, config: AnalysisConfig) -> ProjectedKeyword:
    table = config.ctr_table
    uplift = config.uplift_ctr

    current = estimate_current_traffic(record, table, uplift)
    traffic, gains = project_outcomes(record, table, uplift, current_traffic=current)
    expected = expected_traffic(record, table, config.transitions, uplift)

    return ProjectedKeyword(
        record=record,
        estimated_current_traffic=current,
        traffic_per_bucket=traffic,
        gain_per_bucket=gains,
        expected_traffic=expected,
        expected_gain=expected - current,
    )


def project_keywords(records: Iterable[KeywordRecord], config: AnalysisConfig) -> List[ProjectedKeyword]:
    records = list(records)
    kept = filter_records(records, config)
    logger.info(f"Projecting {len(kept)} of {len(records)} keywords "
                f"(min volume {config.min_search_volume}, max position {config.max_position})")
    return [project_keyword(record, config) for record in kept]


def project_cohorts(
    projected: Iterable[ProjectedKeyword],
    config: AnalysisConfig,
) -> List[Optional[CohortAssignment]]:
    """Cohort assignment for each projected keyword, in order."""
    return assign_cohorts((p.record for p in projected), config.cohort_rules)


def cohort_forecasts(projected: Iterable[ProjectedKeyword], config: AnalysisConfig) -> List[float]:
    projected = list(projected)
    assignments = project_cohorts(projected, config)
    return [
        cohort_expected_traffic(p.record, assignment, config.cohort_profiles, config.ctr_table, config.uplift_ctr)
        for p, assignment in zip(projected, assignments)
    ]
