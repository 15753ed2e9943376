"""
Probabilistic traffic forecast.

A single forward move is modeled: the transition probabilities spread the
keyword over the target buckets, with the "stay" share keeping the CTR of the
keyword's current position. This is a one-step blend, not a Markov chain.
"""

from typing import Mapping, Optional

from .cohorts import Cohort, CohortAssignment
from .ctr import CtrTable, ctr_of
from .models import KeywordRecord, TransitionProbabilities
from .projection import estimate_current_traffic, traffic_at


def expected_ctr(
    record: KeywordRecord,
    table: CtrTable,
    transitions: TransitionProbabilities,
    uplift_pct: float = 0.0,
) -> float:
    blended = sum(
        weight * ctr_of(bucket, table, uplift_pct)
        for bucket, weight in transitions.bucket_weights().items()
    )
    blended += transitions.pstay / 100 * ctr_of(record.position, table, uplift_pct)
    return blended


def expected_traffic(
    record: KeywordRecord,
    table: CtrTable,
    transitions: TransitionProbabilities,
    uplift_pct: float = 0.0,
) -> float:
    return traffic_at(record.search_volume, expected_ctr(record, table, transitions, uplift_pct))


def expected_gain(
    record: KeywordRecord,
    table: CtrTable,
    transitions: TransitionProbabilities,
    uplift_pct: float = 0.0,
) -> float:
    return expected_traffic(record, table, transitions, uplift_pct) - estimate_current_traffic(record, table, uplift_pct)


# --- Cohort Blend ---
def cohort_expected_traffic(
    record: KeywordRecord,
    assignment: Optional[CohortAssignment],
    profiles: Mapping[Cohort, TransitionProbabilities],
    table: CtrTable,
    uplift_pct: float = 0.0,
) -> float:
    """
    Expected traffic under the keyword's cohort assignment.

    An override uses its cohort's profile outright. Otherwise each cohort's
    forecast is weighted by the rule's probability and the residual share
    keeps current traffic. Unassigned keywords keep current traffic.
    """
    current = estimate_current_traffic(record, table, uplift_pct)
    if assignment is None:
        return current

    if assignment.is_override:
        return expected_traffic(record, table, profiles[assignment.cohort], uplift_pct)

    total = assignment.residual * current
    for cohort, weight in assignment.weights.items():
        if weight:
            total += weight * expected_traffic(record, table, profiles[cohort], uplift_pct)
    return total
