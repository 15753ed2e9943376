"""
Cohort rule model.

Rules are tried top to bottom and the first matching rule wins. A matching
rule either pins the keyword to a cohort (``cohort_override``) or yields a
probability split across cohorts A/B/C plus a "no change" residual.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .models import KeywordRecord, TransitionProbabilities

logger = logging.getLogger(__name__)


class Cohort(str, Enum):
    A = "A"
    B = "B"
    C = "C"


# Movement profile per cohort, used when blending cohort forecasts
DEFAULT_COHORT_PROFILES = {
    Cohort.A: TransitionProbabilities(p13=20, p46=30, p710=30, pstay=10),
    Cohort.B: TransitionProbabilities(p13=5, p46=15, p710=30, pstay=20),
    Cohort.C: TransitionProbabilities(p13=0, p46=5, p710=15, pstay=60),
}


@dataclass(frozen=True)
class CohortRule:
    position_from: Optional[float] = None
    position_to: Optional[float] = None
    kd_from: Optional[float] = None
    kd_to: Optional[float] = None
    serp: Optional[str] = None
    intent: Optional[str] = None
    country: Optional[str] = None
    device: Optional[str] = None
    prob_a: float = 0.3
    prob_b: float = 0.3
    prob_c: float = 0.3
    cohort_override: Optional[Cohort] = None

    @property
    def allocated(self) -> float:
        return self.prob_a + self.prob_b + self.prob_c

    @property
    def is_valid(self) -> bool:
        return self.allocated <= 1

    @property
    def residual(self) -> float:
        # Over-allocated rules keep their weights but get no residual
        return 1 - self.allocated if self.is_valid else 0.0


@dataclass(frozen=True)
class CohortAssignment:
    rule_index: int
    cohort: Optional[Cohort] = None
    weights: Dict[Cohort, float] = field(default_factory=dict)
    residual: float = 0.0
    valid: bool = True

    @property
    def is_override(self) -> bool:
        return self.cohort is not None


# --- Matching ---
def _in_range(value, low, high) -> bool:
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _split_tags(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [tag.strip().lower() for tag in value if tag and tag.strip()]


def _matches_tag(wanted: Optional[str], actual) -> bool:
    if not wanted:
        return True
    return wanted.strip().lower() in _split_tags(actual)


def _matches_exact(wanted: Optional[str], actual: Optional[str]) -> bool:
    if not wanted:
        return True
    if actual is None:
        return False
    return wanted.strip().lower() == actual.strip().lower()


def match_rule(record: KeywordRecord, rule: CohortRule) -> bool:
    """Every populated filter on the rule must match; empty filters match all."""
    return (
        _in_range(record.position, rule.position_from, rule.position_to)
        and _in_range(record.difficulty, rule.kd_from, rule.kd_to)
        and _matches_tag(rule.serp, record.serp_features)
        and _matches_tag(rule.intent, record.intent)
        and _matches_exact(rule.country, record.country)
        and _matches_exact(rule.device, record.device)
    )


# --- Evaluation ---
def evaluate_rule(rule: CohortRule, rule_index: int = 0) -> CohortAssignment:
    if rule.cohort_override is not None:
        return CohortAssignment(rule_index=rule_index, cohort=rule.cohort_override)

    return CohortAssignment(
        rule_index=rule_index,
        weights={Cohort.A: rule.prob_a, Cohort.B: rule.prob_b, Cohort.C: rule.prob_c},
        residual=rule.residual,
        valid=rule.is_valid,
    )


def assign_cohort(record: KeywordRecord, rules: Sequence[CohortRule]) -> Optional[CohortAssignment]:
    for index, rule in enumerate(rules):
        if match_rule(record, rule):
            return evaluate_rule(rule, index)
    return None


def assign_cohorts(records: Iterable[KeywordRecord], rules: Sequence[CohortRule]) -> List[Optional[CohortAssignment]]:
    return [assign_cohort(record, rules) for record in records]


def validate_rules(rules: Sequence[CohortRule]) -> List[int]:
    """Indices of rules whose A+B+C allocation exceeds 1."""
    invalid = [index for index, rule in enumerate(rules) if not rule.is_valid]
    for index in invalid:
        logger.warning(f"Cohort rule {index + 1} allocates {rules[index].allocated:.2f} > 1, residual forced to 0")
    return invalid


# --- Editor Rows ---
def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _optional_number(value) -> Optional[float]:
    if _blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_text(value) -> Optional[str]:
    if _blank(value):
        return None
    return str(value).strip()


def _probability(value) -> float:
    number = _optional_number(value)
    return number if number is not None else 0.0


def rule_from_row(row: Mapping[str, Any]) -> CohortRule:
    """Build a rule from an editor row of loosely typed cells."""
    override = _optional_text(row.get("cohort_override"))
    return CohortRule(
        position_from=_optional_number(row.get("position_from")),
        position_to=_optional_number(row.get("position_to")),
        kd_from=_optional_number(row.get("kd_from")),
        kd_to=_optional_number(row.get("kd_to")),
        serp=_optional_text(row.get("serp")),
        intent=_optional_text(row.get("intent")),
        country=_optional_text(row.get("country")),
        device=_optional_text(row.get("device")),
        prob_a=_probability(row.get("prob_a")),
        prob_b=_probability(row.get("prob_b")),
        prob_c=_probability(row.get("prob_c")),
        cohort_override=Cohort(override.upper()) if override and override.upper() in Cohort.__members__ else None,
    )


def rule_to_row(rule: CohortRule) -> Dict[str, Any]:
    return {
        "position_from": rule.position_from,
        "position_to": rule.position_to,
        "kd_from": rule.kd_from,
        "kd_to": rule.kd_to,
        "serp": rule.serp or "",
        "intent": rule.intent or "",
        "country": rule.country or "",
        "device": rule.device or "",
        "prob_a": rule.prob_a,
        "prob_b": rule.prob_b,
        "prob_c": rule.prob_c,
        "cohort_override": rule.cohort_override.value if rule.cohort_override else "",
    }
