"""
Tests for cohort rule matching, evaluation and editor row parsing.
"""

import math

import pytest

from keyword_traffic.cohorts import (
    Cohort,
    CohortRule,
    assign_cohort,
    assign_cohorts,
    evaluate_rule,
    match_rule,
    rule_from_row,
    rule_to_row,
    validate_rules,
)
from keyword_traffic.models import KeywordRecord


@pytest.fixture
def keyword():
    return KeywordRecord(
        keyword="buy running shoes",
        position=8,
        search_volume=2400,
        difficulty=42.0,
        serp_features=("Sitelinks", "Reviews", "Image pack"),
        intent="Commercial, Transactional",
        country="US",
        device="Desktop",
    )


# =============================================================================
# RULE VALIDITY
# =============================================================================


class TestRuleAllocation:

    def test_default_rule(self):
        rule = CohortRule()
        assert rule.is_valid
        assert rule.residual == pytest.approx(0.1)

    def test_over_allocation_is_flagged(self):
        rule = CohortRule(prob_a=0.5, prob_b=0.4, prob_c=0.3)
        assert not rule.is_valid
        assert rule.residual == 0.0
        # The allocation itself is preserved
        assert rule.allocated == pytest.approx(1.2)

    def test_exactly_one_is_valid(self):
        rule = CohortRule(prob_a=0.5, prob_b=0.5, prob_c=0.0)
        assert rule.is_valid
        assert rule.residual == pytest.approx(0.0)

    def test_validate_rules_returns_invalid_indices(self):
        rules = [CohortRule(), CohortRule(prob_a=0.9, prob_b=0.9, prob_c=0.0), CohortRule()]
        assert validate_rules(rules) == [1]


# =============================================================================
# MATCHING
# =============================================================================


class TestMatchRule:

    def test_empty_rule_matches_everything(self, keyword):
        assert match_rule(keyword, CohortRule())

    def test_position_range_is_inclusive(self, keyword):
        assert match_rule(keyword, CohortRule(position_from=8, position_to=8))
        assert match_rule(keyword, CohortRule(position_from=4, position_to=10))
        assert not match_rule(keyword, CohortRule(position_from=9, position_to=20))

    def test_single_bound(self, keyword):
        assert match_rule(keyword, CohortRule(position_from=5))
        assert not match_rule(keyword, CohortRule(position_to=5))

    def test_difficulty_range(self, keyword):
        assert match_rule(keyword, CohortRule(kd_from=40, kd_to=42))
        assert not match_rule(keyword, CohortRule(kd_from=50, kd_to=100))

    def test_missing_difficulty_does_not_match_difficulty_filter(self):
        record = KeywordRecord(keyword="x", position=3, search_volume=100)
        assert not match_rule(record, CohortRule(kd_from=0, kd_to=100))
        assert match_rule(record, CohortRule(position_from=1, position_to=3))

    def test_serp_feature_tag(self, keyword):
        assert match_rule(keyword, CohortRule(serp="reviews"))
        assert not match_rule(keyword, CohortRule(serp="Video"))

    def test_intent_is_one_of_many(self, keyword):
        assert match_rule(keyword, CohortRule(intent="transactional"))
        assert not match_rule(keyword, CohortRule(intent="Informational"))

    def test_country_and_device(self, keyword):
        assert match_rule(keyword, CohortRule(country="us", device="desktop"))
        assert not match_rule(keyword, CohortRule(country="UK"))
        assert not match_rule(keyword, CohortRule(device="Mobile"))

    def test_all_filters_must_match(self, keyword):
        rule = CohortRule(position_from=1, position_to=10, kd_from=0, kd_to=30, country="US")
        assert not match_rule(keyword, rule)


# =============================================================================
# ASSIGNMENT
# =============================================================================


class TestAssignCohort:

    def test_first_match_wins(self, keyword):
        rules = [
            CohortRule(position_from=11, position_to=20, cohort_override=Cohort.C),
            CohortRule(position_from=1, position_to=10, cohort_override=Cohort.A),
            CohortRule(cohort_override=Cohort.B),
        ]
        assignment = assign_cohort(keyword, rules)
        assert assignment.rule_index == 1
        assert assignment.cohort == Cohort.A

    def test_override_bypasses_weights(self):
        assignment = evaluate_rule(CohortRule(prob_a=0.9, prob_b=0.9, prob_c=0.9, cohort_override=Cohort.B))
        assert assignment.is_override
        assert assignment.weights == {}

    def test_probability_split(self):
        assignment = evaluate_rule(CohortRule(prob_a=0.2, prob_b=0.3, prob_c=0.1), rule_index=4)
        assert assignment.rule_index == 4
        assert assignment.weights == {Cohort.A: 0.2, Cohort.B: 0.3, Cohort.C: 0.1}
        assert assignment.residual == pytest.approx(0.4)
        assert assignment.valid

    def test_invalid_rule_still_assigns(self):
        assignment = evaluate_rule(CohortRule(prob_a=0.5, prob_b=0.4, prob_c=0.3))
        assert not assignment.valid
        assert assignment.residual == 0.0
        assert assignment.weights[Cohort.A] == 0.5

    def test_no_match(self, keyword):
        assert assign_cohort(keyword, [CohortRule(country="DE")]) is None
        assert assign_cohort(keyword, []) is None

    def test_assign_many(self, keyword):
        other = KeywordRecord(keyword="y", position=30, search_volume=10)
        result = assign_cohorts([keyword, other], [CohortRule(position_to=10)])
        assert result[0].rule_index == 0
        assert result[1] is None


# =============================================================================
# EDITOR ROWS
# =============================================================================


class TestRuleFromRow:

    def test_blank_cells(self):
        rule = rule_from_row({
            "position_from": math.nan,
            "position_to": "",
            "kd_from": None,
            "serp": "  ",
            "prob_a": "0.5",
            "prob_b": "abc",
            "prob_c": math.nan,
            "cohort_override": "",
        })
        assert rule.position_from is None
        assert rule.position_to is None
        assert rule.serp is None
        assert rule.prob_a == 0.5
        assert rule.prob_b == 0.0
        assert rule.prob_c == 0.0
        assert rule.cohort_override is None

    def test_override_parsing(self):
        assert rule_from_row({"cohort_override": "b"}).cohort_override == Cohort.B
        assert rule_from_row({"cohort_override": "Z"}).cohort_override is None

    def test_row_round_trip_of_default_rule(self):
        assert rule_from_row(rule_to_row(CohortRule())) == CohortRule()
