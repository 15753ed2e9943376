"""
Tests for current traffic estimation, per-bucket projection and the pipeline.
"""

import dataclasses

import pytest

from keyword_traffic.buckets import TARGET_BUCKETS, Bucket
from keyword_traffic.config import AnalysisConfig
from keyword_traffic.models import KeywordRecord
from keyword_traffic.pipeline import filter_records, project_keyword, project_keywords
from keyword_traffic.projection import estimate_current_traffic, project_outcomes


class TestEstimateCurrentTraffic:

    def test_modeled_traffic(self, shoes, table):
        """Position 5, 1,000 searches, 6.3% CTR = 63 clicks."""
        assert estimate_current_traffic(shoes, table) == pytest.approx(63.0)

    def test_modeled_traffic_with_uplift(self, shoes, table):
        assert estimate_current_traffic(shoes, table, 10) == pytest.approx(69.3)

    def test_observed_traffic_wins(self, table):
        """An observed value far from the model is returned untouched."""
        record = KeywordRecord(keyword="shoes", position=5, search_volume=1000, observed_traffic=412.5)
        assert estimate_current_traffic(record, table) == 412.5
        assert estimate_current_traffic(record, table, 300) == 412.5

    def test_no_rounding(self, table):
        record = KeywordRecord(keyword="socks", position=9, search_volume=7)
        assert estimate_current_traffic(record, table) == pytest.approx(7 * 2.85 / 100)


class TestProjectOutcomes:

    def test_targets_exclude_worst_bucket(self, shoes, table):
        traffic, gains = project_outcomes(shoes, table)
        assert set(traffic) == set(TARGET_BUCKETS)
        assert set(gains) == set(TARGET_BUCKETS)

    def test_traffic_per_bucket(self, shoes, table):
        traffic, _ = project_outcomes(shoes, table)
        assert traffic[Bucket.TOP_3] == pytest.approx(184.0)
        assert traffic[Bucket.POS_4_6] == pytest.approx(63.0)
        assert traffic[Bucket.POS_7_10] == pytest.approx(28.5)
        assert traffic[Bucket.POS_11_20] == pytest.approx(10.2)

    def test_gain_with_uplift(self, shoes, table):
        traffic, gains = project_outcomes(shoes, table, 10)
        assert traffic[Bucket.TOP_3] == pytest.approx(202.4)
        assert gains[Bucket.TOP_3] == pytest.approx(202.4 - 69.3)

    def test_negative_gains_are_kept(self, shoes, table):
        _, gains = project_outcomes(shoes, table)
        assert gains[Bucket.POS_4_6] == pytest.approx(0.0)
        assert gains[Bucket.POS_7_10] == pytest.approx(-34.5)
        assert gains[Bucket.POS_11_20] == pytest.approx(-52.8)

    def test_gain_against_observed_traffic(self, table):
        record = KeywordRecord(keyword="shoes", position=5, search_volume=1000, observed_traffic=250.0)
        _, gains = project_outcomes(record, table)
        assert gains[Bucket.TOP_3] == pytest.approx(184.0 - 250.0)


class TestPipeline:

    def test_filters_by_volume_and_position(self, portfolio):
        kept = filter_records(portfolio, AnalysisConfig())
        keywords = [r.keyword for r in kept]
        assert "vintage boots" not in keywords  # position 70 > 50
        assert "boot laces" not in keywords  # volume 5 < 10
        assert "shoe stretcher" in keywords  # position 48 kept
        assert len(kept) == 6

    def test_thresholds_are_inclusive(self):
        records = [KeywordRecord(keyword="edge", position=50, search_volume=10)]
        assert len(filter_records(records, AnalysisConfig())) == 1

    def test_projected_keyword_fields(self, shoes, config):
        projected = project_keyword(shoes, config)
        assert projected.keyword == "shoes"
        assert projected.estimated_current_traffic == pytest.approx(63.0)
        assert projected.expected_traffic == pytest.approx(42.86)
        assert projected.expected_gain == pytest.approx(42.86 - 63.0)

    def test_idempotent(self, portfolio, config):
        assert project_keywords(portfolio, config) == project_keywords(portfolio, config)

    def test_config_change_recomputes(self, portfolio, config):
        base = project_keywords(portfolio, config)
        lifted = project_keywords(portfolio, dataclasses.replace(config, uplift_ctr=20))
        assert [p.keyword for p in base] == [p.keyword for p in lifted]
        assert lifted[0].expected_traffic == pytest.approx(base[0].expected_traffic * 1.2)

    def test_source_records_untouched(self, portfolio, config):
        before = list(portfolio)
        project_keywords(portfolio, config)
        assert portfolio == before
