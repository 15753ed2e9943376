"""
Tests for the results figures.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from keyword_traffic.charts import distribution_chart, opportunity_chart, traffic_chart
from keyword_traffic.models import KeywordRecord
from keyword_traffic.pipeline import project_keywords
from keyword_traffic.summary import summarize


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestOpportunityChart:

    def test_colliding_display_keywords_get_separate_bars(self, config):
        """Two keywords sharing their first 25 characters still plot as two bars."""
        records = [
            KeywordRecord(keyword="best running shoes for flat feet", position=30, search_volume=900),
            KeywordRecord(keyword="best running shoes for flat arches", position=30, search_volume=800),
        ]
        summary = summarize(project_keywords(records, config))
        labels = [o.keyword for o in summary.top_opportunities]
        assert labels[0] == labels[1]

        ax = opportunity_chart(summary).axes[0]
        assert len(ax.patches) == 2
        assert len({bar.get_y() for bar in ax.patches}) == 2
        assert [t.get_text() for t in ax.get_yticklabels()] == labels[::-1]

    def test_one_bar_per_opportunity(self, portfolio, config):
        summary = summarize(project_keywords(portfolio, config))
        ax = opportunity_chart(summary).axes[0]
        assert len(ax.patches) == len(summary.top_opportunities)


class TestSummaryCharts:

    def test_traffic_chart(self, portfolio, config):
        summary = summarize(project_keywords(portfolio, config))
        ax = traffic_chart(summary).axes[0]
        heights = [bar.get_height() for bar in ax.patches]
        assert heights == [round(summary.total_current_traffic), round(summary.total_expected_traffic)]

    def test_distribution_chart_skips_empty_ranges(self, portfolio, config):
        summary = summarize(project_keywords(portfolio, config))
        ax = distribution_chart(summary).axes[0]
        # The portfolio has nothing beyond position 50
        assert len(ax.patches) == 4
