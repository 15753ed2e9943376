"""
Matplotlib figures for the results view.
"""

import matplotlib.pyplot as plt

from .summary import PortfolioSummary

RANGE_COLORS = {"1-3": "#10B981", "4-10": "#F59E0B", "11-20": "#EF4444"}


def traffic_chart(summary: PortfolioSummary):
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(
        ["Current", "Expected"],
        [round(summary.total_current_traffic), round(summary.total_expected_traffic)],
        color=["#3B82F6", "#10B981"],
    )
    ax.set_ylabel("Monthly Traffic")
    ax.set_title("Traffic Potential")
    return fig


def distribution_chart(summary: PortfolioSummary):
    ranges = [r for r, count in summary.position_distribution.items() if count > 0]
    counts = [summary.position_distribution[r] for r in ranges]

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.pie(
        counts,
        labels=[f"Position {r}" for r in ranges],
        colors=[RANGE_COLORS.get(r, "#6B7280") for r in ranges],
        autopct="%1.0f%%",
    )
    ax.set_title("Position Distribution")
    return fig


def opportunity_chart(summary: PortfolioSummary):
    opportunities = list(reversed(summary.top_opportunities))
    fig, ax = plt.subplots(figsize=(10, 6))
    # Truncated keywords can collide, so bars are placed by index
    positions = list(range(len(opportunities)))
    ax.barh(positions, [round(o.gain) for o in opportunities], color="#10B981")
    ax.set_yticks(positions)
    ax.set_yticklabels([o.keyword for o in opportunities])
    ax.set_xlabel("Expected Gain")
    ax.set_title("Top Opportunities")
    return fig
