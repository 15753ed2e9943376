"""
Pytest configuration and shared fixtures.
"""

import pytest

from keyword_traffic.config import AnalysisConfig
from keyword_traffic.ctr import BucketCtrTable
from keyword_traffic.models import KeywordRecord


@pytest.fixture
def table():
    """Default bucket CTR table."""
    return BucketCtrTable()


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def shoes():
    """Keyword ranking 5th with 1,000 monthly searches."""
    return KeywordRecord(keyword="shoes", position=5, search_volume=1000)


@pytest.fixture
def portfolio():
    """A mix of keywords across every bucket and reporting range."""
    return [
        KeywordRecord(keyword="running shoes", position=2, search_volume=5000),
        KeywordRecord(keyword="trail running shoes for wide feet", position=8, search_volume=2400),
        KeywordRecord(keyword="shoes", position=5, search_volume=1000),
        KeywordRecord(keyword="best sneakers", position=14, search_volume=3200, observed_traffic=12.0),
        KeywordRecord(keyword="sneaker cleaner", position=35, search_volume=800),
        KeywordRecord(keyword="shoe stretcher", position=48, search_volume=150),
        KeywordRecord(keyword="vintage boots", position=70, search_volume=600),
        KeywordRecord(keyword="boot laces", position=19, search_volume=5),
    ]
