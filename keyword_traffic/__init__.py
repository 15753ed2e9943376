"""
Keyword traffic opportunity analyzer.

Estimates organic traffic from keyword ranking exports and projects the
gain from ranking improvements, per target bucket and as a probability
weighted forecast.
"""

__version__ = "1.0.0"

from .buckets import BUCKET_LABELS, TARGET_BUCKETS, Bucket, bucket_of, reporting_range
from .cohorts import (
    Cohort,
    CohortAssignment,
    CohortRule,
    assign_cohort,
    match_rule,
    validate_rules,
)
from .config import AnalysisConfig
from .ctr import DEFAULT_BUCKET_CTR, BucketCtrTable, PositionCtrTable, ctr_of
from .errors import EmptyExportError, InputParseError, KeywordTrafficError
from .forecast import cohort_expected_traffic, expected_ctr, expected_traffic
from .ingest import load_keywords
from .models import KeywordRecord, ProjectedKeyword, TransitionProbabilities
from .pipeline import project_keywords
from .projection import estimate_current_traffic, project_outcomes
from .summary import PortfolioSummary, summarize

__all__ = [
    'AnalysisConfig',
    'BUCKET_LABELS',
    'Bucket',
    'BucketCtrTable',
    'Cohort',
    'CohortAssignment',
    'CohortRule',
    'DEFAULT_BUCKET_CTR',
    'EmptyExportError',
    'InputParseError',
    'KeywordRecord',
    'KeywordTrafficError',
    'PortfolioSummary',
    'PositionCtrTable',
    'ProjectedKeyword',
    'TARGET_BUCKETS',
    'TransitionProbabilities',
    'assign_cohort',
    'bucket_of',
    'cohort_expected_traffic',
    'ctr_of',
    'estimate_current_traffic',
    'expected_ctr',
    'expected_traffic',
    'load_keywords',
    'match_rule',
    'project_keywords',
    'project_outcomes',
    'reporting_range',
    'summarize',
    'validate_rules',
]
