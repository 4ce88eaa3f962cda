"""Domain layer package."""

from .metric_ids import NGRAM_ACCESSORS, SEARCH_TERM_ACCESSORS, NgramMetric, SearchTermMetric
from .models import (
    CalculatedSearchTermRecord,
    CampaignSummary,
    DailyMetricRecord,
    NgramRecord,
    SearchTermRecord,
)

__all__ = [
    "SearchTermRecord",
    "CalculatedSearchTermRecord",
    "NgramRecord",
    "DailyMetricRecord",
    "CampaignSummary",
    "SearchTermMetric",
    "NgramMetric",
    "SEARCH_TERM_ACCESSORS",
    "NGRAM_ACCESSORS",
]
