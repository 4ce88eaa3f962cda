"""Metric identifiers and their accessors for filtering and sorting."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Union

from search_insights.domain.models import CalculatedSearchTermRecord, NgramRecord

MetricValue = Union[str, float]


class SearchTermMetric(str, Enum):
    SEARCH_TERM = "search_term"
    CAMPAIGN = "campaign"
    AD_GROUP = "ad_group"
    IMPRESSIONS = "impressions"
    CLICKS = "clicks"
    COST = "cost"
    CONVERSIONS = "conversions"
    CONVERSION_VALUE = "conversion_value"
    CTR = "ctr"
    CPC = "cpc"
    CVR = "cvr"
    CPA = "cpa"
    ROAS = "roas"

    @property
    def is_text(self) -> bool:
        return self in TEXT_METRICS


class NgramMetric(str, Enum):
    NGRAM = "ngram"
    COUNT = "count"
    TOTAL_IMPRESSIONS = "total_impressions"
    TOTAL_CLICKS = "total_clicks"
    TOTAL_COST = "total_cost"
    TOTAL_CONVERSIONS = "total_conversions"
    TOTAL_CONVERSION_VALUE = "total_conversion_value"

    @property
    def is_text(self) -> bool:
        return self in TEXT_METRICS


TEXT_METRICS: frozenset[Enum] = frozenset(
    {
        SearchTermMetric.SEARCH_TERM,
        SearchTermMetric.CAMPAIGN,
        SearchTermMetric.AD_GROUP,
        NgramMetric.NGRAM,
    }
)

SEARCH_TERM_ACCESSORS: Dict[SearchTermMetric, Callable[[CalculatedSearchTermRecord], MetricValue]] = {
    SearchTermMetric.SEARCH_TERM: lambda record: record.search_term,
    SearchTermMetric.CAMPAIGN: lambda record: record.campaign,
    SearchTermMetric.AD_GROUP: lambda record: record.ad_group,
    SearchTermMetric.IMPRESSIONS: lambda record: record.impressions,
    SearchTermMetric.CLICKS: lambda record: record.clicks,
    SearchTermMetric.COST: lambda record: record.cost,
    SearchTermMetric.CONVERSIONS: lambda record: record.conversions,
    SearchTermMetric.CONVERSION_VALUE: lambda record: record.conversion_value,
    SearchTermMetric.CTR: lambda record: record.ctr,
    SearchTermMetric.CPC: lambda record: record.cpc,
    SearchTermMetric.CVR: lambda record: record.cvr,
    SearchTermMetric.CPA: lambda record: record.cpa,
    SearchTermMetric.ROAS: lambda record: record.roas,
}

NGRAM_ACCESSORS: Dict[NgramMetric, Callable[[NgramRecord], MetricValue]] = {
    NgramMetric.NGRAM: lambda record: record.ngram,
    NgramMetric.COUNT: lambda record: record.count,
    NgramMetric.TOTAL_IMPRESSIONS: lambda record: record.total_impressions,
    NgramMetric.TOTAL_CLICKS: lambda record: record.total_clicks,
    NgramMetric.TOTAL_COST: lambda record: record.total_cost,
    NgramMetric.TOTAL_CONVERSIONS: lambda record: record.total_conversions,
    NgramMetric.TOTAL_CONVERSION_VALUE: lambda record: record.total_conversion_value,
}
