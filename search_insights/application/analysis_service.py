"""Application service for the search-term and n-gram analysis use case."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from search_insights.application.reporting.selectors import (
    NgramFilters,
    NgramSummary,
    SearchTermFilters,
    distinct_values,
    filter_ngrams,
    filter_search_terms,
    sort_ngrams,
    sort_search_terms,
    summarize_ngrams,
)
from search_insights.domain.metric_ids import NgramMetric, SearchTermMetric
from search_insights.domain.models import CalculatedSearchTermRecord, NgramRecord, SearchTermRecord
from search_insights.ngrams import DEFAULT_NGRAM_WIDTH, NgramAggregator
from search_insights.ratio_metrics import RatioMetricsCalculator


@dataclass(frozen=True)
class AnalysisResult:
    width: int
    search_terms: list[CalculatedSearchTermRecord]
    ngrams: list[NgramRecord]
    ngram_summary: NgramSummary
    campaigns: list[str]
    ad_groups: list[str]


def run_search_term_analysis(
    records: Sequence[SearchTermRecord],
    width: int = DEFAULT_NGRAM_WIDTH,
    term_filters: SearchTermFilters | None = None,
    ngram_filters: NgramFilters | None = None,
    term_sort: SearchTermMetric = SearchTermMetric.COST,
    ngram_sort: NgramMetric = NgramMetric.TOTAL_COST,
) -> AnalysisResult:
    """Enrich terms, aggregate n-grams, then filter and sort both for display."""
    ngrams = NgramAggregator().aggregate(records, width)
    calculated = RatioMetricsCalculator().calculate(records)
    campaigns = distinct_values(calculated, SearchTermMetric.CAMPAIGN)
    ad_groups = distinct_values(calculated, SearchTermMetric.AD_GROUP)

    if term_filters is not None:
        calculated = filter_search_terms(calculated, term_filters)
    if ngram_filters is not None:
        ngrams = filter_ngrams(ngrams, ngram_filters)

    sorted_ngrams = sort_ngrams(ngrams, ngram_sort)
    return AnalysisResult(
        width=width,
        search_terms=sort_search_terms(calculated, term_sort),
        ngrams=sorted_ngrams,
        ngram_summary=summarize_ngrams(sorted_ngrams),
        campaigns=campaigns,
        ad_groups=ad_groups,
    )
