"""Filtering, sorting and summary helpers over engine outputs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from search_insights.domain.metric_ids import (
    NGRAM_ACCESSORS,
    SEARCH_TERM_ACCESSORS,
    MetricValue,
    NgramMetric,
    SearchTermMetric,
)
from search_insights.domain.models import CalculatedSearchTermRecord, NgramRecord

R = TypeVar("R")


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive numeric bounds; ``None`` leaves a side open."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def active_count(self) -> int:
        return int(self.minimum is not None) + int(self.maximum is not None)

    def contains(self, value: float) -> bool:
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class SearchTermFilters:
    campaign: Optional[str] = None
    ad_group: Optional[str] = None
    cost: RangeFilter = field(default_factory=RangeFilter)
    clicks: RangeFilter = field(default_factory=RangeFilter)
    conversions: RangeFilter = field(default_factory=RangeFilter)

    @property
    def active_count(self) -> int:
        labels = int(self.campaign is not None) + int(self.ad_group is not None)
        return labels + self.cost.active_count + self.clicks.active_count + self.conversions.active_count

    def matches(self, record: CalculatedSearchTermRecord) -> bool:
        if self.campaign is not None and record.campaign != self.campaign:
            return False
        if self.ad_group is not None and record.ad_group != self.ad_group:
            return False
        return (
            self.cost.contains(record.cost)
            and self.clicks.contains(record.clicks)
            and self.conversions.contains(record.conversions)
        )


@dataclass(frozen=True)
class NgramFilters:
    cost: RangeFilter = field(default_factory=RangeFilter)
    clicks: RangeFilter = field(default_factory=RangeFilter)
    conversions: RangeFilter = field(default_factory=RangeFilter)

    @property
    def active_count(self) -> int:
        return self.cost.active_count + self.clicks.active_count + self.conversions.active_count

    def matches(self, record: NgramRecord) -> bool:
        return (
            self.cost.contains(record.total_cost)
            and self.clicks.contains(record.total_clicks)
            and self.conversions.contains(record.total_conversions)
        )


@dataclass(frozen=True)
class NgramSummary:
    total_ngrams: int
    total_cost: float
    total_clicks: float
    total_conversions: float


def filter_search_terms(
    records: Iterable[CalculatedSearchTermRecord],
    filters: SearchTermFilters,
) -> List[CalculatedSearchTermRecord]:
    return [record for record in records if filters.matches(record)]


def filter_ngrams(records: Iterable[NgramRecord], filters: NgramFilters) -> List[NgramRecord]:
    return [record for record in records if filters.matches(record)]


def _is_nan(value: MetricValue) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _sort_by(
    records: Sequence[R],
    accessor: Callable[[R], MetricValue],
    descending: bool,
) -> List[R]:
    comparable = [record for record in records if not _is_nan(accessor(record))]
    undefined = [record for record in records if _is_nan(accessor(record))]
    # sorted() keeps ties in input order even with reverse=True.
    ordered = sorted(comparable, key=accessor, reverse=descending)  # type: ignore[arg-type]
    return ordered + undefined


def sort_search_terms(
    records: Sequence[CalculatedSearchTermRecord],
    metric: SearchTermMetric,
    descending: Optional[bool] = None,
) -> List[CalculatedSearchTermRecord]:
    """Text metrics default to ascending, numeric ones to descending; NaN sorts last."""
    if descending is None:
        descending = not metric.is_text
    return _sort_by(records, SEARCH_TERM_ACCESSORS[metric], descending)


def sort_ngrams(
    records: Sequence[NgramRecord],
    metric: NgramMetric = NgramMetric.TOTAL_COST,
    descending: Optional[bool] = None,
) -> List[NgramRecord]:
    """Like :func:`sort_search_terms`; ties fall back to n-gram text ascending."""
    if descending is None:
        descending = not metric.is_text
    by_text = sorted(records, key=lambda record: record.ngram)
    return _sort_by(by_text, NGRAM_ACCESSORS[metric], descending)


def distinct_values(records: Iterable[CalculatedSearchTermRecord], metric: SearchTermMetric) -> List[str]:
    if not metric.is_text:
        raise ValueError(f"distinct_values expects a text metric, got {metric.value}")
    accessor = SEARCH_TERM_ACCESSORS[metric]
    return sorted({str(accessor(record)) for record in records})


def summarize_ngrams(records: Sequence[NgramRecord]) -> NgramSummary:
    return NgramSummary(
        total_ngrams=len(records),
        total_cost=sum(record.total_cost for record in records),
        total_clicks=sum(record.total_clicks for record in records),
        total_conversions=sum(record.total_conversions for record in records),
    )
