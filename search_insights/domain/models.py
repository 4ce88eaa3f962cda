"""Domain records for search-term performance analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping


def _field_names(cls: type) -> list[str]:
    return [item.name for item in fields(cls)]


@dataclass(frozen=True)
class SearchTermRecord:
    """One search-term row as exported by the ads platform."""

    search_term: str
    campaign: str
    ad_group: str
    impressions: float
    clicks: float
    cost: float
    conversions: float
    conversion_value: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SearchTermRecord":
        return cls(**{name: row[name] for name in _field_names(cls)})


@dataclass(frozen=True)
class CalculatedSearchTermRecord:
    search_term: str
    campaign: str
    ad_group: str
    impressions: float
    clicks: float
    cost: float
    conversions: float
    conversion_value: float
    ctr: float
    cpc: float
    cvr: float
    cpa: float
    roas: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CalculatedSearchTermRecord":
        return cls(**{name: row[name] for name in _field_names(cls)})

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NgramRecord:
    """Metrics summed over every search term containing ``ngram``.

    ``count`` is the number of distinct source rows, not the number of
    occurrences inside those rows.
    """

    ngram: str
    count: int
    total_impressions: float
    total_clicks: float
    total_cost: float
    total_conversions: float
    total_conversion_value: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NgramRecord":
        values = {name: row[name] for name in _field_names(cls)}
        values["count"] = int(values["count"])
        return cls(**values)

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailyMetricRecord:
    campaign: str
    campaign_id: str
    date: str
    impressions: float
    clicks: float
    cost: float
    conversions: float
    conversion_value: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DailyMetricRecord":
        return cls(**{name: row[name] for name in _field_names(cls)})


@dataclass(frozen=True)
class CampaignSummary:
    campaign_id: str
    name: str
    total_cost: float
