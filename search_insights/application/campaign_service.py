"""Application service for campaign-level views of daily metrics."""

from __future__ import annotations

from typing import Dict, Iterable, List

from search_insights.domain.models import CampaignSummary, DailyMetricRecord


def campaigns_by_cost(daily: Iterable[DailyMetricRecord]) -> List[CampaignSummary]:
    """One entry per campaign id, named after its first row, highest total cost first."""
    names: Dict[str, str] = {}
    totals: Dict[str, float] = {}
    for row in daily:
        if row.campaign_id not in totals:
            names[row.campaign_id] = row.campaign
            totals[row.campaign_id] = row.cost
        else:
            totals[row.campaign_id] += row.cost

    summaries = [
        CampaignSummary(campaign_id=campaign_id, name=names[campaign_id], total_cost=total)
        for campaign_id, total in totals.items()
    ]
    return sorted(summaries, key=lambda item: item.total_cost, reverse=True)


def metrics_by_date(daily: Iterable[DailyMetricRecord], campaign_id: str) -> List[DailyMetricRecord]:
    return sorted(
        (row for row in daily if row.campaign_id == campaign_id),
        key=lambda row: row.date,
    )
