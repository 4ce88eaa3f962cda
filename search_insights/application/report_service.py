"""Search-term reporting pipeline: ingest, analyze, export."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Sequence

import polars as pl

from search_insights.application.analysis_service import AnalysisResult, run_search_term_analysis
from search_insights.application.campaign_service import campaigns_by_cost
from search_insights.application.reporting.metrics import (
    currency_code,
    format_currency,
    format_number,
    format_percent,
    format_roas,
)
from search_insights.domain.models import CampaignSummary
from search_insights.infrastructure.excel_repository import save_output_workbook
from search_insights.infrastructure.report_exporter import save_summary_json
from search_insights.ingestion import read_daily_metrics, read_search_terms
from search_insights.ngrams import DEFAULT_NGRAM_WIDTH, NgramAggregator
from search_insights.ratio_metrics import RECORD_SCHEMA, RatioMetricsCalculator

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 20
SUMMARY_FILENAME = "summary.json"
WORKBOOK_FILENAME = "search_terms.xlsx"
TERM_SCHEMA: Dict[str, Any] = {
    **RECORD_SCHEMA,
    **{column: pl.Float64 for column in RatioMetricsCalculator.DERIVED_COLUMNS},
}
NGRAM_SCHEMA: Dict[str, Any] = {
    "ngram": pl.Utf8,
    "count": pl.Int64,
    **{column: pl.Float64 for column in NgramAggregator.TOTAL_COLUMNS.values()},
}
CAMPAIGN_SCHEMA: Dict[str, Any] = {"campaign_id": pl.Utf8, "name": pl.Utf8, "total_cost": pl.Float64}


@dataclass(frozen=True)
class ReportPaths:
    summary_json: Path
    workbook: Path
    workbook_saved: bool
    workbook_error: str


def _frame(rows: Sequence[Dict[str, Any]], schema: Dict[str, Any]) -> pl.DataFrame:
    return pl.DataFrame({name: [row[name] for row in rows] for name in schema}, schema=schema)


def _term_view(analysis: AnalysisResult, currency: str, top: int) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in analysis.search_terms[:top]:
        rows.append(
            {
                "search_term": record.search_term,
                "campaign": record.campaign,
                "ad_group": record.ad_group,
                "cost": format_currency(record.cost, currency),
                "clicks": format_number(record.clicks),
                "ctr": format_percent(record.ctr),
                "cpc": format_currency(record.cpc, currency),
                "cvr": format_percent(record.cvr),
                "cpa": format_currency(record.cpa, currency),
                "roas": format_roas(record.roas),
            }
        )
    return rows


def _ngram_view(analysis: AnalysisResult, currency: str, top: int) -> List[Dict[str, Any]]:
    return [
        {
            "ngram": record.ngram,
            "count": format_number(record.count),
            "cost": format_currency(record.total_cost, currency),
            "clicks": format_number(record.total_clicks),
            "impressions": format_number(record.total_impressions),
            "conversions": format_number(record.total_conversions),
            "value": format_currency(record.total_conversion_value, currency),
        }
        for record in analysis.ngrams[:top]
    ]


def _campaign_view(campaigns: Sequence[CampaignSummary], currency: str) -> List[Dict[str, Any]]:
    return [
        {
            "campaign_id": campaign.campaign_id,
            "name": campaign.name,
            "total_cost": campaign.total_cost,
            "total_cost_display": format_currency(campaign.total_cost, currency),
        }
        for campaign in campaigns
    ]


def run_reporting_pipeline(
    search_terms_path: str | Path,
    output_dir: str | Path,
    width: int = DEFAULT_NGRAM_WIDTH,
    daily_path: str | Path | None = None,
    currency: str = "$",
    top: int = DEFAULT_TOP_N,
) -> ReportPaths:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    output_root = Path(output_dir)
    output_json_path = output_root / SUMMARY_FILENAME
    output_excel_path = output_root / WORKBOOK_FILENAME

    loaded = read_search_terms(search_terms_path)
    campaigns: list[CampaignSummary] = []
    daily_errors: list[Any] = []
    if daily_path is not None:
        daily = read_daily_metrics(daily_path)
        campaigns = campaigns_by_cost(daily.records)
        daily_errors = daily.errors
    _mark("load_input")

    analysis = run_search_term_analysis(loaded.records, width=width)
    _mark("run_search_term_analysis")

    summary = {
        "input": {
            "search_terms_path": str(search_terms_path),
            "rows_loaded": len(loaded.records),
            "parse_errors": [asdict(error) for error in loaded.errors],
            "daily_path": None if daily_path is None else str(daily_path),
            "daily_parse_errors": [asdict(error) for error in daily_errors],
        },
        "currency": currency_code(currency),
        "ngram_width": analysis.width,
        "ngram_summary": asdict(analysis.ngram_summary),
        "campaign_labels": analysis.campaigns,
        "ad_group_labels": analysis.ad_groups,
        "top_search_terms": _term_view(analysis, currency, top),
        "top_ngrams": _ngram_view(analysis, currency, top),
        "campaigns_by_cost": _campaign_view(campaigns, currency),
    }
    _mark("build_summary")

    sheets = {
        "terms": _frame([record.to_row() for record in analysis.search_terms], TERM_SCHEMA),
        "ngrams": _frame([record.to_row() for record in analysis.ngrams], NGRAM_SCHEMA),
    }
    if daily_path is not None:
        sheets["campaigns"] = _frame([asdict(campaign) for campaign in campaigns], CAMPAIGN_SCHEMA)
    excel_saved, excel_error_message = save_output_workbook(output_excel_path, sheets)
    if not excel_saved:
        logger.warning("Excel save skipped (file may be open/locked): %s", excel_error_message)
    _mark("save_excel")

    summary["stage_timings"] = {name: round(seconds, 6) for name, seconds in stage_timings}
    summary["total_elapsed"] = round(perf_counter() - pipeline_start, 6)
    save_summary_json(output_json_path, summary)

    return ReportPaths(
        summary_json=output_json_path,
        workbook=output_excel_path,
        workbook_saved=excel_saved,
        workbook_error=excel_error_message,
    )
