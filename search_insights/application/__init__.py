"""Application layer package."""

from .analysis_service import AnalysisResult, run_search_term_analysis
from .campaign_service import campaigns_by_cost, metrics_by_date
from .report_service import ReportPaths, run_reporting_pipeline

__all__ = [
    "AnalysisResult",
    "run_search_term_analysis",
    "campaigns_by_cost",
    "metrics_by_date",
    "ReportPaths",
    "run_reporting_pipeline",
]
