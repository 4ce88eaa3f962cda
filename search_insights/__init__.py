"""Search term insights package."""

from .application import AnalysisResult, run_reporting_pipeline, run_search_term_analysis
from .ingestion import read_daily_metrics, read_search_terms
from .ngrams import NgramAggregator, aggregate
from .ratio_metrics import RatioMetricsCalculator, calculate

__all__ = [
    "RatioMetricsCalculator",
    "NgramAggregator",
    "calculate",
    "aggregate",
    "read_search_terms",
    "read_daily_metrics",
    "AnalysisResult",
    "run_search_term_analysis",
    "run_reporting_pipeline",
]
