"""Ratio metrics engine: CTR, CPC, CvR, CPA and ROAS per search-term row."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

import polars as pl

from search_insights.domain.models import CalculatedSearchTermRecord, SearchTermRecord

TEXT_COLUMNS: List[str] = ["search_term", "campaign", "ad_group"]
METRIC_COLUMNS: List[str] = ["impressions", "clicks", "cost", "conversions", "conversion_value"]
RECORD_SCHEMA: Dict[str, Any] = {
    **{column: pl.Utf8 for column in TEXT_COLUMNS},
    **{column: pl.Float64 for column in METRIC_COLUMNS},
}


def records_to_frame(records: Sequence[SearchTermRecord]) -> pl.DataFrame:
    """Build a typed frame from records, keeping input order."""
    data: Dict[str, list[Any]] = {column: [] for column in RECORD_SCHEMA}
    for record in records:
        for column in TEXT_COLUMNS:
            data[column].append(str(getattr(record, column)))
        for column in METRIC_COLUMNS:
            data[column].append(float(getattr(record, column)))
    return pl.DataFrame(data, schema=RECORD_SCHEMA)


class RatioMetricsCalculator:
    """Derives ratio metrics for every row of a search-term frame.

    CTR, CPC, CvR and CPA fall back to ``0`` when their denominator is zero.
    ROAS is left unbounded instead: zero cost with positive value yields
    ``inf`` so it stays distinguishable from a true zero return. Whether the
    zero fallback should read as "undefined" instead is still open for
    product review.
    """

    DERIVED_COLUMNS: List[str] = ["ctr", "cpc", "cvr", "cpa", "roas"]
    RESULT_COLUMNS: List[str] = TEXT_COLUMNS + METRIC_COLUMNS + DERIVED_COLUMNS

    @staticmethod
    def _zero_default_ratio_expr(num: pl.Expr, den: pl.Expr) -> pl.Expr:
        return pl.when(den == 0).then(pl.lit(0.0)).otherwise(num / den)

    @staticmethod
    def _roas_expr(value: pl.Expr, cost: pl.Expr) -> pl.Expr:
        return (
            pl.when(cost != 0)
            .then(value / cost)
            .when(value.is_nan())
            .then(value)
            .when(value > 0)
            .then(pl.lit(math.inf))
            .otherwise(pl.lit(0.0))
        )

    def _validate_schema(self, df: pl.DataFrame) -> None:
        missing = sorted(set(TEXT_COLUMNS + METRIC_COLUMNS).difference(df.columns))
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

    def calculate_frame(self, df: pl.DataFrame) -> pl.DataFrame:
        self._validate_schema(df)
        metrics = df.select(TEXT_COLUMNS + METRIC_COLUMNS).with_columns(
            [pl.col(column).cast(pl.Float64) for column in METRIC_COLUMNS]
        )
        return metrics.with_columns(
            [
                self._zero_default_ratio_expr(pl.col("clicks"), pl.col("impressions")).alias("ctr"),
                self._zero_default_ratio_expr(pl.col("cost"), pl.col("clicks")).alias("cpc"),
                self._zero_default_ratio_expr(pl.col("conversions"), pl.col("clicks")).alias("cvr"),
                self._zero_default_ratio_expr(pl.col("cost"), pl.col("conversions")).alias("cpa"),
                self._roas_expr(pl.col("conversion_value"), pl.col("cost")).alias("roas"),
            ]
        ).select(self.RESULT_COLUMNS)

    def calculate(self, records: Sequence[SearchTermRecord]) -> List[CalculatedSearchTermRecord]:
        if not records:
            return []
        result = self.calculate_frame(records_to_frame(records))
        return [CalculatedSearchTermRecord.from_row(row) for row in result.iter_rows(named=True)]


def calculate(records: Sequence[SearchTermRecord]) -> List[CalculatedSearchTermRecord]:
    """Enrich ``records`` with ratio metrics, one output per input in the same order."""
    return RatioMetricsCalculator().calculate(records)
