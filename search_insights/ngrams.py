"""N-gram engine: tokenizes search terms and sums metrics per n-gram."""

from __future__ import annotations

from typing import List, Sequence

import polars as pl

from search_insights.domain.models import NgramRecord, SearchTermRecord
from search_insights.ratio_metrics import METRIC_COLUMNS, records_to_frame

SUPPORTED_NGRAM_WIDTHS: tuple[int, ...] = (1, 2, 3)
DEFAULT_NGRAM_WIDTH = 2
TOKEN_PATTERN = r"\S+"


class NgramAggregator:
    """Aggregates search-term metrics by contiguous token windows.

    A row contributes to a given n-gram at most once, however many times the
    phrase repeats inside its search term, so ``count`` is a row count and the
    totals are summed once per row.
    """

    TOTAL_COLUMNS: dict[str, str] = {
        "impressions": "total_impressions",
        "clicks": "total_clicks",
        "cost": "total_cost",
        "conversions": "total_conversions",
        "conversion_value": "total_conversion_value",
    }
    RESULT_COLUMNS: List[str] = ["ngram", "count", *TOTAL_COLUMNS.values()]

    @staticmethod
    def _validate_width(width: int) -> None:
        if not isinstance(width, int) or isinstance(width, bool) or width not in SUPPORTED_NGRAM_WIDTHS:
            raise ValueError(f"ngram width must be one of {list(SUPPORTED_NGRAM_WIDTHS)}, got {width!r}")

    @staticmethod
    def _validate_schema(df: pl.DataFrame) -> None:
        missing = sorted(set(["search_term", *METRIC_COLUMNS]).difference(df.columns))
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

    def _empty_result(self) -> pl.DataFrame:
        schema = {"ngram": pl.Utf8, "count": pl.Int64}
        schema.update({column: pl.Float64 for column in self.TOTAL_COLUMNS.values()})
        return pl.DataFrame(schema=schema)

    def tokens_frame(self, df: pl.DataFrame) -> pl.DataFrame:
        """One row per token, in order, tagged with its source row index ``__row``."""
        return (
            df.select(
                pl.int_range(pl.len()).alias("__row"),
                pl.col("search_term")
                .cast(pl.Utf8)
                .str.to_lowercase()
                .str.extract_all(TOKEN_PATTERN)
                .alias("token"),
            )
            .explode("token")
            .filter(pl.col("token").is_not_null() & (pl.col("token") != ""))
        )

    def windows_frame(self, df: pl.DataFrame, width: int) -> pl.DataFrame:
        """Distinct (row, ngram) pairs; windows shorter than ``width`` are dropped."""
        self._validate_width(width)
        tokens = self.tokens_frame(df)
        window_parts = [pl.col("token").shift(-offset).over("__row") for offset in range(width)]
        return (
            tokens.select(
                pl.col("__row"),
                pl.concat_str(window_parts, separator=" ").alias("ngram"),
            )
            .drop_nulls("ngram")
            .unique(subset=["__row", "ngram"], maintain_order=True)
        )

    def aggregate_frame(self, df: pl.DataFrame, width: int) -> pl.DataFrame:
        self._validate_width(width)
        self._validate_schema(df)
        if df.is_empty():
            return self._empty_result()

        metrics = df.select(
            pl.int_range(pl.len()).alias("__row"),
            *[pl.col(column).cast(pl.Float64) for column in METRIC_COLUMNS],
        )
        windows = self.windows_frame(df, width)
        if windows.is_empty():
            return self._empty_result()

        return (
            windows.join(metrics, on="__row", how="left")
            .group_by("ngram")
            .agg(
                [pl.col("__row").n_unique().cast(pl.Int64).alias("count")]
                + [pl.col(source).sum().alias(target) for source, target in self.TOTAL_COLUMNS.items()]
            )
            .select(self.RESULT_COLUMNS)
        )

    def aggregate(self, records: Sequence[SearchTermRecord], width: int) -> List[NgramRecord]:
        self._validate_width(width)
        if not records:
            return []
        result = self.aggregate_frame(records_to_frame(records), width)
        return [NgramRecord.from_row(row) for row in result.iter_rows(named=True)]


def aggregate(records: Sequence[SearchTermRecord], width: int) -> List[NgramRecord]:
    """Return one :class:`NgramRecord` per distinct n-gram of ``width`` tokens.

    Output order is not guaranteed; sort downstream when order matters.
    """
    return NgramAggregator().aggregate(records, width)
