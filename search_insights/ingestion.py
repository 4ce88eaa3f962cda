"""Search-term and daily export ingestion with Polars-first and openpyxl fallback."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Sequence, TypeVar

import polars as pl

from search_insights.domain.models import DailyMetricRecord, SearchTermRecord

logger = logging.getLogger(__name__)

SEARCH_TERMS_TAB = "searchTerms"
DAILY_TAB = "daily"
SEARCH_TERM_COLUMN_MAP: dict[str, str] = {
    "search_term": "search_term",
    "campaign": "campaign",
    "ad_group": "ad_group",
    "impr": "impressions",
    "clicks": "clicks",
    "cost": "cost",
    "conv": "conversions",
    "value": "conversion_value",
}
DAILY_COLUMN_MAP: dict[str, str] = {
    "campaign": "campaign",
    "campaignId": "campaign_id",
    "date": "date",
    "impr": "impressions",
    "clicks": "clicks",
    "cost": "cost",
    "conv": "conversions",
    "value": "conversion_value",
}
METRICS: list[str] = ["impressions", "clicks", "cost", "conversions", "conversion_value"]
EXCEL_SUFFIXES: tuple[str, ...] = (".xlsx", ".xlsm")
SUPPORTED_SUFFIXES: tuple[str, ...] = (".csv", ".json", *EXCEL_SUFFIXES)


def _parse_error_threshold() -> float:
    raw = os.getenv("SEARCH_INSIGHTS_PARSE_ERROR_THRESHOLD", "0.01")
    try:
        threshold = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid SEARCH_INSIGHTS_PARSE_ERROR_THRESHOLD: {raw}") from exc
    if threshold < 0 or threshold > 1:
        raise ValueError(f"SEARCH_INSIGHTS_PARSE_ERROR_THRESHOLD must be in [0, 1], got {threshold}")
    return threshold


METRIC_PARSE_ERROR_THRESHOLD = _parse_error_threshold()

T = TypeVar("T")


@dataclass(frozen=True)
class RecordParseError:
    """A source cell that held text but no parseable number."""

    row_index: int
    column: str
    raw_value: str


@dataclass(frozen=True)
class IngestionResult(Generic[T]):
    records: List[T]
    errors: List[RecordParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def _import_openpyxl() -> Any:
    try:
        from openpyxl import load_workbook
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("openpyxl is required for Excel fallback I/O.") from exc
    return load_workbook


def _normalize_headers(raw_headers: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for idx, value in enumerate(raw_headers):
        base = str(value).strip() if value not in (None, "") else f"column_{idx + 1}"
        count = seen.get(base, 0)
        name = base if count == 0 else f"{base}_{count + 1}"
        seen[base] = count + 1
        headers.append(name)
    return headers


def _text_frame(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> pl.DataFrame:
    data: Dict[str, list[str | None]] = {name: [] for name in columns}
    for values in rows:
        for idx, name in enumerate(columns):
            value = values[idx] if idx < len(values) else None
            data[name].append(None if value is None else str(value))
    return pl.DataFrame(data, schema={name: pl.Utf8 for name in columns})


def _read_json(path: Path) -> pl.DataFrame:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of objects in {path}")

    columns: list[str] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError(f"Expected a JSON array of objects in {path}")
        for key in item:
            if key not in columns:
                columns.append(key)
    rows = [[item.get(name) for name in columns] for item in payload]
    return _text_frame(columns, rows)


def _read_excel_with_polars(path: Path, sheet_name: str) -> pl.DataFrame:
    try:
        return pl.read_excel(path, sheet_name=sheet_name)
    except Exception:
        return pl.read_excel(path)


def _read_excel_with_openpyxl(path: Path, sheet_name: str) -> pl.DataFrame:
    load_workbook = _import_openpyxl()
    workbook = load_workbook(path, read_only=True, data_only=True)
    target = sheet_name if sheet_name in workbook.sheetnames else workbook.sheetnames[0]

    row_iter = workbook[target].iter_rows(values_only=True)
    header_row = next(row_iter, None)
    if header_row is None:
        workbook.close()
        return pl.DataFrame()

    headers = _normalize_headers(header_row)
    rows = [values for values in row_iter if values is not None and any(value is not None for value in values)]
    workbook.close()
    return _text_frame(headers, rows)


def read_raw_frame(path: str | Path, sheet_name: str) -> pl.DataFrame:
    """Read a CSV, JSON or Excel export into an all-text frame."""
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Input file not found: {source_path}")

    suffix = source_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported input format {suffix!r}; expected one of {list(SUPPORTED_SUFFIXES)}")

    if suffix == ".csv":
        return pl.read_csv(source_path, infer_schema=False)
    if suffix == ".json":
        return _read_json(source_path)

    try:
        frame = _read_excel_with_polars(source_path, sheet_name)
    except Exception:
        return _read_excel_with_openpyxl(source_path, sheet_name)
    return frame.with_columns(pl.all().cast(pl.Utf8, strict=False))


def _metric_text_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).cast(pl.Utf8, strict=False).str.strip_chars()


def _metric_parsed_expr(column_name: str) -> pl.Expr:
    return _metric_text_expr(column_name).str.replace_all(",", "").cast(pl.Float64, strict=False)


def _metric_parse_error_expr(column_name: str) -> pl.Expr:
    text_expr = _metric_text_expr(column_name)
    parsed_expr = _metric_parsed_expr(column_name)
    return (
        (text_expr.is_not_null() & (text_expr != "") & parsed_expr.is_null())
        .fill_null(False)
        .alias(f"__parse_error_{column_name}")
    )


def _metric_expr(column_name: str) -> pl.Expr:
    return _metric_parsed_expr(column_name).fill_null(0.0).alias(column_name)


def _text_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).cast(pl.Utf8, strict=False).fill_null("").alias(column_name)


def _validate_metric_parse_errors(
    checks_df: pl.DataFrame,
    source_names: Dict[str, str],
    context: str,
    threshold: float,
) -> None:
    if checks_df.is_empty() or threshold <= 0:
        return

    row_count = int(checks_df.height)
    failures: list[str] = []
    for metric in METRICS:
        count_value = checks_df.select(pl.col(f"__parse_error_{metric}").sum()).to_series(0)[0]
        parse_error_count = int(count_value or 0)
        parse_error_ratio = parse_error_count / row_count
        if parse_error_ratio > threshold:
            failures.append(f"{source_names[metric]}={parse_error_ratio:.2%} ({parse_error_count}/{row_count})")

    if failures:
        joined = ", ".join(failures)
        raise ValueError(
            f"Data quality check failed in {context}: metric parse error ratio exceeds {threshold:.2%} ({joined})"
        )


def parse_frame(
    raw_df: pl.DataFrame,
    column_map: Dict[str, str],
    build: Callable[[Dict[str, Any]], T],
    context: str,
    threshold: float | None = None,
) -> IngestionResult[T]:
    """Coerce a raw export frame into typed records.

    Blank metric cells become ``0.0`` and missing text becomes ``""``. Metric
    cells with unparseable text exclude their row and are reported as
    :class:`RecordParseError`.
    """
    missing = sorted(set(column_map).difference(raw_df.columns))
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    if threshold is None:
        threshold = METRIC_PARSE_ERROR_THRESHOLD
    source_names = {target: source for source, target in column_map.items()}
    text_columns = [target for target in column_map.values() if target not in METRICS]

    selected = raw_df.select(
        [pl.int_range(pl.len()).alias("__row")]
        + [pl.col(source).cast(pl.Utf8, strict=False).alias(target) for source, target in column_map.items()]
    )
    error_columns = [f"__parse_error_{metric}" for metric in METRICS]
    checked = selected.with_columns([_metric_parse_error_expr(metric) for metric in METRICS])
    _validate_metric_parse_errors(checked, source_names, context=context, threshold=threshold)

    errors: list[RecordParseError] = []
    has_error = pl.any_horizontal([pl.col(name) for name in error_columns])
    for row in checked.filter(has_error).iter_rows(named=True):
        for metric in METRICS:
            if row[f"__parse_error_{metric}"]:
                errors.append(
                    RecordParseError(
                        row_index=int(row["__row"]),
                        column=source_names[metric],
                        raw_value=str(row[metric]),
                    )
                )
    if errors:
        logger.warning("%s: skipped %d cell(s) with unparseable metrics", context, len(errors))

    parsed = (
        checked.filter(~has_error)
        .with_columns([_text_expr(column) for column in text_columns] + [_metric_expr(metric) for metric in METRICS])
        .drop(["__row", *error_columns])
    )
    records = [build(row) for row in parsed.iter_rows(named=True)]
    return IngestionResult(records=records, errors=errors)


def read_search_terms(path: str | Path, threshold: float | None = None) -> IngestionResult[SearchTermRecord]:
    raw_df = read_raw_frame(path, sheet_name=SEARCH_TERMS_TAB)
    return parse_frame(
        raw_df,
        SEARCH_TERM_COLUMN_MAP,
        build=SearchTermRecord.from_row,
        context=SEARCH_TERMS_TAB,
        threshold=threshold,
    )


def read_daily_metrics(path: str | Path, threshold: float | None = None) -> IngestionResult[DailyMetricRecord]:
    raw_df = read_raw_frame(path, sheet_name=DAILY_TAB)
    return parse_frame(
        raw_df,
        DAILY_COLUMN_MAP,
        build=DailyMetricRecord.from_row,
        context=DAILY_TAB,
        threshold=threshold,
    )
