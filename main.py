"""Search term insights entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from search_insights.application.report_service import DEFAULT_TOP_N, run_reporting_pipeline
from search_insights.ngrams import DEFAULT_NGRAM_WIDTH, SUPPORTED_NGRAM_WIDTHS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ratio metrics and n-gram report for a search-term export.")
    parser.add_argument("search_terms", type=Path, help="search-term export (.csv, .json, .xlsx)")
    parser.add_argument("--daily", type=Path, default=None, help="optional daily campaign export")
    parser.add_argument("--width", type=int, choices=SUPPORTED_NGRAM_WIDTHS, default=DEFAULT_NGRAM_WIDTH)
    parser.add_argument("--output-dir", type=Path, default=Path("output"))
    parser.add_argument("--currency", default="$", help="currency symbol used for display columns")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_N, help="rows kept in the JSON summary tables")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    paths = run_reporting_pipeline(
        args.search_terms,
        args.output_dir,
        width=args.width,
        daily_path=args.daily,
        currency=args.currency,
        top=args.top,
    )

    summary = json.loads(paths.summary_json.read_text(encoding="utf-8"))
    ngram_summary = summary["ngram_summary"]
    print(
        "Summary prepared: "
        f"rows={summary['input']['rows_loaded']}, "
        f"parse_errors={len(summary['input']['parse_errors'])}, "
        f"ngrams={ngram_summary['total_ngrams']} (width={summary['ngram_width']})"
    )
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in summary["stage_timings"].items()])
    print(f"Stage Timing: {stage_text}")
    print(f"Saved JSON: {paths.summary_json}")
    if paths.workbook_saved:
        print(f"Saved Excel: {paths.workbook}")
    else:
        print(f"Excel save skipped (file may be open/locked): {paths.workbook_error}")


if __name__ == "__main__":
    main()
