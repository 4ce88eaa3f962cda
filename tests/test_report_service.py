import json

from openpyxl import load_workbook

from search_insights.application.report_service import run_reporting_pipeline


def test_pipeline_writes_summary_and_workbook(search_terms_csv, tmp_path):
    daily_path = tmp_path / "daily.csv"
    daily_path.write_text(
        "campaign,campaignId,clicks,value,conv,cost,impr,date\n"
        "Brand,1,5,20,1,10,100,2024-01-01\n"
        "Generic,2,3,15,1,30,60,2024-01-01\n",
        encoding="utf-8",
    )
    output_dir = tmp_path / "output"

    paths = run_reporting_pipeline(search_terms_csv, output_dir, width=1, daily_path=daily_path, currency="€")

    assert paths.workbook_saved
    summary = json.loads(paths.summary_json.read_text(encoding="utf-8"))
    assert summary["input"]["rows_loaded"] == 3
    assert summary["input"]["parse_errors"] == []
    assert summary["ngram_width"] == 1
    assert summary["currency"] == "EUR"
    assert summary["ngram_summary"]["total_ngrams"] == 5
    assert [row["ngram"] for row in summary["top_ngrams"][:2]] == ["buy", "shoes"]
    shoes = next(row for row in summary["top_ngrams"] if row["ngram"] == "shoes")
    assert shoes == {
        "ngram": "shoes",
        "count": "3",
        "cost": "€16.00",
        "clicks": "10",
        "impressions": "190",
        "conversions": "2",
        "value": "€35.00",
    }
    zero_cost_term = next(row for row in summary["top_search_terms"] if row["search_term"] == "red shoes sale")
    assert zero_cost_term["roas"] == "-"
    assert [row["campaign_id"] for row in summary["campaigns_by_cost"]] == ["2", "1"]
    assert set(summary["stage_timings"]) == {"load_input", "run_search_term_analysis", "build_summary", "save_excel"}

    workbook = load_workbook(paths.workbook, read_only=True)
    assert workbook.sheetnames == ["terms", "ngrams", "campaigns"]
    terms_rows = list(workbook["terms"].iter_rows(values_only=True))
    workbook.close()
    assert terms_rows[0][0] == "search_term"
    assert len(terms_rows) == 4


def test_pipeline_without_daily_data(search_terms_csv, tmp_path):
    paths = run_reporting_pipeline(search_terms_csv, tmp_path / "out", width=3, top=1)

    summary = json.loads(paths.summary_json.read_text(encoding="utf-8"))
    assert summary["input"]["daily_path"] is None
    assert summary["campaigns_by_cost"] == []
    assert len(summary["top_ngrams"]) == 1
    assert summary["ngram_summary"]["total_ngrams"] == 3

    workbook = load_workbook(paths.workbook, read_only=True)
    assert workbook.sheetnames == ["terms", "ngrams"]
    workbook.close()
