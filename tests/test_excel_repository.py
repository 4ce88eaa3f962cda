import math

import polars as pl
import xlsxwriter
from openpyxl import load_workbook

from search_insights.infrastructure import excel_repository
from search_insights.infrastructure.excel_repository import save_output_workbook, write_output_excel


def _sheets():
    return {"terms": pl.DataFrame({"search_term": ["shoes", "boots"], "roas": [2.5, math.inf]})}


def test_write_output_excel_blanks_non_finite_cells(tmp_path):
    path = tmp_path / "out.xlsx"
    write_output_excel(path, _sheets())

    rows = list(load_workbook(path)["terms"].iter_rows(values_only=True))
    assert rows[0] == ("search_term", "roas")
    assert rows[1] == ("shoes", 2.5)
    assert rows[2] == ("boots", None)


def test_xlsxwriter_failure_falls_back_to_openpyxl(tmp_path, monkeypatch):
    def locked(*args, **kwargs):
        raise PermissionError("locked")

    monkeypatch.setattr(xlsxwriter, "Workbook", locked)
    path = tmp_path / "out.xlsx"

    assert save_output_workbook(path, _sheets()) == (True, "")
    assert load_workbook(path).sheetnames == ["terms"]


def test_locked_workbook_is_reported_not_raised(tmp_path, monkeypatch):
    def locked(path, sheets):
        raise PermissionError("file is open elsewhere")

    monkeypatch.setattr(excel_repository, "_write_with_polars", lambda path, sheets: False)
    monkeypatch.setattr(excel_repository, "_write_with_openpyxl", locked)

    saved, message = save_output_workbook(tmp_path / "out.xlsx", _sheets())

    assert not saved
    assert "open elsewhere" in message
