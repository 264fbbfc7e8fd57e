"""JSON and Excel match reports."""
import json

import pytest
from openpyxl import load_workbook

from rostermatch.data.store import MatchStore
from rostermatch.reports import match_report

from conftest import ID_LI, ID_ZHANG


@pytest.fixture
def store(roster_file, disabled_file, poverty_file, tmp_path):
    return MatchStore().load(roster_file, [
        ("持证残疾人", disabled_file),
        ("脱贫户(继续享受政策)", poverty_file),
        ("城镇低保", tmp_path / "missing.xlsx"),
    ])


class TestGenerateJson:

    def test_structure(self, store):
        data = match_report.generate_json(store)
        assert data["statistics"]["total_matches"] == 2
        assert data["statistics"]["failed_categories"] == ["城镇低保"]
        assert len(data["matches"]) == 2
        assert data["failures"][0]["error_type"] == "SourceNotFound"
        assert data["roster"].endswith("roster.xlsx")
        # plain JSON all the way down
        json.dumps(data, ensure_ascii=False)

    def test_filters(self, store):
        data = match_report.generate_json(store, category="持证残疾人")
        assert [m["student"]["name"] for m in data["matches"]] == ["张三"]
        assert data["filters"] == {"category": "持证残疾人", "name": None}

    def test_mask(self, store):
        data = match_report.generate_json(store, name="李", mask=True)
        match = data["matches"][0]
        assert match["student"]["identifier"] == f"{ID_LI[:3]}****{ID_LI[-3:]}"
        assert match["category"]["identifier"] == match["student"]["identifier"]
        assert match["student"]["secondary_id"] == f"G11****{ID_LI[-3:]}"
        assert ID_LI not in json.dumps(data, ensure_ascii=False)

    def test_unmasked(self, store):
        data = match_report.generate_json(store, name="张")
        assert data["matches"][0]["student"]["identifier"] == ID_ZHANG


class TestGenerateExcel:

    def test_sheets(self, store, tmp_path):
        out = match_report.generate_excel(store, tmp_path / "out" / "matches.xlsx")
        assert out.exists()

        wb = load_workbook(out)
        assert wb.sheetnames == ["Matches", "Summary"]

        ws = wb["Matches"]
        assert ws.cell(row=1, column=1).value == "Name"
        assert ws.cell(row=2, column=1).value == "张三"
        assert ws.cell(row=2, column=2).value == ID_ZHANG
        assert ws.max_row == 3

        summary = wb["Summary"]
        values = [c.value for row in summary.iter_rows() for c in row if c.value is not None]
        assert "MATCHES BY CATEGORY" in values
        assert "CATEGORIES NOT READ" in values
        assert "持证残疾人" in values

        failed = next(c for row in summary.iter_rows() for c in row if c.value == "城镇低保")
        assert failed.fill.start_color.rgb.endswith("FFEBEE")

    def test_masked_and_filtered(self, store, tmp_path):
        out = match_report.generate_excel(store, tmp_path / "masked.xlsx", name="张", mask=True)
        ws = load_workbook(out)["Matches"]
        assert ws.max_row == 2
        assert ws.cell(row=2, column=2).value == f"{ID_ZHANG[:3]}****{ID_ZHANG[-3:]}"
        assert ws.cell(row=2, column=3).value == f"G11****{ID_ZHANG[-3:]}"
        values = [str(c.value) for row in ws.iter_rows() for c in row if c.value is not None]
        assert not any(ID_ZHANG in v for v in values)

    def test_no_matches(self, roster_file, tmp_path):
        store = MatchStore().load(roster_file, [])
        out = match_report.generate_excel(store, tmp_path / "empty.xlsx")
        wb = load_workbook(out)
        assert wb["Matches"].max_row == 1
