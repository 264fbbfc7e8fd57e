"""Spreadsheet access: opening, sheet lookup, row iteration."""
import pytest

from rostermatch.data.normalize import cell_text
from rostermatch.data.reader import cell, open_workbook, rows, sheet_at
from rostermatch.errors import SheetMissing, SourceNotFound, UnreadableContainer

from conftest import ID_ZHANG


class TestOpenWorkbook:

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFound) as excinfo:
            open_workbook(tmp_path / "nope.xlsx")
        assert excinfo.value.http_status == 404

    def test_missing_file_checked_before_extension(self, tmp_path):
        with pytest.raises(SourceNotFound):
            open_workbook(tmp_path / "nope.csv")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "list.csv"
        path.write_text("姓名,身份证号\n")
        with pytest.raises(UnreadableContainer) as excinfo:
            open_workbook(path)
        assert "unsupported file type" in excinfo.value.message

    def test_corrupt_container(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"this is not a zip archive")
        with pytest.raises(UnreadableContainer) as excinfo:
            open_workbook(path)
        assert excinfo.value.http_status == 422
        assert excinfo.value.__cause__ is not None

    def test_sheet_names(self, make_xlsx):
        path = make_xlsx("two.xlsx", [["a", "b"]], [["c", "d"]])
        with open_workbook(path) as wb:
            assert wb.sheet_names == ["Sheet1", "Sheet2"]
            assert wb.sheet_count == 2


class TestSheetAt:

    def test_index_out_of_range(self, make_xlsx):
        path = make_xlsx("one.xlsx", [["a", "b"]])
        with open_workbook(path) as wb:
            with pytest.raises(SheetMissing) as excinfo:
                sheet_at(wb, 2)
        assert "Cannot find worksheet at index 2" in excinfo.value.message
        assert excinfo.value.context["sheet_count"] == 1

    def test_rows_keep_types_and_blank_as_none(self, make_xlsx):
        path = make_xlsx("typed.xlsx", [
            ["姓名", "身份证号", "人数"],
            ["张三", "11010519491231002X", 3],
            ["李四", None, 1],
        ])
        with open_workbook(path) as wb:
            sheet = sheet_at(wb, 0)
            data = list(rows(sheet))
        assert sheet.row_count == 3
        assert data[1] == ("张三", "11010519491231002X", 3)
        assert data[2][1] is None

    def test_empty_sheet(self, make_xlsx):
        path = make_xlsx("empty.xlsx", [])
        with open_workbook(path) as wb:
            assert list(rows(sheet_at(wb, 0))) == []

    def test_leading_blank_rows_dropped(self, make_xlsx):
        path = make_xlsx("offset.xlsx", [
            [],
            [None, "  "],
            ["姓名", "身份证号"],
            [None, None],
            ["张三", ID_ZHANG],
        ])
        with open_workbook(path) as wb:
            sheet = sheet_at(wb, 0)
            data = list(rows(sheet))
        assert sheet.first_row == 2
        assert data[0] == ("姓名", "身份证号")
        # blank rows inside the data are kept
        assert data[1] == (None, None)
        assert data[2] == ("张三", ID_ZHANG)

    def test_blank_sheet_has_no_rows(self, make_xlsx):
        path = make_xlsx("blank.xlsx", [[None, None], ["", " "]])
        with open_workbook(path) as wb:
            assert list(rows(sheet_at(wb, 0))) == []


class TestCell:

    def test_short_row_gives_none(self):
        assert cell(("a", "b"), 5) is None

    def test_no_column(self):
        assert cell(("a",), None) is None

    def test_in_range(self):
        assert cell(("a", "b"), 1) == "b"


class TestLegacyXls:

    def test_sheet_names(self, rural_xls):
        with open_workbook(rural_xls) as wb:
            assert wb.sheet_names == ["Summary", "Households"]

    def test_wide_sheet_rows(self, rural_xls):
        with open_workbook(rural_xls) as wb:
            sheet = sheet_at(wb, 1)
            data = list(rows(sheet))

        assert sheet.name == "Households"
        assert sheet.first_row == 0
        assert len(data) == 4
        assert data[0][0] == "农村低保家庭花名册"
        assert data[0][1] is None
        assert data[1][6] == "身份证号"

        household = data[2]
        assert household[0] == "一户"
        assert cell_text(household[1]) == "3"
        assert household[6] == ID_ZHANG.lower()
        assert household[15] is None
        assert cell_text(household[29]) == "320102201005050011"
        assert cell(household, 30) is None

    def test_sheet_index_out_of_range(self, rural_xls):
        with open_workbook(rural_xls) as wb:
            with pytest.raises(SheetMissing):
                sheet_at(wb, 2)
