"""
Shared fixtures: small real .xlsx workbooks built with openpyxl in tmp_path.
"""
import logging
from pathlib import Path

import pytest
from openpyxl import Workbook

from rostermatch.api.dependencies import set_store

# Valid-looking 18-character identity numbers
ID_ZHANG = "11010519491231002X"
ID_LI = "110105200001011234"
ID_WANG = "320102201005050011"
ID_ZHAO = "440106201203034567"
ID_OUTSIDER = "510104199909099999"

DATA_DIR = Path(__file__).parent / "data"

ROSTER_HEADER = ["姓名", "身份证号", "性别", "民族", "学校", "", "", "", "年级", "班级", "学籍号"]


def roster_row(name, identifier, school="第一中学", grade="一年级", cohort="1班", student_no=None):
    return [name, identifier, "", "", school, "", "", "", grade, cohort, student_no or f"G{identifier}"]


def write_workbook(path: Path, *sheets) -> Path:
    """Write one worksheet per row list; None cells stay empty."""
    wb = Workbook()
    wb.remove(wb.active)
    for i, sheet_rows in enumerate(sheets):
        ws = wb.create_sheet(f"Sheet{i + 1}")
        for row in sheet_rows:
            ws.append(list(row))
    wb.save(path)
    return path


@pytest.fixture
def make_xlsx(tmp_path):
    """Factory: make_xlsx("name.xlsx", rows_sheet0, rows_sheet1, ...) -> Path."""
    def _make(name, *sheets):
        return write_workbook(tmp_path / name, *sheets)
    return _make


@pytest.fixture
def roster_file(make_xlsx):
    return make_xlsx("roster.xlsx", [
        ROSTER_HEADER,
        roster_row("张三", ID_ZHANG, grade="三年级", cohort="2班"),
        roster_row("李四", ID_LI),
        roster_row("王五", " 3201 0220 1005 050011 "),
        roster_row("赵六", ID_ZHAO, school="实验小学"),
    ])


@pytest.fixture
def disabled_file(make_xlsx):
    # name in column A, identity number in column B
    return make_xlsx("disabled.xlsx", [
        ["姓名", "身份证号", "残疾类别"],
        ["张三", ID_ZHANG.lower(), "肢体"],
        ["外来人员", ID_OUTSIDER, "视力"],
        ["", ID_ZHAO, "听力"],
    ])


@pytest.fixture
def poverty_file(make_xlsx):
    # identity number in column H, no name column
    header = ["序号", "县", "乡镇", "村", "户主", "人数", "关系", "身份证号"]
    return make_xlsx("poverty.xlsx", [
        header,
        [1, "某县", "城关镇", "东村", "李大", 3, "子女", ID_LI],
        [2, "某县", "城关镇", "西村", "钱二", 2, "户主", ID_OUTSIDER],
    ])


@pytest.fixture
def rural_xls():
    # Legacy BIFF8 workbook: a summary sheet, then a rural household list on
    # sheet 1 (title, header, two households). Identity numbers sit in columns
    # G, R and AD; column B holds the household size as a number.
    return DATA_DIR / "households.xls"


@pytest.fixture(autouse=True)
def reset_state():
    """Fresh API store per test; drop log handlers bound to captured streams."""
    set_store(None)
    yield
    set_store(None)
    logger = logging.getLogger("rostermatch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
