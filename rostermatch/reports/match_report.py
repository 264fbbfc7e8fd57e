"""
Match Report: matched students per category, with a per-category summary.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from rostermatch.analytics.common import sanitize_for_json
from rostermatch.analytics.summary import category_summary, to_frame
from rostermatch.data.normalize import mask_identifier
from rostermatch.data.store import MatchStore
from rostermatch.excel.writer import ExcelWriter


MATCH_TABLE = [
    ("name", "text", "Name"),
    ("identifier", "id", "ID Number"),
    ("secondary_id", "id", "Student Number"),
    ("organization", "text", "School"),
    ("level", "text", "Grade"),
    ("cohort", "text", "Class"),
    ("category", "text", "Category"),
    ("source", "text", "Source File"),
    ("source_row", "number", "Source Row"),
]

SUMMARY_TABLE = [
    ("category", "text", "Category"),
    ("matches", "number", "Matches"),
    ("students", "number", "Students"),
]

FAILURE_TABLE = [
    ("category", "text", "Category"),
    ("source", "text", "Source File"),
    ("error", "text", "Error"),
]

# Columns carrying an identity number (the student number is "G" + identity number)
MASKED_FIELDS = ("identifier", "secondary_id")


def _mask(value):
    return mask_identifier(value) if value else value


def generate_json(
    store: MatchStore,
    category: Optional[str] = None,
    name: Optional[str] = None,
    mask: bool = False,
) -> dict:
    """Statistics, (filtered) matches and failed categories as JSON-safe data."""
    results = store.matches(category=category, name=name)
    matches = [r.to_dict() for r in results]
    if mask:
        for m in matches:
            for field in MASKED_FIELDS:
                m["student"][field] = _mask(m["student"][field])
            m["category"]["identifier"] = _mask(m["category"]["identifier"])

    return sanitize_for_json({
        "roster": store.roster_path,
        "statistics": store.statistics(),
        "filters": {"category": category, "name": name},
        "matches": matches,
        "failures": [f.to_dict() for f in store.failures],
    })


def generate_excel(
    store: MatchStore,
    output_path: str | Path,
    category: Optional[str] = None,
    name: Optional[str] = None,
    mask: bool = False,
) -> Path:
    results = store.matches(category=category, name=name)
    stats = store.statistics()
    roster_name = store.roster_path.name if store.roster_path else "-"
    ew = ExcelWriter()

    # Matches
    frame = to_frame(results)
    if mask:
        for field in MASKED_FIELDS:
            frame[field] = frame[field].map(_mask)
    ws = ew.add_sheet("Matches")
    ew.write_table(ws, 1, MATCH_TABLE, frame)

    # Summary
    ws2 = ew.add_sheet("Summary")
    row = ew.write_title(
        ws2,
        "Hardship Category Matches",
        f"Roster: {roster_name}  |  Generated {datetime.now():%Y-%m-%d %H:%M}",
        merge_cols=len(SUMMARY_TABLE),
    )
    row = ew.write_kpi_row(ws2, row, [
        (stats["total_students"], "Students on roster", "number"),
        (len(results), "Matches", "number"),
        (len({r.identifier for r in results}), "Matched students", "number"),
    ], col_spacing=1)
    row = ew.write_section(ws2, row, "MATCHES BY CATEGORY")
    row = ew.write_table(ws2, row, SUMMARY_TABLE, category_summary(results), freeze=False, show_total=True)

    if store.failures:
        row = ew.write_section(ws2, row + 1, "CATEGORIES NOT READ")
        ew.write_table(
            ws2, row, FAILURE_TABLE,
            [f.to_dict() for f in store.failures],
            highlight_fn=lambda i, r: "warning",
            freeze=False,
        )

    return ew.save(output_path)
