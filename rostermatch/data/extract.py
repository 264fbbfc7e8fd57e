"""
Record extraction: walk a spreadsheet with a schema, emit canonical records.

Only whole-source problems raise (missing file, unreadable container, missing
sheet). Short rows, blank identifiers and blank names are skipped so that one
bad row never costs the rest of the source.
"""
from __future__ import annotations

import logging
from itertools import islice
from pathlib import Path
from typing import Iterator, Optional, Sequence, Union

from rostermatch.config import UNKNOWN_NAME
from rostermatch.data.normalize import cell_text, is_blank, normalize_identifier
from rostermatch.data.reader import Row, Sheet, cell, open_workbook, rows, sheet_at
from rostermatch.data.records import CategoryRecord, RosterRecord
from rostermatch.data.registry import parse_tag, schema_for
from rostermatch.data.schemas import ROSTER_SCHEMA, CategorySchema, CategoryTag, HeaderRule, RosterSchema

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Header detection
# ---------------------------------------------------------------------------

def _contains_token(texts: list[str], tokens: Sequence[str]) -> bool:
    return any(token.lower() in text for text in texts for token in tokens)


def detect_header_row(preview: Sequence[Row], rule: HeaderRule) -> Optional[int]:
    """Index of the first row (within ``rule.scan_rows``) that looks like a header.

    Returns None when no row has both a name-like and an identifier-like cell.
    """
    for idx, row in enumerate(preview[: rule.scan_rows]):
        texts = [cell_text(v).lower() for v in row if not is_blank(v)]
        if _contains_token(texts, rule.name_tokens) and _contains_token(texts, rule.id_tokens):
            return idx
    return None


def resolve_start_row(preview: Sequence[Row], schema: CategorySchema) -> tuple[int, Optional[int]]:
    """Return (first data row, header row or None) for a sheet.

    Detection falls back to the schema's fixed skip count, never fails.
    """
    if schema.header_rule is not None:
        header_idx = detect_header_row(preview, schema.header_rule)
        if header_idx is not None:
            return header_idx + 1, header_idx
    header_idx = schema.skip_rows - 1 if schema.skip_rows > 0 else None
    return schema.skip_rows, header_idx


# ---------------------------------------------------------------------------
# Row walking
# ---------------------------------------------------------------------------

def _walk(sheet: Sheet, start: int) -> Iterator[tuple[int, Row]]:
    """Yield (1-based sheet row number, row) from ``start`` onwards."""
    first = sheet.first_row + start + 1
    for offset, row in enumerate(islice(rows(sheet), start, None)):
        yield first + offset, row


def _optional_text(row: Row, column: Optional[int]) -> Optional[str]:
    text = cell_text(cell(row, column))
    return text or None


def _header_labels(header: Optional[Row], width: int, schema: CategorySchema) -> dict[int, str]:
    """Column index -> label for every column that is neither name nor identifier."""
    skip = set(schema.id_columns)
    if schema.name_column is not None:
        skip.add(schema.name_column)

    labels: dict[int, str] = {}
    seen: set[str] = set()
    for col in range(width):
        if col in skip:
            continue
        label = cell_text(cell(header, col)) if header is not None else ""
        if not label:
            label = f"column_{col}"
        if label in seen:
            label = f"{label}_{col}"
        seen.add(label)
        labels[col] = label
    return labels


def _extra_fields(row: Row, labels: dict[int, str]) -> dict[str, str]:
    extra = {}
    for col, label in labels.items():
        text = cell_text(cell(row, col))
        if text:
            extra[label] = text
    return extra


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

def extract_roster(source: Union[str, Path], schema: RosterSchema = ROSTER_SCHEMA) -> list[RosterRecord]:
    """Read the master roster. Rows without a name or identifier are dropped."""
    path = Path(source)
    records: list[RosterRecord] = []
    read = 0

    with open_workbook(path) as workbook:
        sheet = sheet_at(workbook, schema.sheet_index)
        for row_number, row in _walk(sheet, schema.skip_rows):
            read += 1
            name = cell_text(cell(row, schema.name_column))
            identifier = normalize_identifier(cell(row, schema.id_column))
            if not name or not identifier:
                continue
            records.append(RosterRecord(
                name=name,
                identifier=identifier,
                secondary_id=_optional_text(row, schema.secondary_id_column),
                cohort=_optional_text(row, schema.cohort_column),
                level=_optional_text(row, schema.level_column),
                organization=_optional_text(row, schema.organization_column),
                row_number=row_number,
            ))

    logger.info(f"Roster {path.name}: {read:,} rows read, {len(records):,} students, "
                f"{read - len(records):,} rows skipped")
    return records


# ---------------------------------------------------------------------------
# Category sources
# ---------------------------------------------------------------------------

def _extract_sheet(
    sheet: Sheet,
    schema: CategorySchema,
    tag: CategoryTag,
    source_label: str,
) -> list[CategoryRecord]:
    scan = max(schema.skip_rows, schema.header_rule.scan_rows if schema.header_rule else 0)
    preview = list(islice(rows(sheet), scan))
    start, header_idx = resolve_start_row(preview, schema)

    labels: dict[int, str] = {}
    if schema.capture_extra:
        header = preview[header_idx] if header_idx is not None and header_idx < len(preview) else None
        labels = _header_labels(header, sheet.frame.shape[1], schema)

    records: list[CategoryRecord] = []
    read = 0
    empty_rows = 0
    for row_number, row in _walk(sheet, start):
        read += 1
        if schema.name_column is not None:
            name = cell_text(cell(row, schema.name_column))
            if not name:
                empty_rows += 1
                continue
        else:
            name = UNKNOWN_NAME

        extra = _extra_fields(row, labels) if labels else {}
        emitted = 0
        for column in schema.id_columns:
            identifier = normalize_identifier(cell(row, column), strip_prefix=schema.strip_prefix)
            if not identifier:
                continue
            records.append(CategoryRecord(
                name=name,
                identifier=identifier,
                category=tag,
                source=source_label,
                extra=dict(extra),
                sheet_index=sheet.index,
                row_number=row_number,
            ))
            emitted += 1
        if emitted == 0:
            empty_rows += 1

    logger.info(f"{source_label} [{tag.value}] sheet {sheet.index}: data from row {sheet.first_row + start + 1}, "
                f"{read:,} rows read, {len(records):,} records, {empty_rows:,} rows skipped")
    return records


def extract_category(source: Union[str, Path], tag: Union[CategoryTag, str]) -> list[CategoryRecord]:
    """Read one category source using the registry layout for ``tag``."""
    tag = parse_tag(tag)
    schema = schema_for(tag)
    path = Path(source)

    records: list[CategoryRecord] = []
    with open_workbook(path) as workbook:
        for sheet_index in schema.sheet_indices:
            sheet = sheet_at(workbook, sheet_index)
            records.extend(_extract_sheet(sheet, schema, tag, path.name))
    return records
