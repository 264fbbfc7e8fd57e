"""Spreadsheet reading, category schemas, and record extraction."""
from .normalize import normalize_identifier, cell_text, mask_identifier
from .schemas import CategoryTag, CategorySchema, HeaderRule, RosterSchema, ROSTER_SCHEMA
from .registry import CATEGORY_SCHEMAS, all_tags, parse_tag, schema_for
from .records import RosterRecord, CategoryRecord, MatchResult, CategoryFailure
from .extract import extract_roster, extract_category, detect_header_row
