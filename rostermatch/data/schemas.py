"""
Extraction schemas: category tags and the physical layout of each source.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rostermatch.config import (
    HEADER_ID_TOKENS,
    HEADER_NAME_TOKENS,
    HEADER_SCAN_MAX_ROWS,
    ROSTER_COHORT_COL,
    ROSTER_HEADER_ROWS,
    ROSTER_ID_COL,
    ROSTER_LEVEL_COL,
    ROSTER_NAME_COL,
    ROSTER_ORGANIZATION_COL,
    ROSTER_SECONDARY_ID_COL,
    ROSTER_SHEET_INDEX,
)


class CategoryTag(str, Enum):
    """Hardship categories; values are the labels used by the issuing agencies."""
    POVERTY_ALLEVIATED_CONTINUE_POLICY = "脱贫户(继续享受政策)"
    POVERTY_ALLEVIATED_NO_POLICY = "脱贫户(不享受政策)"
    DISABLED_WITH_CERTIFICATE = "持证残疾人"
    RURAL_MINIMUM_LIVING = "农村低保"
    URBAN_MINIMUM_LIVING = "城镇低保"
    RURAL_SPECIAL_DIFFICULTY = "城乡特困"
    MONITORING_RISK_NOT_ELIMINATED = "防返贫监测对象(风险未消除)"
    MONITORING_RISK_ELIMINATED = "防返贫监测对象(风险已消除)"
    ORPHAN_OR_UNSUPPORTED_CHILD = "孤儿及事实无人抚养儿童"
    LOW_INCOME_POPULATION = "低收入人口"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class HeaderRule:
    """Locate the real header row among the first ``scan_rows`` rows.

    A row is the header when one of its cells contains a name token and one
    contains an identifier token (case-insensitive substring match).
    """
    scan_rows: int = HEADER_SCAN_MAX_ROWS
    name_tokens: tuple[str, ...] = HEADER_NAME_TOKENS
    id_tokens: tuple[str, ...] = HEADER_ID_TOKENS


@dataclass(frozen=True)
class CategorySchema:
    """Where the identifying fields of one category source live."""
    sheet_index: int
    id_columns: tuple[int, ...]
    skip_rows: int = 1                      # leading title/header rows
    name_column: Optional[int] = None
    header_rule: Optional[HeaderRule] = None
    extra_sheet_indices: tuple[int, ...] = ()   # further sheets, same layout
    strip_prefix: bool = False              # leading "G" student-number prefix
    capture_extra: bool = False             # keep other columns keyed by header text

    def __post_init__(self) -> None:
        if not self.id_columns:
            raise ValueError("CategorySchema needs at least one identifier column")
        if self.skip_rows < 0:
            raise ValueError("skip_rows must be >= 0")

    @property
    def is_wide(self) -> bool:
        """Several individuals per row (repeated identifier columns)."""
        return len(self.id_columns) > 1

    @property
    def sheet_indices(self) -> tuple[int, ...]:
        return (self.sheet_index,) + self.extra_sheet_indices

    def describe(self) -> dict:
        return {
            "sheets": list(self.sheet_indices),
            "id_columns": list(self.id_columns),
            "skip_rows": self.skip_rows,
            "name_column": self.name_column,
            "header_detection": self.header_rule is not None,
            "strip_prefix": self.strip_prefix,
            "capture_extra": self.capture_extra,
        }


@dataclass(frozen=True)
class RosterSchema:
    """Fixed layout of the master roster."""
    sheet_index: int = ROSTER_SHEET_INDEX
    skip_rows: int = ROSTER_HEADER_ROWS
    name_column: int = ROSTER_NAME_COL
    id_column: int = ROSTER_ID_COL
    secondary_id_column: Optional[int] = ROSTER_SECONDARY_ID_COL
    cohort_column: Optional[int] = ROSTER_COHORT_COL
    level_column: Optional[int] = ROSTER_LEVEL_COL
    organization_column: Optional[int] = ROSTER_ORGANIZATION_COL


ROSTER_SCHEMA = RosterSchema()
