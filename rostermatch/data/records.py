"""
Canonical records produced by extraction and the join projection.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

from rostermatch.data.schemas import CategoryTag


@dataclass(frozen=True)
class RosterRecord:
    """One individual from the master roster."""
    name: str
    identifier: str                     # normalized; the join key
    secondary_id: Optional[str] = None  # national student number
    cohort: Optional[str] = None        # class
    level: Optional[str] = None         # grade
    organization: Optional[str] = None  # school
    row_number: Optional[int] = None    # 1-based spreadsheet row

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CategoryRecord:
    """One individual listed in a category source."""
    name: str
    identifier: str
    category: CategoryTag
    source: str
    extra: dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    sheet_index: int = 0
    row_number: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "identifier": self.identifier,
            "category": self.category.value,
            "source": self.source,
            "extra": dict(self.extra),
            "sheet_index": self.sheet_index,
            "row_number": self.row_number,
        }


@dataclass(frozen=True)
class MatchResult:
    """A roster record paired with the category record that matched it."""
    roster: RosterRecord
    candidate: CategoryRecord

    @property
    def identifier(self) -> str:
        return self.roster.identifier

    @property
    def category(self) -> CategoryTag:
        return self.candidate.category

    def to_dict(self) -> dict:
        return {
            "student": self.roster.to_dict(),
            "category": self.candidate.to_dict(),
        }


@dataclass(frozen=True)
class CategoryFailure:
    """A category source that could not be read during a run."""
    category: CategoryTag
    source: str
    error: str
    error_type: str

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "source": self.source,
            "error": self.error,
            "error_type": self.error_type,
        }
