"""
Projections over match results: counts, filters, report frames.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence, Union

import pandas as pd

from rostermatch.data.records import MatchResult, RosterRecord
from rostermatch.data.registry import all_tags, parse_tag
from rostermatch.data.schemas import CategoryTag


def total(results: Sequence[MatchResult]) -> int:
    return len(results)


def count_by_category(results: Iterable[MatchResult]) -> dict[CategoryTag, int]:
    """Category -> number of matches, in registry order; categories without matches are omitted."""
    counts = Counter(r.category for r in results)
    return {tag: counts[tag] for tag in all_tags() if counts[tag]}


def filter_by_category(results: Iterable[MatchResult], tag: Union[CategoryTag, str]) -> list[MatchResult]:
    tag = parse_tag(tag)
    return [r for r in results if r.category == tag]


def filter_by_name(results: Iterable[MatchResult], text: str) -> list[MatchResult]:
    """Matches whose roster name contains ``text`` (case-insensitive)."""
    needle = text.strip().casefold()
    if not needle:
        return list(results)
    return [r for r in results if needle in r.roster.name.casefold()]


def select(
    results: Iterable[MatchResult],
    category: Optional[Union[CategoryTag, str]] = None,
    name: Optional[str] = None,
) -> list[MatchResult]:
    """Apply the optional category and name filters together."""
    selected = list(results)
    if category:
        selected = filter_by_category(selected, category)
    if name:
        selected = filter_by_name(selected, name)
    return selected


def match_statistics(roster: Sequence[RosterRecord], results: Sequence[MatchResult]) -> dict:
    """Roster size, match total and per-category counts (labels as keys)."""
    return {
        "total_students": len(roster),
        "total_matches": total(results),
        "matched_students": len({r.identifier for r in results}),
        "category_counts": {tag.value: n for tag, n in count_by_category(results).items()},
    }


# ---------------------------------------------------------------------------
# Frames for the report writer
# ---------------------------------------------------------------------------

MATCH_COLUMNS = [
    "name", "identifier", "secondary_id", "cohort", "level", "organization",
    "category", "source", "source_row",
]


def to_frame(results: Iterable[MatchResult]) -> pd.DataFrame:
    """One row per match, roster fields first."""
    records = [
        {
            "name": r.roster.name,
            "identifier": r.roster.identifier,
            "secondary_id": r.roster.secondary_id or "",
            "cohort": r.roster.cohort or "",
            "level": r.roster.level or "",
            "organization": r.roster.organization or "",
            "category": r.category.value,
            "source": r.candidate.source,
            "source_row": r.candidate.row_number,
        }
        for r in results
    ]
    return pd.DataFrame(records, columns=MATCH_COLUMNS)


def category_summary(results: Sequence[MatchResult]) -> list[dict]:
    """Per-category rows for the summary sheet: matches and distinct students."""
    df = to_frame(results)
    if df.empty:
        return []
    grouped = df.groupby("category", sort=False).agg(
        matches=("identifier", "size"),
        students=("identifier", "nunique"),
    ).reset_index()
    order = {tag.value: i for i, tag in enumerate(all_tags())}
    grouped["_order"] = grouped["category"].map(order)
    grouped = grouped.sort_values("_order").drop(columns="_order")
    return grouped.to_dict("records")
