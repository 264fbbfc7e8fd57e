"""
Roster ⨝ category join on the normalized identifier.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Iterable, Sequence, Union

from rostermatch.data.records import CategoryRecord, MatchResult, RosterRecord
from rostermatch.errors import DuplicateIdentifier

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """Which roster record wins when an identifier appears more than once."""
    LAST = "last"      # later rows overwrite earlier ones
    FIRST = "first"    # the first row is kept
    ERROR = "error"    # refuse to build the index


def find_duplicates(roster: Iterable[RosterRecord]) -> dict[str, list[RosterRecord]]:
    """Identifier -> all roster records sharing it (only identifiers seen twice or more)."""
    groups: dict[str, list[RosterRecord]] = defaultdict(list)
    for record in roster:
        groups[record.identifier].append(record)
    return {ident: recs for ident, recs in groups.items() if len(recs) > 1}


def build_index(
    roster: Sequence[RosterRecord],
    policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
) -> dict[str, RosterRecord]:
    """Map normalized identifier -> roster record under ``policy``."""
    policy = DuplicatePolicy(policy)
    duplicates = find_duplicates(roster)
    if duplicates:
        logger.warning(f"{len(duplicates):,} roster identifier(s) repeated; keeping the {policy.value} occurrence")
        if policy == DuplicatePolicy.ERROR:
            raise DuplicateIdentifier(duplicates)

    index: dict[str, RosterRecord] = {}
    for record in roster:
        if policy == DuplicatePolicy.FIRST and record.identifier in index:
            continue
        index[record.identifier] = record
    return index


def match_index(index: dict[str, RosterRecord], candidates: Iterable[CategoryRecord]) -> list[MatchResult]:
    """Join candidates against a prebuilt index, preserving candidate order."""
    results = []
    for candidate in candidates:
        student = index.get(candidate.identifier)
        if student is not None:
            results.append(MatchResult(roster=student, candidate=candidate))
    return results


def match(
    roster: Sequence[RosterRecord],
    candidates: Iterable[CategoryRecord],
    policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
) -> list[MatchResult]:
    """Pair every candidate whose identifier is on the roster with that roster record.

    Candidates not on the roster are dropped silently; most are expected to
    miss.
    """
    return match_index(build_index(roster, policy), candidates)
