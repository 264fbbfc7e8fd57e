"""
MatchStore: one reconciliation run held in memory.

The roster is mandatory: if it cannot be read the run fails. Each category
source is optional: a failure is logged, recorded, and the run continues with
the remaining categories.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from rostermatch.analytics import summary
from rostermatch.analytics.matcher import DuplicatePolicy, build_index, match_index
from rostermatch.config import DEFAULT_DUPLICATE_POLICY, DEFAULT_WORKERS
from rostermatch.data.extract import extract_category, extract_roster
from rostermatch.data.records import CategoryFailure, CategoryRecord, MatchResult, RosterRecord
from rostermatch.data.registry import parse_tag
from rostermatch.data.schemas import CategoryTag
from rostermatch.errors import InvalidSetting, RosterMatchError

logger = logging.getLogger(__name__)

SourceSpec = tuple[Union[CategoryTag, str], Union[str, Path]]


def resolve_policy(value: Union[DuplicatePolicy, str]) -> DuplicatePolicy:
    try:
        return DuplicatePolicy(value)
    except ValueError:
        valid = "/".join(p.value for p in DuplicatePolicy)
        raise InvalidSetting("duplicate policy", value, valid) from None


def resolve_workers(value: Union[int, str]) -> int:
    """Worker count from an int or numeric text; must be at least 1."""
    try:
        workers = int(value)
    except (TypeError, ValueError):
        workers = 0
    if workers < 1:
        raise InvalidSetting("worker count", value, "a positive integer")
    return workers


class MatchStore:
    """Roster, candidates and matches of the most recent run."""

    def __init__(self) -> None:
        self.roster_path: Optional[Path] = None
        self.roster: list[RosterRecord] = []
        self.candidates: dict[CategoryTag, list[CategoryRecord]] = {}
        self.results: list[MatchResult] = []
        self.failures: list[CategoryFailure] = []
        self.policy: Optional[DuplicatePolicy] = None
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        roster_path: Union[str, Path],
        sources: Iterable[SourceSpec],
        policy: Union[DuplicatePolicy, str, None] = None,
        max_workers: Union[int, str, None] = None,
    ) -> "MatchStore":
        """Extract the roster and every category source, then join.

        Unknown category tags and invalid settings raise before any file is
        opened. Unset options fall back to the ROSTERMATCH_* defaults.
        """
        specs = [(parse_tag(tag), Path(path)) for tag, path in sources]
        policy = resolve_policy(policy or self.policy or DEFAULT_DUPLICATE_POLICY)
        workers = resolve_workers(DEFAULT_WORKERS if max_workers is None else max_workers)

        roster_path = Path(roster_path)
        roster = extract_roster(roster_path)
        index = build_index(roster, policy)

        extracted = self._extract_all(specs, workers)

        candidates: dict[CategoryTag, list[CategoryRecord]] = {}
        results: list[MatchResult] = []
        failures: list[CategoryFailure] = []
        for (tag, path), outcome in zip(specs, extracted):
            if isinstance(outcome, RosterMatchError):
                logger.warning(f"Skipping {tag.value} ({path.name}): {outcome.message}")
                failures.append(CategoryFailure(
                    category=tag,
                    source=str(path),
                    error=outcome.message,
                    error_type=type(outcome).__name__,
                ))
                continue
            candidates.setdefault(tag, []).extend(outcome)
            found = match_index(index, outcome)
            logger.info(f"{tag.value}: {len(outcome):,} candidates, {len(found):,} on roster")
            results.extend(found)

        self.roster_path = roster_path
        self.roster = roster
        self.candidates = candidates
        self.results = results
        self.failures = failures
        self.policy = policy
        self._loaded = True
        logger.info(f"Run complete: {len(results):,} matches across {len(candidates)} categories, "
                    f"{len(failures)} failed")
        return self

    @staticmethod
    def _extract_one(tag: CategoryTag, path: Path):
        try:
            return extract_category(path, tag)
        except RosterMatchError as exc:
            return exc

    def _extract_all(self, specs: Sequence[tuple[CategoryTag, Path]], max_workers: int) -> list:
        """Extract every source; outcomes come back in ``specs`` order."""
        if max_workers <= 1 or len(specs) <= 1:
            return [self._extract_one(tag, path) for tag, path in specs]
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda spec: self._extract_one(*spec), specs))

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def matches(
        self,
        category: Union[CategoryTag, str, None] = None,
        name: Optional[str] = None,
    ) -> list[MatchResult]:
        return summary.select(self.results, category=category, name=name)

    def counts(self) -> dict[CategoryTag, int]:
        return summary.count_by_category(self.results)

    def statistics(self) -> dict:
        stats = summary.match_statistics(self.roster, self.results)
        stats["failed_categories"] = [f.category.value for f in self.failures]
        return stats

    def candidate_count(self) -> int:
        return sum(len(recs) for recs in self.candidates.values())
