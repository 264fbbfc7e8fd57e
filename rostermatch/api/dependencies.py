"""
FastAPI dependencies: MatchStore singleton, error translation.
"""
from __future__ import annotations

from fastapi import HTTPException

from rostermatch.data.store import MatchStore
from rostermatch.errors import RosterMatchError

# ---------------------------------------------------------------------------
# Global store singleton (replaced by every POST /api/match)
# ---------------------------------------------------------------------------
_store: MatchStore | None = None


def set_store(store: MatchStore | None) -> None:
    global _store
    _store = store


def get_store() -> MatchStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(409, "No match run yet. POST /api/match first.")
    return _store


def get_store_or_empty() -> MatchStore:
    """Return the store even if nothing has been run (for health checks)."""
    return _store if _store is not None else MatchStore()


def http_error(exc: RosterMatchError) -> HTTPException:
    return HTTPException(exc.http_status, exc.to_dict())
