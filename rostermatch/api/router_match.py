"""
Match endpoints: run, query, statistics, export.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rostermatch.analytics.matcher import DuplicatePolicy
from rostermatch.api.dependencies import get_store, http_error, set_store
from rostermatch.api.response_models import (
    ExportRequest, ExportResponse, MatchRequest, MatchRunResponse, StatisticsResponse,
)
from rostermatch.config import REPORTS_FOLDER
from rostermatch.data.store import MatchStore
from rostermatch.errors import RosterMatchError
from rostermatch.reports import match_report

router = APIRouter(prefix="/api", tags=["match"])

_POLICIES = [p.value for p in DuplicatePolicy]


@router.post("/match", response_model=MatchRunResponse)
def run_match(req: MatchRequest):
    """Extract the roster and every listed source, join, and keep the result."""
    if req.duplicates and req.duplicates not in _POLICIES:
        raise HTTPException(400, f"Unknown duplicates policy: {req.duplicates}. Valid: {_POLICIES}")

    store = MatchStore()
    try:
        store.load(
            req.roster_path,
            [(s.category, s.path) for s in req.sources],
            policy=req.duplicates,
        )
    except RosterMatchError as exc:
        raise http_error(exc)

    set_store(store)
    return MatchRunResponse(
        statistics=StatisticsResponse(**store.statistics()),
        failures=[f.to_dict() for f in store.failures],
    )


@router.get("/matches")
def list_matches(
    category: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    mask: bool = Query(False),
    store: MatchStore = Depends(get_store),
):
    try:
        return match_report.generate_json(store, category=category, name=name, mask=mask)
    except RosterMatchError as exc:
        raise http_error(exc)


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(store: MatchStore = Depends(get_store)):
    return StatisticsResponse(**store.statistics())


@router.post("/export", response_model=ExportResponse)
def export_matches(req: ExportRequest, store: MatchStore = Depends(get_store)):
    """Write the matches workbook; defaults to a timestamped file under the reports folder."""
    if req.output_path:
        out = Path(req.output_path)
    else:
        out = REPORTS_FOLDER / f"Roster_Matches_{datetime.now():%Y%m%d_%H%M%S}.xlsx"

    try:
        count = len(store.matches(category=req.category, name=req.name))
        path = match_report.generate_excel(
            store, out, category=req.category, name=req.name, mask=req.mask,
        )
    except RosterMatchError as exc:
        raise http_error(exc)
    return ExportResponse(path=str(path), matches=count)
