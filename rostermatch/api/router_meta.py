"""
Meta endpoints: health, categories.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from rostermatch.api.dependencies import get_store_or_empty
from rostermatch.api.response_models import CategoriesResponse, CategoryInfo, HealthResponse
from rostermatch.data.registry import CATEGORY_SCHEMAS
from rostermatch.data.store import MatchStore

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: MatchStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok",
        loaded=store.is_loaded,
        students=len(store.roster),
        candidates=store.candidate_count(),
        matches=len(store.results),
    )


@router.get("/categories", response_model=CategoriesResponse)
def list_categories():
    return CategoriesResponse(categories=[
        CategoryInfo(name=tag.name, label=tag.value, layout=schema.describe())
        for tag, schema in CATEGORY_SCHEMAS.items()
    ])
