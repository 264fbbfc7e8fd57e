"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    students: int
    candidates: int
    matches: int


class CategoryInfo(BaseModel):
    name: str
    label: str
    layout: dict[str, Any]


class CategoriesResponse(BaseModel):
    categories: list[CategoryInfo]


class SourceRequest(BaseModel):
    category: str
    path: str


class MatchRequest(BaseModel):
    roster_path: str
    sources: list[SourceRequest] = Field(default_factory=list)
    duplicates: Optional[str] = None   # last | first | error


class StatisticsResponse(BaseModel):
    total_students: int
    total_matches: int
    matched_students: int
    category_counts: dict[str, int]
    failed_categories: list[str]


class MatchRunResponse(BaseModel):
    statistics: StatisticsResponse
    failures: list[dict[str, Any]]


class ExportRequest(BaseModel):
    output_path: Optional[str] = None
    category: Optional[str] = None
    name: Optional[str] = None
    mask: bool = False


class ExportResponse(BaseModel):
    path: str
    matches: int
