"""
Roster Match: FastAPI app factory.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rostermatch import __version__
from rostermatch.api.dependencies import set_store
from rostermatch.api.router_match import router as match_router
from rostermatch.api.router_meta import router as meta_router
from rostermatch.config import REPORTS_FOLDER, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start with an empty store; runs are triggered through POST /api/match."""
    logger = setup_logging()
    REPORTS_FOLDER.mkdir(parents=True, exist_ok=True)
    set_store(None)
    logger.info(f"Roster Match API ready, reports folder: {REPORTS_FOLDER}")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Roster Match API",
        description="Match a student roster against hardship category lists by identity number",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(match_router)
    return app


app = create_app()
