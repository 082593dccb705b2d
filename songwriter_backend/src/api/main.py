"""
FastAPI application entrypoint for the Songwriter backend.

Routes:
- /auth/register, /auth/login, /auth/me
- /projects and /projects/{project_id}/sections (bearer token required)

CORS is enabled for local development (http://localhost:3000) and can be extended
via environment variables. Missing tables are created at startup unless
DB_AUTO_CREATE is false.
"""

from __future__ import annotations

import logging
import os as _os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import JSONResponse

from src.api.db import init_db
from src.api.routes_auth import router as auth_router
from src.api.routes_projects import router as projects_router

logger = logging.getLogger(__name__)


def _auto_create_enabled() -> bool:
    return _os.getenv("DB_AUTO_CREATE", "true").strip().lower() not in {"0", "false", "no", "off"}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if _auto_create_enabled():
        try:
            init_db()
        except (RuntimeError, SQLAlchemyError) as exc:
            # Requests still report the problem as 503 through db_session_dep.
            logger.warning("db_schema_bootstrap_failed: exception=%s message=%s", exc.__class__.__name__, exc)
    yield


openapi_tags = [
    {"name": "Auth", "description": "Register, login and inspect the current user."},
    {"name": "Projects", "description": "Song projects and their ordered sections (owner-scoped)."},
    {"name": "Health", "description": "Service health and basic runtime info."},
]

app = FastAPI(
    title="Songwriter Backend API",
    description=(
        "Backend for a songwriting tool: song projects and their verse/chorus/bridge sections.\n\n"
        "Authentication: Bearer JWT (POST /auth/register or /auth/login).\n\n"
        "Every project and section is visible only to its owner; anything else answers 404."
    ),
    version="1.0.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# CORS: allow React dev server + configurable origin via env.
# credentials=true requires explicit origins (not '*'), so common local dev URLs are listed.
# Extra origins: CORS_ALLOW_ORIGINS or ALLOWED_ORIGINS, comma-separated.
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

_allow_origins_raw = _os.getenv("CORS_ALLOW_ORIGINS") or _os.getenv("ALLOWED_ORIGINS", "")
cors_origins.extend(o.strip() for o in _allow_origins_raw.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Give request-shape errors the same {"error", "message"} detail as service errors."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "error": "VALIDATION_ERROR",
                "message": "Request validation failed.",
                "errors": jsonable_encoder(exc.errors()),
            }
        },
    )


app.include_router(auth_router)
app.include_router(projects_router)


@app.get(
    "/",
    summary="Health check",
    description="Simple health check endpoint.",
    tags=["Health"],
)
def health_check():
    """Return basic service health information."""
    return {"status": "ok"}
