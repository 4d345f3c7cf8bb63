"""FastAPI application definition."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .deps import lifespan
from .errors import register_exception_handlers
from .routes import api_router

EXPOSED_HEADERS = [
    "Link",
    "Location",
    "X-Total-Count",
    "X-Total-Pages",
    "X-dega-alert",
    "X-dega-error",
    "X-dega-params",
]

app = FastAPI(
    title="dega",
    description="Multi-tenant content backend",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=EXPOSED_HEADERS,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
