"""Main FastAPI application."""
import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from fundquery.api import funds, query
from fundquery.config import DEFAULT_CORS_ORIGINS, get_settings
from fundquery.services.fund_store import get_fund_store

settings = get_settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(settings.log_level)

app = FastAPI(
    title="FundQuery API",
    description="Rule-based fund screening with Gemini commentary",
    version="1.0.0",
    debug=settings.debug,
)

allowed_origins = settings.cors_origins or DEFAULT_CORS_ORIGINS.copy()
cors_allow_all = settings.cors_allow_all or "*" in allowed_origins

if cors_allow_all:
    cors_kwargs = {
        "allow_origins": ["*"],
        "allow_origin_regex": None,
        "allow_credentials": False,
    }
else:
    cors_kwargs = {
        "allow_origins": allowed_origins,
        "allow_origin_regex": settings.cors_origin_regex,
        "allow_credentials": True,
    }

app.add_middleware(
    CORSMiddleware,
    allow_methods=["*"],
    allow_headers=["*"],
    **cors_kwargs,
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FundQuery API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    store = get_fund_store()
    return {
        "status": "healthy",
        "funds_loaded": len(store.records),
        "narrative_configured": settings.gemini_configured(),
    }


@app.get("/favicon.ico")
async def favicon():
    """Favicon endpoint to prevent 404 errors."""
    return Response(status_code=204)


# Include routers
app.include_router(
    funds.router,
    prefix=f"/api/{settings.api_version}/funds",
    tags=["funds"]
)

app.include_router(
    query.router,
    prefix=f"/api/{settings.api_version}/query",
    tags=["query"]
)
