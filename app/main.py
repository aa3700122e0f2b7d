"""
ResumeMatch Scoring API - Main FastAPI Application

Scores how well a resume matches a job description from two angles: an
Applicant Tracking System simulation and a human recruiter simulation.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.config import Settings, get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
## ResumeMatch Scoring API

Scores a resume against a job description.

### Scores

- **ATS Score** (`POST /api/ats-score`): keyword matching, formatting checks
  and section detection, weighted by job type and reconciled with an AI
  keyword analysis. Passes at 75.
- **HR Score** (`POST /api/hr-score`): formatting compared with successful
  reference resumes, semantic similarity per resume section, and an AI
  recruiter review.
- **Keywords** (`POST /api/keywords`): the ranked keywords and job type the
  ATS simulation works from.

Every finding carries a severity (critical, warning, info) and, where one
exists, a concrete suggestion.

AI enrichments are optional: without a Gemini key the deterministic scores
are returned on their own.
"""


def _log_feature_status(settings: Settings) -> None:
    if not settings.gemini_api_key:
        logger.warning("Gemini API key not configured: AI judgments and semantic scoring are disabled")
    if not settings.redis_url:
        logger.info("Redis not configured: AI results are not cached and no reference corpus is available")

    disabled = [
        name
        for name, enabled in (
            ("supplementary ATS analysis", settings.enable_supplementary_ats),
            ("semantic analysis", settings.enable_semantic_analysis),
            ("HR review", settings.enable_llm_review),
        )
        if not enabled
    ]
    if disabled:
        logger.info(f"Disabled by configuration: {', '.join(disabled)}")
    if settings.ats_strict_matching:
        logger.info("ATS keyword matching defaults to strict (whole-word) mode")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} (debug={settings.debug})")
    _log_feature_status(settings)

    yield

    logger.info(f"Shutting down {settings.app_name}")


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Scoring failed due to an internal error",
                "detail": str(exc) if settings.debug else "Please try again later",
            },
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=API_DESCRIPTION,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    _register_error_handlers(app, settings)
    app.include_router(router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs",
            "api": "/api",
            "endpoints": ["/api/health", "/api/keywords", "/api/ats-score", "/api/hr-score"],
        }

    return app


app = create_app()
