"""
FastAPI Application — FoodOil IQ Backend

Scoring, batch tracking, alerts and report downloads.

CORS: Configured via environment variables.
Domain errors map to HTTP status codes:
- RecordNotFound -> 404
- PredictionError -> 502
- InvalidLimit / InvalidReading / MissingField -> 422
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from oiliq.config import settings
from oiliq.exceptions import OilQualityError, PredictionError, RecordNotFound, MissingField
from .routes import router
from .batch_routes import router as batch_router
from .alert_routes import router as alert_router


# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"🚀 Starting {settings.PROJECT_NAME}")
    logger.info(f"📍 Running in {settings.ENVIRONMENT} mode")
    logger.info(f"📏 Regulatory standard: {settings.REGULATORY_STANDARD}")
    logger.info(f"🔗 Prediction service: {settings.PREDICTION_API_URL or 'local simulation'}")
    yield
    # Shutdown
    logger.info(f"👋 Shutting down {settings.PROJECT_NAME}")


# Application metadata
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Oil quality scoring, batch tracking and compliance reports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# CORS Configuration, loaded from settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(PredictionError)
async def prediction_error_handler(request: Request, exc: PredictionError):
    logger.error(f"❌ Prediction failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


@app.exception_handler(OilQualityError)
async def oil_quality_error_handler(request: Request, exc: OilQualityError):
    content = {"detail": str(exc)}
    if isinstance(exc, MissingField):
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=content,
    )


# Include API routes
app.include_router(router)
app.include_router(batch_router)
app.include_router(alert_router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint, points at docs."""
    return {
        "message": "FoodOil IQ API",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/ping", tags=["Health"])
async def ping():
    """Lightweight heartbeat. Touches neither predictor nor stores."""
    return {"status": "ok"}
