"""Central.IA API - Main FastAPI Application."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from central_ia.api.routes import leads, notifications, rituals
from central_ia.core.config import settings
from central_ia.core.exceptions import CentralIAException, sanitize_error


# Configure logging: JSON for production, text for dev
def _configure_logging() -> None:
    """Set up logging based on LOG_FORMAT.

    json: Structured JSON via python-json-logger.
    text: Human-readable format (for local development).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicate output
    root_logger.handlers.clear()

    handler = logging.StreamHandler()

    if settings.LOG_FORMAT == "json":
        from pythonjsonlogger.json import JsonFormatter

        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "service",
            },
            static_fields={"app": "central-ia-api"},
        )
        handler.setFormatter(formatter)
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


_configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> Any:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Central.IA API...")
    if not settings.is_configured:
        logger.warning("Supabase is not configured - data routes will fail")
    elif settings.is_production:
        settings.validate_startup()
    yield
    logger.info("Shutting down Central.IA API...")


app = FastAPI(
    title="Central.IA API",
    description="Sales pipeline and ritual alerts for small-business sales teams",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(leads.router, prefix="/api/v1")
app.include_router(rituals.router, prefix="/api/v1")
app.include_router(notifications.router, prefix="/api/v1")


@app.exception_handler(CentralIAException)
async def central_ia_exception_handler(request: Request, exc: CentralIAException) -> JSONResponse:
    """Render domain exceptions with a safe message and their code."""
    logger.warning(
        "Request failed",
        extra={"path": request.url.path, "code": exc.code, "error": exc.message},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": sanitize_error(exc), "code": exc.code},
    )


@app.get("/health", tags=["system"])
async def root_health_check() -> dict[str, str]:
    """Lightweight liveness check."""
    return {"status": "healthy"}
