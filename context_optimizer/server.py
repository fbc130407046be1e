"""FastAPI server for the CLAUDE.md context optimizer."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import context_router, sanitize_error_message
from .config import settings
from .exceptions import ContentTooLargeError, InvalidRuleError
from .logging_config import configure_logging
from .models import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    logger.info(f"Starting Context Optimizer v{__version__} ({settings.environment})")

    if not settings.debug and settings.cors_allowed_origins == "*":
        logger.warning(
            "CORS is configured to allow all origins ('*'). "
            "Set CONTEXT_OPTIMIZER_CORS_ALLOWED_ORIGINS to specific domains in production."
        )

    yield
    logger.info("Context Optimizer stopped")


app = FastAPI(
    title="Context Optimizer",
    description="Analyze and shrink CLAUDE.md context documents",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(context_router)


# ============ EXCEPTION HANDLERS ============


def _error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error, **extra})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    return _error_response(exc.status_code, exc.detail)


@app.exception_handler(ContentTooLargeError)
async def content_too_large_handler(request: Request, exc: ContentTooLargeError):
    logger.warning(f"Rejected {request.url.path}: {exc}")
    return _error_response(413, str(exc))


@app.exception_handler(InvalidRuleError)
async def invalid_rule_handler(request: Request, exc: InvalidRuleError):
    return _error_response(400, str(exc), details=exc.errors)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error_response(400, sanitize_error_message(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with sanitized error messages."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(500, "An internal server error occurred. Please try again.")


# ============ HEALTH ENDPOINTS ============


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint (lightweight liveness check)."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC),
    )


def main():
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "context_optimizer.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
