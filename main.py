"""
Main FastAPI application entry point.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logfire

from config import settings
from observability.logfire_config import LogfireConfig
from pipeline import create_generation_pipeline
from pipeline.core.exceptions import InputValidationError, RateLimitExceeded
from pipeline.core.runner import GenerationRunner
from services.delivery import DeliveryBackend
from services.rate_limiter import FixedWindowRateLimiter
from api.routes import delivery_router, desk_ask_router, generation_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Starts the rate-limit sweepers and stops them on shutdown.
    """
    # Initialize Logfire first so we can use structured logging
    LogfireConfig.initialize(token=settings.logfire_token)

    logfire.info(
        "Starting Stay Request API Server",
        environment=settings.environment,
        debug=settings.debug,
        model=settings.generation_model,
        correction_pass_enabled=settings.correction_pass_enabled,
    )

    if not settings.gemini_api_key:
        logfire.warning(
            "GEMINI_API_KEY not configured",
            hint="Every generation will return the fallback payload",
        )

    sweepers = [
        asyncio.create_task(app.state.generation_limiter.run_sweeper()),
        asyncio.create_task(app.state.resend_limiter.run_sweeper()),
    ]

    logfire.info("Stay Request API Server startup complete")

    yield

    # Shutdown
    for task in sweepers:
        task.cancel()
    await asyncio.gather(*sweepers, return_exceptions=True)
    logfire.info("Shutting down Stay Request API Server")


# ============================================================================
# Exception Handlers
# ============================================================================

def _request_id_headers(request: Request) -> Dict[str, str]:
    request_id = getattr(request.state, "request_id", None)
    return {"X-Request-Id": request_id} if request_id else {}


async def input_validation_handler(request: Request, exc: InputValidationError) -> JSONResponse:
    logfire.info("Input validation failed", path=request.url.path, errors=exc.errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": exc.errors},
        headers=_request_id_headers(request),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)

    logfire.info("Request body rejected", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
        headers=_request_id_headers(request),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "Too many requests. Please try again later.",
            "retry_after": exc.retry_after,
        },
        headers={"Retry-After": str(exc.retry_after), **_request_id_headers(request)},
    )


def create_app(
    runner: Optional[GenerationRunner] = None,
    delivery_backend: Optional[DeliveryBackend] = None,
    generation_limiter: Optional[FixedWindowRateLimiter] = None,
    resend_limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators default to the configured ones; tests inject fakes.
    """
    app = FastAPI(
        title="Stay Request API",
        description="Pre-arrival hotel request email generation",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Shared state (the limiters are the only mutable state shared across requests)
    app.state.generation_runner = runner if runner is not None else create_generation_pipeline()
    app.state.delivery_backend = delivery_backend
    app.state.generation_limiter = generation_limiter if generation_limiter is not None else FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        name="generate",
    )
    app.state.resend_limiter = resend_limiter if resend_limiter is not None else FixedWindowRateLimiter(
        max_requests=settings.resend_rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        name="resend",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id", "X-Generation-Source", "Retry-After"],
    )

    app.add_exception_handler(InputValidationError, input_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    # ========================================================================
    # Health Check Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, str]:
        """
        Health check endpoint for load balancers and monitoring.

        Returns:
            dict: Health status of the application
        """
        return {
            "status": "healthy",
            "service": "stay-request-api",
            "version": "1.0.0",
            "model": settings.generation_model,
            "environment": settings.environment,
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """
        Root endpoint - API information.

        Returns:
            dict: Basic API information
        """
        return {
            "name": "Stay Request API",
            "version": "1.0.0",
            "description": "Pre-arrival hotel request email generation",
            "docs": "/docs",
            "health": "/health",
        }

    # ========================================================================
    # API Routers
    # ========================================================================

    # Request email generation (rate limited)
    app.include_router(generation_router)

    # Desk-ask UI copy (cached by clients)
    app.include_router(desk_ask_router)

    # Resend a stored delivery (stricter rate limit)
    app.include_router(delivery_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
