"""Request-scoped dependencies: client identity, rate limiting and the runner."""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status

from pipeline.core.runner import GenerationRunner
from services.delivery import DeliveryBackend
from services.rate_limiter import FixedWindowRateLimiter


def get_client_ip(request: Request) -> str:
    """
    Client identity for rate limiting.

    First entry of X-Forwarded-For when present, else the peer address,
    else "unknown".
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def get_request_id(request: Request) -> str:
    """Correlation id for this request, created once and cached on request.state."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


def enforce_generation_rate_limit(
    request: Request,
    client_ip: str = Depends(get_client_ip),
) -> None:
    """
    Gate generation calls.

    Raises:
        RateLimitExceeded: Mapped to 429 by the application handler
    """
    limiter: FixedWindowRateLimiter = request.app.state.generation_limiter
    limiter.hit(client_ip)


def enforce_resend_rate_limit(
    request: Request,
    client_ip: str = Depends(get_client_ip),
) -> None:
    """Gate resend calls with the stricter limiter."""
    limiter: FixedWindowRateLimiter = request.app.state.resend_limiter
    limiter.hit(client_ip)


def get_generation_runner(request: Request) -> GenerationRunner:
    """The runner attached to the app at startup."""
    return request.app.state.generation_runner


def get_delivery_backend(request: Request) -> DeliveryBackend:
    """
    The configured delivery backend.

    Raises:
        HTTPException: 503 if no backend is configured
    """
    backend: Optional[DeliveryBackend] = getattr(request.app.state, "delivery_backend", None)
    if backend is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Delivery service not configured"
        )
    return backend


# Type aliases for dependency injection
RequestId = Annotated[str, Depends(get_request_id)]
Runner = Annotated[GenerationRunner, Depends(get_generation_runner)]
