"""
Pydantic schemas for request/response validation.
"""

from schemas.delivery import ResendDeliveryRequest, ResendDeliveryResponse
from schemas.generation import (
    BookingPayload,
    ContextPayload,
    ErrorResponse,
    GenerateRequestBody,
    GenerateRequestResponse,
    RateLimitResponse,
)

__all__ = [
    # Generation schemas
    "BookingPayload",
    "ContextPayload",
    "GenerateRequestBody",
    "GenerateRequestResponse",
    "ErrorResponse",
    "RateLimitResponse",

    # Delivery schemas
    "ResendDeliveryRequest",
    "ResendDeliveryResponse",
]
