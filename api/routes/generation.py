"""
Request generation API endpoint.

Runs the generation state machine for one booking and returns a payload
that always passes the output contract. Callers learn which stage produced
it from the X-Generation-Source header.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
import logfire

from api.dependencies import RequestId, Runner, enforce_generation_rate_limit
from pipeline.models.core import Provenance
from pipeline.steps.request_composer import sanitize_input
from schemas.generation import (
    ErrorResponse,
    GenerateRequestBody,
    GenerateRequestResponse,
    RateLimitResponse,
)


router = APIRouter(prefix="/api", tags=["Generation"])

REQUEST_ID_HEADER = "X-Request-Id"
GENERATION_SOURCE_HEADER = "X-Generation-Source"


@router.post(
    "/generate-request",
    response_model=GenerateRequestResponse,
    dependencies=[Depends(enforce_generation_rate_limit)],
    responses={
        400: {"model": ErrorResponse},
        429: {"model": RateLimitResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate_request(
    body: GenerateRequestBody,
    response: Response,
    request_id: RequestId,
    runner: Runner,
):
    """
    Generate a pre-arrival request email.

    **Flow**:
    1. Rate limit per client (10 requests / 10 minutes by default)
    2. Sanitize and validate booking/context (400 on missing fields)
    3. Run the generation state machine (first pass, correction pass,
       repair, fallback)

    Args:
        body: Booking and traveler context
        response: Used to set the correlation and provenance headers
        request_id: Correlation id (injected)
        runner: Generation state machine (injected)

    Returns:
        GenerateRequestResponse: subject, body, three timing tips, desk script

    Raises:
        InputValidationError: Mapped to 400 by the application handler
        RateLimitExceeded: Mapped to 429 by the application handler
    """
    with logfire.span("api.generate_request", request_id=request_id):
        booking = body.booking.model_dump(by_alias=True, exclude_none=True) if body.booking else None
        context = body.context.model_dump(by_alias=True, exclude_none=True) if body.context else None

        generation_input = sanitize_input(booking, context)

        try:
            result = await runner.run(generation_input, request_id=request_id)
        except Exception as e:
            logfire.error(
                "Generation failed outside the pipeline",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={"error": "Generation failed"},
                headers={
                    REQUEST_ID_HEADER: request_id,
                    GENERATION_SOURCE_HEADER: Provenance.ERROR.value,
                },
            )

        response.headers[REQUEST_ID_HEADER] = result.request_id
        response.headers[GENERATION_SOURCE_HEADER] = result.provenance.value

        return result.output.to_payload()
