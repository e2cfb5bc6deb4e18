"""Desk-ask copy API endpoint."""

from fastapi import APIRouter, Response
import logfire

from api.dependencies import RequestId
from pipeline.steps.desk_ask import DeskAskCopy, generate_desk_ask_copy


router = APIRouter(prefix="/api", tags=["Desk Ask"])


@router.get("/desk-ask-copy", response_model=DeskAskCopy)
async def get_desk_ask_copy(response: Response, request_id: RequestId):
    """
    Content for the "If you ask at the desk" card.

    Always answers: model output when it matches the schema, the static
    card otherwise. Cached by clients for one hour.
    """
    with logfire.span("api.desk_ask_copy", request_id=request_id):
        copy, source = await generate_desk_ask_copy(request_id)

        response.headers["Cache-Control"] = "public, max-age=3600"
        response.headers["X-Request-Id"] = request_id
        response.headers["X-Generation-Source"] = source

        return copy
