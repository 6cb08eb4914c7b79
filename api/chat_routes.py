"""
Chat API route - POST /api/chat.

Forwards the posted history to the completion gateway and returns the
reply text. Every other method on the path answers 405.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import ChatRequest, ChatResponse, ErrorResponse
from services.ai_service.completion_gateway import CompletionGateway, get_completion_gateway
from services.ai_service.errors import GatewayError
from utils.logging_config import get_error_tracker, get_logger


logger = get_logger(__name__)

GATEWAY_ERROR_MESSAGE = "Failed to fetch completion response"

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(request: ChatRequest, gateway: CompletionGateway = Depends(get_completion_gateway)):
    """Return the next assistant message for a conversation history."""
    history = [message.model_dump() for message in request.messages]

    try:
        reply = gateway.complete(history)
    except GatewayError as e:
        get_error_tracker().track_error(
            e,
            "completion_gateway",
            error_category=e.error_type,
            retryable=e.retryable,
            upstream_status=getattr(e, "status", None),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=GATEWAY_ERROR_MESSAGE, error_type=e.error_type).model_dump(),
        )

    return ChatResponse(response=reply.content)


@router.api_route(
    "/chat",
    methods=["GET", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
def chat_method_not_allowed(request: Request):
    """Only POST is supported."""
    return JSONResponse(
        status_code=405,
        content={"error": f"Method {request.method} Not Allowed"},
        headers={"Allow": "POST"},
    )
