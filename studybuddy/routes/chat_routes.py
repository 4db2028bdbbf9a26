import logging
from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from studybuddy.services.relay_service import get_gateway_transport, open_completion_stream
from studybuddy.services.validation import validate_messages
from studybuddy.utils.errors import ValidationError
from studybuddy.utils.jwt_handler import require_user

logger = logging.getLogger("chat_routes")
logging.basicConfig(level=logging.INFO)

router = APIRouter(tags=["chat"])


# ---------------- Study chat relay ----------------
@router.post("/study-chat")
async def study_chat(
    request: Request,
    user: Dict[str, str] = Depends(require_user),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_gateway_transport),
):
    """
    Validate the posted conversation and stream the gateway's SSE reply back
    to the caller byte for byte.
    """
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON in request body")

    if not isinstance(body, dict):
        raise ValidationError("Request body must be an object")

    validation = validate_messages(body.get("messages"))
    if not validation.ok:
        logger.warning(f"Validation error for user {user['user_id']}: {validation.error}")
        raise ValidationError(validation.error)

    logger.info(
        f"Processing study chat request for user {user['user_id']} "
        f"with {len(validation.messages)} messages"
    )
    stream = await open_completion_stream(validation.messages, transport=transport)

    logger.info(f"Streaming response from AI gateway for user {user['user_id']}")
    return StreamingResponse(
        stream.body(),
        media_type="text/event-stream",
        background=BackgroundTask(stream.aclose),
    )
