"""Landing page chat for visitors who are not signed in."""

import json
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.config import get_settings
from app.schemas.chat import VisitorChatRequest
from app.services.errors import GenerativeCapacityExceededError, GenerativeRateLimitedError
from app.services.prompts.wellness import VISITOR_SYSTEM_PROMPT
from app.services.providers.ai_gateway import AIGatewayClient, get_ai_gateway, iter_stream_text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["visitor-chat"])


@router.post("/visitor-chat")
async def visitor_chat(
    data: VisitorChatRequest,
    gateway: AIGatewayClient = Depends(get_ai_gateway),
) -> StreamingResponse:
    """
    Stream an answer to a visitor's question as Server-Sent Events.

    Only the most recent messages are forwarded. No quota and nothing is
    stored.

    Events:
        data: {"content": "..."}   text delta
        data: {"error": "..."}     stream broke after it started
        data: [DONE]
    """
    settings = get_settings()
    history = [
        m.model_dump(mode="json")
        for m in data.messages[-settings.visitor_chat_history_limit:]
    ]

    try:
        stream = await gateway.open_stream(
            VISITOR_SYSTEM_PROMPT,
            history,
            max_tokens=settings.visitor_chat_max_tokens,
        )
    except GenerativeRateLimitedError as e:
        raise GenerativeRateLimitedError(
            "We're experiencing high demand. Please try again in a moment."
        ) from e
    except GenerativeCapacityExceededError as e:
        raise GenerativeCapacityExceededError(
            "Service temporarily unavailable. Please try again later."
        ) from e

    async def event_generator():
        try:
            async for text in iter_stream_text(stream):
                yield f"data: {json.dumps({'content': text})}\n\n"
        except Exception as e:
            logger.error(f"Visitor chat stream failed: {e}")
            yield f"data: {json.dumps({'error': 'Unable to process request'})}\n\n"
        finally:
            # Runs on client disconnect too, releasing the gateway connection
            await stream.close()
        yield "data: [DONE]\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
