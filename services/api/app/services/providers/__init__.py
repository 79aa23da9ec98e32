"""External API provider wrappers."""

from app.services.providers.ai_gateway import (
    AIGatewayClient,
    ChatGenerator,
    get_ai_gateway,
    iter_stream_text,
)

__all__ = [
    "AIGatewayClient",
    "ChatGenerator",
    "get_ai_gateway",
    "iter_stream_text",
]
