"""Core orchestration services for business logic."""

from app.services.core.wellness_chat import ChatAnswer, answer_chat_message

__all__ = [
    "ChatAnswer",
    "answer_chat_message",
]
