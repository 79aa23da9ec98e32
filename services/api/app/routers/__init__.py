"""API routers."""

from app.routers import admin, chat, health, visitor_chat

__all__ = [
    "admin",
    "chat",
    "health",
    "visitor_chat",
]
