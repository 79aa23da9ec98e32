from enum import Enum


class AppRole(str, Enum):
    """Subscription tier / role granted to a user (Supabase app_role enum)."""

    FREE = "free"
    SUBSCRIBER = "subscriber"
    ADMIN = "admin"
    MODERATOR = "moderator"


class ChatRole(str, Enum):
    """Author of a chat message sent to the AI gateway."""

    USER = "user"
    ASSISTANT = "assistant"
