from .enums import AppRole, ChatRole
from .heart_episode import HeartEpisode
from .user_chat_usage import UserChatUsage
from .user_role import UserRole
from .wellness_faq import WellnessFaq

__all__ = [
    "AppRole",
    "ChatRole",
    "HeartEpisode",
    "UserChatUsage",
    "UserRole",
    "WellnessFaq",
]
