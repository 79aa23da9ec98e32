from app.services.prompts.wellness import (
    VISITOR_SYSTEM_PROMPT,
    WELLNESS_SYSTEM_PROMPT,
    build_episode_context,
    build_wellness_prompt,
    load_recent_episodes,
)

__all__ = [
    "VISITOR_SYSTEM_PROMPT",
    "WELLNESS_SYSTEM_PROMPT",
    "build_episode_context",
    "build_wellness_prompt",
    "load_recent_episodes",
]
