from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# Model served through the AI gateway for wellness and visitor chat
WELLNESS_CHAT_MODEL = "google/gemini-2.5-flash"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database - can use either DATABASE_URL or separate params
    database_url: str | None = None

    # Separate DB params (for passwords with special characters)
    db_host: str | None = None
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str | None = None
    db_name: str = "postgres"

    # Auth - dev mode bypass
    dev_user_id: str | None = None  # Set this to bypass JWT auth in local dev

    # Supabase Auth (production)
    supabase_url: str | None = None
    supabase_jwt_secret: str | None = None

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_api_key: str | None = None
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_gateway_timeout: float = 60.0
    wellness_chat_model: str = WELLNESS_CHAT_MODEL

    # Wellness chat
    episode_context_limit: int = 50
    # tier -> messages per day; null means the tier has no limit defined yet
    tier_daily_limits: dict[str, int | None] = {
        "free": 3,
        "subscriber": 20,
        "admin": 20,
        "moderator": None,
    }

    # Visitor chat (landing page, unauthenticated)
    visitor_chat_history_limit: int = 10
    visitor_chat_max_tokens: int = 500

    # CORS - production frontend URL
    frontend_url: str | None = None

    @property
    def is_dev_mode(self) -> bool:
        """Check if running in dev mode with auth bypass."""
        return self.dev_user_id is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
