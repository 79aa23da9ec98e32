"""Auth module for JWT validation and user dependencies."""

from app.auth.dependencies import get_current_user
from app.auth.jwt import validate_supabase_jwt
from app.auth.schemas import TokenPayload, User

__all__ = [
    "User",
    "TokenPayload",
    "validate_supabase_jwt",
    "get_current_user",
]
