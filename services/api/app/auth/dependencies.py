"""FastAPI dependencies for authentication."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.jwt import validate_supabase_jwt
from app.auth.schemas import User
from app.config import get_settings

# HTTPBearer with auto_error=False so we can handle missing tokens ourselves
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    Get current user from JWT or dev bypass.

    - If DEV_USER_ID is set: return mock user (SQLite dev mode)
    - Otherwise: validate JWT and return user from claims

    Usage:
        @router.post("/chat")
        async def chat(user: User = Depends(get_current_user)):
            # user.id is the authenticated user's ID
            ...
    """
    settings = get_settings()

    # Dev bypass for local SQLite development
    if settings.dev_user_id:
        return User(id=settings.dev_user_id, email="dev@local.test")

    # Production: require valid JWT
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_payload = validate_supabase_jwt(credentials.credentials)
    return User(id=token_payload.sub, email=token_payload.email)
