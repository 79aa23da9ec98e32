"""FastAPI dependencies."""

from .roles import get_current_user_roles, require_admin

__all__ = ["get_current_user_roles", "require_admin"]
