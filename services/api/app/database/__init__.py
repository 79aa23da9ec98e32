from .base import Base, JSONVariant
from .engine import get_engine
from .session import SessionLocal, get_db

__all__ = [
    "Base",
    "JSONVariant",
    "get_engine",
    "SessionLocal",
    "get_db",
]
