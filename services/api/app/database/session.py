"""Database session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from app.database.engine import get_engine

# Session factory
SessionLocal = sessionmaker(
    bind=get_engine(),
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, Any, None]:
    """
    FastAPI dependency that yields a database session.

    Services commit their own short transactions; the session is closed
    when the request finishes.

    Usage:
        @router.post("/chat")
        async def chat(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
