from datetime import datetime
from uuid import uuid4

from sqlalchemy import Enum as SAEnum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base import Base, created_at_column
from app.models.enums import AppRole


class UserRole(Base):
    """Role grant for a user. A user may hold several roles."""

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    role: Mapped[AppRole] = mapped_column(
        SAEnum(AppRole, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    created_at: Mapped[datetime] = created_at_column()
