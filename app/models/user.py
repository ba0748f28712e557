"""ORM model for application users (auth and RBAC)."""

import uuid

from sqlalchemy import JSON, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'
    email: stored lower-cased, so the unique index is case-insensitive in effect.
    refresh_tokens: currently valid refresh tokens, oldest first.
    """

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_user_id)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    phone = Column(String(64), nullable=False, default="")
    addresses = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        order_by="RefreshToken.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
