"""
PodReview Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table.
Who:   UserService (signup, profile), the identity resolver, Alembic.

Lifecycle:
    Created by signup, edited only by its owner, never deleted by the API.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from podreview.database import Base


class User(Base):
    """
    An account that can write reviews.

    `password_hash` holds a salted PBKDF2 hash in passlib's modular format,
    so the salt travels inside the hash string.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Stored lowercased; the unique constraint is the authority on duplicates
    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Origin of the account ("local" for email/password signup)
    provider: Mapped[str] = mapped_column(String(50), nullable=False, default="local")

    role: Mapped[str] = mapped_column(String(50), nullable=False, default="user")

    interests: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Podcast ids as strings
    bookmarks: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
