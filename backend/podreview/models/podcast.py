"""
PodReview Backend — Podcast SQLAlchemy Model
=============================================

What:  ORM model for the `podcasts` table.

Nested collections (cast, episodes, tags) are stored as JSON arrays and are
always replaced wholesale on update, never appended to.

Name uniqueness:
    The unique constraint on `name` is what actually guarantees one podcast
    per name. PodcastService also queries for a clash first so it can answer
    with a friendly message; two concurrent creates can both pass that query,
    and then the constraint rejects the second insert.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from podreview.database import Base


class Podcast(Base):
    """A podcast that users can review. Has no owner: any signed-in user may edit it."""

    __tablename__ = "podcasts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Globally unique podcast title",
    )

    link: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    release: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    producer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # [{"actor": ..., "character": ...}, ...]
    cast: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Running time in minutes
    length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # [{"name": ..., "link": ..., "description": ..., "imageUrl": ...}, ...]
    episodes: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Podcast(id={self.id}, name='{self.name}')>"
