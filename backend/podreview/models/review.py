"""
PodReview Backend — Review SQLAlchemy Model
============================================

What:  ORM model for the `reviews` table.

Reviewer snapshot:
    `reviewer_id` + `reviewer_name` are a copy of the author's identity taken
    when the review was written. Renaming the user later does NOT rewrite
    existing reviews; the API shows the name as it was at write time.

Compound uniqueness (reviewer, podcast, episode):
    `episode` is nullable ("review of the podcast as a whole"), and SQL unique
    constraints treat NULLs as distinct from each other. The constraint is
    therefore declared over `episode_key`, a non-null mirror of `episode`
    that uses NO_EPISODE for "no episode". Episode numbers are validated as
    non-negative, so NO_EPISODE never collides with a real episode, including 0.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from podreview.database import Base

NO_EPISODE = -1

REVIEW_UNIQUE_CONSTRAINT = "uq_reviews_reviewer_podcast_episode"


class Review(Base):
    """A user's review of a podcast, or of one episode of it."""

    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Review title
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Plain reference, like a document id: deleting a podcast leaves its reviews
    podcast_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    episode: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    episode_key: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=NO_EPISODE,
        comment="episode, or -1 when the review covers the whole podcast",
    )

    rating: Mapped[float] = mapped_column(Float, nullable=False)

    review: Mapped[str] = mapped_column(Text, nullable=False)

    spoilers: Mapped[bool] = mapped_column(Boolean, nullable=False)

    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    reviewer_name: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint(
            "reviewer_id",
            "podcast_id",
            "episode_key",
            name=REVIEW_UNIQUE_CONSTRAINT,
        ),
        Index("idx_reviews_podcast_id", "podcast_id"),
        Index("idx_reviews_reviewer_id", "reviewer_id"),
    )

    @validates("episode")
    def _sync_episode_key(self, key: str, value: Optional[int]) -> Optional[int]:
        self.episode_key = NO_EPISODE if value is None else value
        return value

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, podcast_id={self.podcast_id}, "
            f"episode={self.episode}, reviewer_id={self.reviewer_id})>"
        )
