"""
PodReview Backend — Review Service
===================================

What:  Business rules for reviews: the create-review uniqueness protocol and
       owner-only update/delete.
Who:   Called by the /api/review route handlers.

Create protocol (one review per reviewer per podcast/episode):
    1. Required fields present: podcast, review, rating, name, spoilers
       (spoilers may be false but not absent)
    2. Reviewer forced to the acting principal; request data never sets it
    3. Pre-check: look for an existing review with the same
       (reviewer, podcast, episode), where "no episode" is its own key value
    4. Found → ConflictError
    5. Insert. The unique constraint over (reviewer_id, podcast_id,
       episode_key) rejects a duplicate that slipped past step 3 in a
       concurrent request, and that rejection is also a ConflictError.

Step 3 only exists to give the common case a clear error before touching the
table. Step 5 is what keeps the invariant under concurrency.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.exceptions import ConflictError, DatabaseError, ValidationError
from podreview.models.review import NO_EPISODE, Review
from podreview.schemas.review import (
    ReviewCreate,
    ReviewerSnapshot,
    ReviewResponse,
    ReviewUpdate,
)
from podreview.schemas.user import Principal
from podreview.services.mutation import (
    RecordMutator,
    flush_or_raise,
    missing_fields,
    parse_identifier,
)

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You already have a review for this podcast/episode!"

REQUIRED_ON_CREATE = ("podcast", "review", "rating", "name", "spoilers")

# Request field → model attribute
FIELD_MAP = {"podcast": "podcast_id"}

UPDATABLE_FIELDS = ("name", "podcast_id", "episode", "rating", "review", "spoilers")
REQUIRED_FIELDS = ("name", "podcast_id", "rating", "review", "spoilers")


def episode_key(episode: Optional[int]) -> int:
    return NO_EPISODE if episode is None else episode


def to_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        name=review.name,
        podcast=review.podcast_id,
        episode=review.episode,
        rating=review.rating,
        review=review.review,
        spoilers=review.spoilers,
        reviewer=ReviewerSnapshot(id=review.reviewer_id, name=review.reviewer_name),
        created_at=review.created_at,
    )


class ReviewService:
    """
    Stateless; every call gets the session to work in.

    Responsibilities:
        - list_mine() / list_for_podcast(): read paths
        - create_review(): uniqueness protocol
        - update_review() / delete_review(): owner-only mutation
    """

    def __init__(self):
        self.mutator: RecordMutator[Review] = RecordMutator(
            Review,
            resource="review",
            updatable=UPDATABLE_FIELDS,
            required=REQUIRED_FIELDS,
            owner_of=lambda review: review.reviewer_id,
            conflict_message=DUPLICATE_REVIEW_MESSAGE,
            before_write=self._check_unique_on_update,
        )

    # ── Reads ─────────────────────────────────────────────────────────────
    async def list_mine(self, db: AsyncSession, principal: Principal) -> List[ReviewResponse]:
        """All reviews written by the caller. Empty list when there are none."""
        query = (
            select(Review)
            .where(Review.reviewer_id == principal.id)
            .order_by(Review.created_at)
        )
        return await self._list(db, query)

    async def list_for_podcast(self, db: AsyncSession, podcast_id: Any) -> List[ReviewResponse]:
        key = parse_identifier(podcast_id, "podcast")
        query = (
            select(Review)
            .where(Review.podcast_id == key)
            .order_by(Review.created_at)
        )
        return await self._list(db, query)

    async def _list(self, db: AsyncSession, query) -> List[ReviewResponse]:
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing reviews: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve reviews. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [to_response(review) for review in result.scalars().all()]

    # ── Create ────────────────────────────────────────────────────────────
    async def create_review(
        self,
        db: AsyncSession,
        payload: ReviewCreate,
        principal: Principal,
    ) -> ReviewResponse:
        """
        Create a review owned by `principal`.

        Raises:
            ValidationError: required fields missing, or row rejected by storage
            ConflictError:   caller already reviewed this podcast/episode
        """
        missing = missing_fields(payload.model_dump(), REQUIRED_ON_CREATE)
        if missing:
            raise ValidationError.missing(missing)

        review = Review(
            name=payload.name,
            podcast_id=payload.podcast,
            episode=payload.episode,
            rating=payload.rating,
            review=payload.review,
            spoilers=payload.spoilers,
            reviewer_id=principal.id,
            reviewer_name=principal.name,
        )
        context = {"podcast": str(payload.podcast), "episode": payload.episode}

        if await self.find_duplicate(db, principal.id, payload.podcast, payload.episode):
            logger.warning(
                "Duplicate review rejected: reviewer=%s podcast=%s episode=%s",
                principal.id,
                payload.podcast,
                payload.episode,
            )
            raise ConflictError(message=DUPLICATE_REVIEW_MESSAGE, context=context)

        db.add(review)
        await flush_or_raise(db, DUPLICATE_REVIEW_MESSAGE, context)
        logger.info("Review %s created by %s for podcast %s", review.id, principal.id, review.podcast_id)
        return to_response(review)

    async def find_duplicate(
        self,
        db: AsyncSession,
        reviewer_id: uuid.UUID,
        podcast_id: uuid.UUID,
        episode: Optional[int],
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[uuid.UUID]:
        """Id of an existing review with the same compound key, if any."""
        query = select(Review.id).where(
            Review.reviewer_id == reviewer_id,
            Review.podcast_id == podcast_id,
            Review.episode_key == episode_key(episode),
        )
        if exclude_id is not None:
            query = query.where(Review.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    # ── Update / Delete ───────────────────────────────────────────────────
    async def update_review(
        self,
        db: AsyncSession,
        review_id: Any,
        principal: Principal,
        payload: ReviewUpdate,
    ) -> ReviewResponse:
        patch: Dict[str, Any] = {
            FIELD_MAP.get(key, key): value
            for key, value in payload.model_dump(exclude_unset=True).items()
        }
        review = await self.mutator.update(db, review_id, principal.id, patch)
        return to_response(review)

    async def delete_review(self, db: AsyncSession, review_id: Any, principal: Principal) -> None:
        await self.mutator.destroy(db, review_id, principal.id)

    async def _check_unique_on_update(
        self,
        db: AsyncSession,
        review: Review,
        changes: Dict[str, Any],
    ) -> None:
        """Moving a review to another podcast/episode must not collide with a sibling."""
        if "podcast_id" not in changes and "episode" not in changes:
            return
        podcast_id = changes.get("podcast_id", review.podcast_id)
        episode = changes["episode"] if "episode" in changes else review.episode
        if await self.find_duplicate(db, review.reviewer_id, podcast_id, episode, exclude_id=review.id):
            raise ConflictError(
                message=DUPLICATE_REVIEW_MESSAGE,
                context={"podcast": str(podcast_id), "episode": episode},
            )


review_service = ReviewService()
