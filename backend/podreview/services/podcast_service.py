"""
PodReview Backend — Podcast Service
====================================

What:  Business rules for podcasts: listing, lookup, and writes guarded by
       the unique-name rule.
Who:   Called by the /api/podcast route handlers.

Podcasts have no owner, so update and delete run through the mutation engine
without an ownership predicate: any authenticated caller may proceed.

Unique name:
    Checked by a query before each write (a record never clashes with itself
    on update) and enforced by the unique constraint on `podcasts.name`,
    whose violation is reported with the same ConflictError.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.exceptions import ConflictError, DatabaseError, ValidationError
from podreview.models.podcast import Podcast
from podreview.schemas.podcast import PodcastCreate, PodcastResponse, PodcastUpdate
from podreview.services.mutation import RecordMutator, flush_or_raise, missing_fields

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "A podcast with this name already exists."

REQUIRED_FIELDS = ("name", "description")

UPDATABLE_FIELDS = (
    "name",
    "link",
    "release",
    "producer",
    "cast",
    "length",
    "description",
    "episodes",
    "tags",
    "image_url",
)

LIST_FIELDS = ("cast", "episodes", "tags")


def column_values(payload: PodcastCreate) -> Dict[str, Any]:
    """
    Fields the client actually sent, converted to column values.

    Nested models become plain dicts in their wire shape; a null list
    becomes an empty one.
    """
    values: Dict[str, Any] = {}
    for field in payload.model_fields_set:
        value = getattr(payload, field)
        if field in LIST_FIELDS and value is None:
            value = []
        elif field == "cast":
            value = [member.model_dump() for member in value]
        elif field == "episodes":
            value = [episode.model_dump(by_alias=True) for episode in value]
        values[field] = value
    return values


def to_response(podcast: Podcast) -> PodcastResponse:
    return PodcastResponse(
        id=podcast.id,
        name=podcast.name,
        link=podcast.link,
        release=podcast.release,
        producer=podcast.producer,
        cast=podcast.cast or [],
        length=podcast.length,
        description=podcast.description,
        episodes=podcast.episodes or [],
        tags=podcast.tags or [],
        image_url=podcast.image_url,
        created_at=podcast.created_at,
    )


class PodcastService:
    """Stateless podcast operations."""

    def __init__(self):
        self.mutator: RecordMutator[Podcast] = RecordMutator(
            Podcast,
            resource="podcast",
            updatable=UPDATABLE_FIELDS,
            required=REQUIRED_FIELDS,
            owner_of=None,
            conflict_message=DUPLICATE_NAME_MESSAGE,
            before_write=self._check_name_on_update,
        )

    async def list_podcasts(self, db: AsyncSession) -> List[PodcastResponse]:
        try:
            result = await db.execute(select(Podcast).order_by(Podcast.created_at))
        except SQLAlchemyError as e:
            logger.error("Database error listing podcasts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve podcasts. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [to_response(podcast) for podcast in result.scalars().all()]

    async def get_podcast(self, db: AsyncSession, podcast_id: Any) -> PodcastResponse:
        """
        Raises:
            ValidationError: malformed id
            NotFoundError:   no podcast with that id
        """
        podcast = await self.mutator.fetch(db, podcast_id)
        return to_response(podcast)

    async def create_podcast(self, db: AsyncSession, payload: PodcastCreate) -> PodcastResponse:
        """
        Raises:
            ValidationError: name or description missing
            ConflictError:   name already taken
        """
        values = column_values(payload)
        missing = missing_fields(values, REQUIRED_FIELDS)
        if missing:
            raise ValidationError.missing(missing)

        if await self.find_by_name(db, values["name"]):
            raise ConflictError(message=DUPLICATE_NAME_MESSAGE, context={"name": values["name"]})

        podcast = Podcast(**values)
        db.add(podcast)
        await flush_or_raise(db, DUPLICATE_NAME_MESSAGE, {"name": values["name"]})
        logger.info("Podcast %s created: %s", podcast.id, podcast.name)
        return to_response(podcast)

    async def update_podcast(
        self,
        db: AsyncSession,
        podcast_id: Any,
        caller_id: uuid.UUID,
        payload: PodcastUpdate,
    ) -> PodcastResponse:
        podcast = await self.mutator.update(db, podcast_id, caller_id, column_values(payload))
        return to_response(podcast)

    async def delete_podcast(self, db: AsyncSession, podcast_id: Any, caller_id: uuid.UUID) -> None:
        # Reviews reference podcasts by id only and are left in place
        await self.mutator.destroy(db, podcast_id, caller_id)

    async def find_by_name(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[uuid.UUID]:
        query = select(Podcast.id).where(Podcast.name == name)
        if exclude_id is not None:
            query = query.where(Podcast.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def _check_name_on_update(
        self,
        db: AsyncSession,
        podcast: Podcast,
        changes: Dict[str, Any],
    ) -> None:
        name = changes.get("name")
        if name is None or name == podcast.name:
            return
        if await self.find_by_name(db, name, exclude_id=podcast.id):
            raise ConflictError(message=DUPLICATE_NAME_MESSAGE, context={"name": name})


podcast_service = PodcastService()
