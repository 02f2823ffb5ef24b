"""
PodReview Backend — Podcast Service Tests
==========================================

What we test:
    ✅ Create with name + description, generated id
    ✅ Duplicate name on create → ConflictError
    ✅ Unique constraint on name → ConflictError when the pre-check is bypassed
    ✅ Rename onto another podcast's name → ConflictError
    ✅ Update keeping its own name is not a conflict
    ✅ Any authenticated caller may update/delete (no owner)
    ✅ Deleting a podcast leaves its reviews in place
    ✅ Nested lists are replaced wholesale
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from podreview.exceptions import ConflictError, NotFoundError, ValidationError
from podreview.models.podcast import Podcast
from podreview.schemas.podcast import PodcastCreate, PodcastUpdate
from podreview.schemas.review import ReviewCreate
from podreview.services.podcast_service import DUPLICATE_NAME_MESSAGE, PodcastService
from podreview.services.review_service import ReviewService


class TestCreatePodcast:

    def setup_method(self):
        self.service = PodcastService()

    @pytest.mark.asyncio
    async def test_create_returns_generated_id(self, db_session):
        created = await self.service.create_podcast(db_session, PodcastCreate(name="X", description="d"))

        assert isinstance(created.id, uuid.UUID)
        assert created.name == "X"
        assert created.cast == []
        assert created.episodes == []

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(self, session_factory):
        async with session_factory() as session:
            await self.service.create_podcast(session, PodcastCreate(name="X", description="d"))
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await self.service.create_podcast(session, PodcastCreate(name="X", description="d2"))

        assert exc_info.value.message == DUPLICATE_NAME_MESSAGE

    @pytest.mark.asyncio
    async def test_storage_constraint_catches_duplicate_missed_by_precheck(self, session_factory):
        async with session_factory() as session:
            await self.service.create_podcast(session, PodcastCreate(name="X", description="d"))
            await session.commit()

        # A concurrent create that inserts between the name check and the flush
        with patch.object(self.service, "find_by_name", AsyncMock(return_value=None)):
            async with session_factory() as session:
                with pytest.raises(ConflictError) as exc_info:
                    await self.service.create_podcast(session, PodcastCreate(name="X", description="d2"))
                await session.rollback()

        assert exc_info.value.message == DUPLICATE_NAME_MESSAGE
        async with session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(Podcast).where(Podcast.name == "X")
            )
            assert result.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_missing_name_and_description(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_podcast(db_session, PodcastCreate(producer="someone"))

        assert exc_info.value.context["missing"] == ["description", "name"]

    @pytest.mark.asyncio
    async def test_nested_fields_use_wire_names(self, db_session):
        payload = PodcastCreate.model_validate(
            {
                "name": "Nested",
                "description": "d",
                "imageURL": "https://img.example/cover.png",
                "cast": [{"actor": "A", "character": "Host"}],
                "episodes": [{"name": "Pilot", "imageUrl": "https://img.example/1.png"}],
                "tags": ["comedy"],
            }
        )

        created = await self.service.create_podcast(db_session, payload)
        body = created.model_dump(by_alias=True)

        assert body["imageURL"] == "https://img.example/cover.png"
        assert body["cast"] == [{"actor": "A", "character": "Host"}]
        assert body["episodes"][0]["imageUrl"] == "https://img.example/1.png"


class TestUpdatePodcast:

    def setup_method(self):
        self.service = PodcastService()

    @pytest.mark.asyncio
    async def test_update_keeping_own_name_is_allowed(self, session_factory, create_user, create_podcast):
        caller = await create_user()
        podcast_id = await create_podcast(name="Same")

        async with session_factory() as session:
            updated = await self.service.update_podcast(
                session, str(podcast_id), caller.id, PodcastUpdate(name="Same", producer="New producer")
            )
            await session.commit()

        assert updated.name == "Same"
        assert updated.producer == "New producer"

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name_conflicts(self, session_factory, create_user, create_podcast):
        caller = await create_user()
        await create_podcast(name="Taken")
        podcast_id = await create_podcast(name="Mine")

        async with session_factory() as session:
            with pytest.raises(ConflictError):
                await self.service.update_podcast(session, str(podcast_id), caller.id, PodcastUpdate(name="Taken"))

    @pytest.mark.asyncio
    async def test_any_caller_may_update(self, session_factory, create_user, create_podcast):
        stranger = await create_user("Stranger")
        podcast_id = await create_podcast()

        async with session_factory() as session:
            updated = await self.service.update_podcast(
                session, str(podcast_id), stranger.id, PodcastUpdate(description="rewritten")
            )

        assert updated.description == "rewritten"

    @pytest.mark.asyncio
    async def test_lists_are_replaced_not_appended(self, session_factory, create_user):
        caller = await create_user()
        async with session_factory() as session:
            created = await self.service.create_podcast(
                session, PodcastCreate(name="Tags", description="d", tags=["a", "b"])
            )
            await session.commit()

        async with session_factory() as session:
            updated = await self.service.update_podcast(session, str(created.id), caller.id, PodcastUpdate(tags=["c"]))
            await session.commit()

        assert updated.tags == ["c"]

    @pytest.mark.asyncio
    async def test_blanking_description_is_rejected(self, session_factory, create_user, create_podcast):
        caller = await create_user()
        podcast_id = await create_podcast()

        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await self.service.update_podcast(session, str(podcast_id), caller.id, PodcastUpdate(description=""))


class TestDeletePodcast:

    def setup_method(self):
        self.service = PodcastService()

    @pytest.mark.asyncio
    async def test_delete_leaves_reviews_in_place(self, session_factory, create_user, create_podcast):
        caller = await create_user()
        podcast_id = await create_podcast()
        reviews = ReviewService()
        async with session_factory() as session:
            await reviews.create_review(
                session,
                ReviewCreate(podcast=podcast_id, review="text", rating=4, name="t", spoilers=False),
                caller,
            )
            await session.commit()

        async with session_factory() as session:
            await self.service.delete_podcast(session, str(podcast_id), caller.id)
            await session.commit()

        async with session_factory() as session:
            with pytest.raises(NotFoundError):
                await self.service.get_podcast(session, str(podcast_id))
            remaining = await reviews.list_for_podcast(session, str(podcast_id))

        assert len(remaining) == 1

    @pytest.mark.asyncio
    async def test_delete_unknown_podcast_is_not_found(self, db_session, create_user):
        caller = await create_user()
        with pytest.raises(NotFoundError):
            await self.service.delete_podcast(db_session, str(uuid.uuid4()), caller.id)
