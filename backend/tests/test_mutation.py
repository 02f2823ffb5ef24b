"""
PodReview Backend — Mutation Engine Unit Tests
===============================================

What:  Tests for RecordMutator and its helpers, with a mocked session.

What we test:
    ✅ Identifier parsing (malformed → ValidationError)
    ✅ Blank detection (False and 0 are values, not blanks)
    ✅ Allowlisted shallow merge (lists replaced, unknown keys ignored)
    ✅ Ownership predicate: mismatch → AuthorizationError, nothing written
    ✅ No predicate: any caller may update/delete
    ✅ Missing record → NotFoundError, never an attribute error
    ✅ Unique violations at flush → ConflictError
    ✅ Values a column refuses at flush → ValidationError
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from podreview.exceptions import (
    AuthorizationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from podreview.services.mutation import (
    RecordMutator,
    apply_patch,
    flush_or_raise,
    is_blank,
    is_unique_violation,
    missing_fields,
    parse_identifier,
)


def make_record(owner_id, **fields):
    defaults = {"id": uuid.uuid4(), "owner_id": owner_id, "title": "t", "tags": ["a"]}
    defaults.update(fields)
    return SimpleNamespace(**defaults)


def make_mutator(owned=True, before_write=None):
    return RecordMutator(
        MagicMock(name="Model"),
        resource="thing",
        updatable=("title", "tags", "score"),
        required=("title",),
        owner_of=(lambda record: record.owner_id) if owned else None,
        conflict_message="duplicate thing",
        before_write=before_write,
    )


class TestHelpers:

    def test_parse_identifier_accepts_uuid_string(self):
        value = uuid.uuid4()
        assert parse_identifier(str(value)) == value
        assert parse_identifier(value) is value

    @pytest.mark.parametrize("raw", ["not-an-id", "123", "", None])
    def test_parse_identifier_rejects_malformed(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_identifier(raw, "review")
        assert exc_info.value.field == "id"
        assert "review" in exc_info.value.message

    def test_false_and_zero_are_not_blank(self):
        assert not is_blank(False)
        assert not is_blank(0)
        assert is_blank(None)
        assert is_blank("   ")

    def test_missing_fields_lists_every_absent_name(self):
        values = {"name": "t", "spoilers": False, "review": "", "rating": None}
        assert missing_fields(values, ("name", "spoilers", "review", "rating", "podcast")) == [
            "review",
            "rating",
            "podcast",
        ]

    def test_apply_patch_replaces_lists_and_ignores_unknown_keys(self):
        record = make_record(uuid.uuid4(), tags=["a", "b"])
        original_owner = record.owner_id

        applied = apply_patch(
            record,
            {"tags": ["c"], "owner_id": uuid.uuid4(), "title": "new"},
            allowed=("title", "tags"),
        )

        assert record.tags == ["c"]
        assert record.title == "new"
        assert record.owner_id == original_owner
        assert sorted(applied) == ["tags", "title"]

    def test_is_unique_violation_recognises_sqlite_and_postgres(self):
        sqlite_error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: podcasts.name"))
        pg_orig = Exception("duplicate")
        pg_orig.sqlstate = "23505"
        pg_error = IntegrityError("INSERT", {}, pg_orig)
        fk_error = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        assert is_unique_violation(sqlite_error)
        assert is_unique_violation(pg_error)
        assert not is_unique_violation(fk_error)


class TestFlushOrRaise:

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self, mock_db_session):
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: reviews.reviewer_id")
        )
        with pytest.raises(ConflictError) as exc_info:
            await flush_or_raise(mock_db_session, "already exists")
        assert exc_info.value.message == "already exists"

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_validation_error(self, mock_db_session):
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("NOT NULL constraint failed: reviews.rating")
        )
        with pytest.raises(ValidationError):
            await flush_or_raise(mock_db_session, "already exists")

    @pytest.mark.asyncio
    async def test_out_of_range_value_becomes_validation_error(self, mock_db_session):
        mock_db_session.flush.side_effect = DataError(
            "INSERT", {}, Exception("value too long for type character varying(255)")
        )
        with pytest.raises(ValidationError) as exc_info:
            await flush_or_raise(mock_db_session, "already exists")
        assert "out of range" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_operational_error_becomes_database_error(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with pytest.raises(DatabaseError):
            await flush_or_raise(mock_db_session, "already exists")


class TestRecordMutatorUpdate:

    @pytest.mark.asyncio
    async def test_owner_update_merges_and_flushes(self, mock_db_session):
        owner = uuid.uuid4()
        record = make_record(owner)
        mock_db_session.get.return_value = record

        result = await make_mutator().update(mock_db_session, str(record.id), owner, {"title": "changed"})

        assert result is record
        assert record.title == "changed"
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_owner_update_is_rejected_without_writing(self, mock_db_session):
        record = make_record(uuid.uuid4())
        mock_db_session.get.return_value = record
        hook = AsyncMock()

        with pytest.raises(AuthorizationError) as exc_info:
            await make_mutator(before_write=hook).update(
                mock_db_session, record.id, uuid.uuid4(), {"title": "hijacked"}
            )

        assert "not your thing" in exc_info.value.message
        assert record.title == "t"
        hook.assert_not_awaited()
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_without_owner_predicate_any_caller_may_update(self, mock_db_session):
        record = make_record(uuid.uuid4())
        mock_db_session.get.return_value = record

        await make_mutator(owned=False).update(mock_db_session, record.id, uuid.uuid4(), {"score": 3})

        assert record.score == 3

    @pytest.mark.asyncio
    async def test_clearing_required_field_is_rejected(self, mock_db_session):
        owner = uuid.uuid4()
        record = make_record(owner)
        mock_db_session.get.return_value = record

        with pytest.raises(ValidationError) as exc_info:
            await make_mutator().update(mock_db_session, record.id, owner, {"title": None})

        assert exc_info.value.context["fields"] == ["title"]
        assert record.title == "t"

    @pytest.mark.asyncio
    async def test_before_write_hook_can_veto(self, mock_db_session):
        owner = uuid.uuid4()
        record = make_record(owner)
        mock_db_session.get.return_value = record
        hook = AsyncMock(side_effect=ConflictError(message="taken"))

        with pytest.raises(ConflictError):
            await make_mutator(before_write=hook).update(mock_db_session, record.id, owner, {"title": "x"})

        hook.assert_awaited_once_with(mock_db_session, record, {"title": "x"})
        assert record.title == "t"

    @pytest.mark.asyncio
    async def test_missing_record_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await make_mutator().update(mock_db_session, uuid.uuid4(), uuid.uuid4(), {"title": "x"})

    @pytest.mark.asyncio
    async def test_malformed_id_is_rejected_before_lookup(self, mock_db_session):
        with pytest.raises(ValidationError):
            await make_mutator().update(mock_db_session, "nope", uuid.uuid4(), {"title": "x"})
        mock_db_session.get.assert_not_awaited()


class TestRecordMutatorDestroy:

    @pytest.mark.asyncio
    async def test_owner_delete(self, mock_db_session):
        owner = uuid.uuid4()
        record = make_record(owner)
        mock_db_session.get.return_value = record

        await make_mutator().destroy(mock_db_session, record.id, owner)

        mock_db_session.delete.assert_awaited_once_with(record)
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_owner_delete_is_rejected(self, mock_db_session):
        record = make_record(uuid.uuid4())
        mock_db_session.get.return_value = record

        with pytest.raises(AuthorizationError) as exc_info:
            await make_mutator().destroy(mock_db_session, record.id, uuid.uuid4())

        assert "cannot delete" in exc_info.value.message
        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_of_absent_record_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await make_mutator().destroy(mock_db_session, uuid.uuid4(), uuid.uuid4())
        mock_db_session.delete.assert_not_awaited()
