"""
PodReview Backend — Ownership-Checked Mutation Engine
======================================================

What:  The shared update/delete path for every record kind.
How:   One `RecordMutator` per model, configured with
         - the fields a patch may touch (allowlist),
         - the fields that may never be set to null,
         - an optional ownership predicate (absent = any caller may proceed),
         - an optional pre-write hook for uniqueness pre-checks.
Who:   ReviewService (owner = reviewer), PodcastService (no owner),
       UserService (owner = the account itself).

Update flow:
    parse id ─▶ fetch ─▶ ownership check ─▶ filter patch ─▶ pre-write hook
             ─▶ shallow merge ─▶ flush (unique violation → ConflictError)

Delete flow:
    parse id ─▶ fetch ─▶ ownership check ─▶ delete ─▶ flush

Every check runs before the first write. A failed check leaves the record
exactly as it was.
"""

import logging
import uuid
from typing import (
    Any,
    Awaitable,
    Callable,
    Collection,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
)

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.exceptions import (
    AuthorizationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

OwnerOf = Callable[[Any], uuid.UUID]
PreWriteHook = Callable[[AsyncSession, Any, Dict[str, Any]], Awaitable[None]]


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def parse_identifier(raw: Any, resource: str = "record") -> uuid.UUID:
    """
    Turn a path parameter into a UUID.

    Raises:
        ValidationError: the value is not a well-formed identifier.
    """
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        raise ValidationError(
            message=f"'{raw}' is not a valid {resource} ID",
            field="id",
        )


def is_blank(value: Any) -> bool:
    """None and empty/whitespace-only strings count as absent. False and 0 do not."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def missing_fields(values: Mapping[str, Any], required: Collection[str]) -> List[str]:
    return [name for name in required if is_blank(values.get(name))]


def apply_patch(record: Any, patch: Mapping[str, Any], allowed: Collection[str]) -> List[str]:
    """
    Shallow-merge `patch` into `record`, restricted to `allowed` attributes.

    Scalars are overwritten; lists are replaced wholesale, never appended.
    Keys outside the allowlist are ignored.

    Returns:
        Names of the attributes that were written.
    """
    applied = []
    for key, value in patch.items():
        if key not in allowed:
            continue
        setattr(record, key, list(value) if isinstance(value, (list, tuple)) else value)
        applied.append(key)
    return applied


def is_unique_violation(error: IntegrityError) -> bool:
    """True for unique-constraint failures on PostgreSQL (asyncpg) and SQLite."""
    orig = getattr(error, "orig", None)
    if getattr(orig, "sqlstate", None) == "23505" or getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig if orig is not None else error).lower()
    return "unique" in text or "duplicate key" in text


async def flush_or_raise(
    db: AsyncSession,
    conflict_message: str,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Flush pending writes and translate storage failures.

    Unique-constraint violations are the authoritative conflict signal, so
    they become ConflictError even when an earlier pre-check passed.

    Raises:
        ConflictError:   a unique constraint rejected the write
        ValidationError: any other integrity rule rejected the row, or a value
                         does not fit its column
        DatabaseError:   the write failed for another reason
    """
    try:
        await db.flush()
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.warning("Unique constraint rejected write: %s", conflict_message)
            raise ConflictError(message=conflict_message, context=dict(context or {})) from e
        logger.warning("Integrity error on write: %s", e.orig)
        raise ValidationError(
            message="The record was rejected by the database",
            context={"error_type": type(e.orig).__name__},
        ) from e
    except DataError as e:
        logger.warning("Value rejected by the database: %s", e.orig)
        raise ValidationError(
            message="A value is out of range for its field",
            context={"error_type": type(e.orig).__name__},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error on write: %s", str(e), exc_info=True)
        raise DatabaseError(context={"error_type": type(e).__name__}) from e


# ══════════════════════════════════════════════════════════════════════════
# Engine
# ══════════════════════════════════════════════════════════════════════════

class RecordMutator(Generic[RecordT]):
    """
    Update/delete gate for one model.

    Args:
        model:            ORM class to operate on
        resource:         Human-readable name used in error messages
        updatable:        Attributes a patch may set
        required:         Attributes a patch may not set to null/empty
        owner_of:         Returns the owning user id of a record; None means
                          the record kind has no owner
        conflict_message: Message for unique violations raised by the flush
        before_write:     Awaited with (db, record, changes) after the
                          ownership check and before anything is written
    """

    def __init__(
        self,
        model: Type[RecordT],
        resource: str,
        updatable: Collection[str],
        required: Collection[str] = (),
        owner_of: Optional[OwnerOf] = None,
        conflict_message: str = "The record conflicts with an existing one",
        before_write: Optional[PreWriteHook] = None,
    ):
        self.model = model
        self.resource = resource
        self.updatable = frozenset(updatable)
        self.required = frozenset(required)
        self.owner_of = owner_of
        self.conflict_message = conflict_message
        self.before_write = before_write

    async def fetch(self, db: AsyncSession, record_id: Any) -> RecordT:
        """
        Load a record by id.

        Raises:
            ValidationError: malformed id
            NotFoundError:   no such record
        """
        key = parse_identifier(record_id, self.resource)
        try:
            record = await db.get(self.model, key)
        except SQLAlchemyError as e:
            logger.error("Database error fetching %s %s: %s", self.resource, key, str(e))
            raise DatabaseError(
                message=f"Could not retrieve the {self.resource}. Please try again.",
                context={"resource_id": str(key)},
            ) from e
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=str(key))
        return record

    def check_owner(self, record: RecordT, caller_id: Optional[uuid.UUID], action: str) -> None:
        if self.owner_of is None:
            return
        if self.owner_of(record) != caller_id:
            logger.warning(
                "Rejected %s of %s %s by non-owner %s",
                action,
                self.resource,
                getattr(record, "id", "?"),
                caller_id,
            )
            raise AuthorizationError(
                message=f"This is not your {self.resource} - you cannot {action} it.",
                context={"resource": self.resource},
            )

    def filter_patch(self, patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Keep allowlisted keys; reject nulls for required attributes."""
        changes = {k: v for k, v in patch.items() if k in self.updatable}
        cleared = [k for k in changes if k in self.required and is_blank(changes[k])]
        if cleared:
            raise ValidationError(
                message=f"Fields cannot be empty: {', '.join(sorted(cleared))}",
                context={"fields": sorted(cleared)},
            )
        return changes

    async def update(
        self,
        db: AsyncSession,
        record_id: Any,
        caller_id: Optional[uuid.UUID],
        patch: Mapping[str, Any],
    ) -> RecordT:
        """
        Apply a partial update on behalf of `caller_id`.

        Returns:
            The merged, flushed record.

        Raises:
            ValidationError, NotFoundError, AuthorizationError, ConflictError,
            DatabaseError
        """
        record = await self.fetch(db, record_id)
        self.check_owner(record, caller_id, "change")

        changes = self.filter_patch(patch)
        if self.before_write is not None:
            await self.before_write(db, record, changes)

        applied = apply_patch(record, changes, self.updatable)
        await flush_or_raise(
            db,
            self.conflict_message,
            context={"resource": self.resource, "fields": applied},
        )
        logger.info("Updated %s %s: %s", self.resource, record.id, ", ".join(applied) or "no changes")
        return record

    async def destroy(
        self,
        db: AsyncSession,
        record_id: Any,
        caller_id: Optional[uuid.UUID],
    ) -> None:
        """
        Delete a record on behalf of `caller_id`.

        A record that is already gone yields NotFoundError, so repeating a
        delete is safe to call and distinguishable from success.
        """
        record = await self.fetch(db, record_id)
        self.check_owner(record, caller_id, "delete")

        try:
            await db.delete(record)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting %s %s: %s", self.resource, record.id, str(e))
            raise DatabaseError(context={"resource_id": str(record.id)}) from e
        logger.info("Deleted %s %s", self.resource, record.id)
