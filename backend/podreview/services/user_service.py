"""
PodReview Backend — User Service
=================================

What:  Signup, login and self-service profile edits.
Who:   Called by the /api/user and /auth/local route handlers.

Profile edits run through the same mutation engine as reviews, with the
account itself as owner and an allowlist of name, interests and bookmarks.
Renaming an account does not touch the reviewer name stored on reviews
already written.
"""

import logging
from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.auth import (
    PASSWORD_POLICY_MESSAGE,
    create_access_token,
    hash_password,
    is_strong_password,
    verify_password,
)
from podreview.exceptions import AuthenticationError, ConflictError, ValidationError
from podreview.models.user import User
from podreview.schemas.common import TokenResponse
from podreview.schemas.user import Principal, UserCreate, UserResponse, UserUpdate
from podreview.services.mutation import RecordMutator, flush_or_raise, missing_fields

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "The specified email address is already in use."

REQUIRED_ON_SIGNUP = ("name", "email", "password")


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        provider=user.provider,
        role=user.role,
        interests=user.interests or [],
        bookmarks=user.bookmarks or [],
    )


class UserService:
    """Stateless account operations."""

    def __init__(self):
        self.mutator: RecordMutator[User] = RecordMutator(
            User,
            resource="user",
            updatable=("name", "interests", "bookmarks"),
            required=("name",),
            owner_of=lambda user: user.id,
        )

    async def signup(self, db: AsyncSession, payload: UserCreate) -> TokenResponse:
        """
        Create a local account and return a token for it.

        Raises:
            ValidationError: missing fields or weak password
            ConflictError:   email already registered
        """
        missing = missing_fields(payload.model_dump(), REQUIRED_ON_SIGNUP)
        if missing:
            raise ValidationError.missing(missing)
        if not is_strong_password(payload.password):
            raise ValidationError(message=PASSWORD_POLICY_MESSAGE, field="password")

        email = payload.email.lower()
        existing = await db.execute(select(User.id).where(User.email == email).limit(1))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(message=DUPLICATE_EMAIL_MESSAGE, context={"field": "email"})

        user = User(
            name=payload.name.strip(),
            email=email,
            password_hash=hash_password(payload.password),
            provider="local",
            role="user",
        )
        db.add(user)
        await flush_or_raise(db, DUPLICATE_EMAIL_MESSAGE, {"field": "email"})
        logger.info("User %s signed up", user.id)
        return TokenResponse(token=create_access_token(user.id, user.role))

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> TokenResponse:
        """
        Exchange email + password for a token.

        Raises:
            AuthenticationError: unknown email or wrong password (same message for both)
        """
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError(message="Invalid email or password")
        return TokenResponse(token=create_access_token(user.id, user.role))

    async def get_profile(self, db: AsyncSession, principal: Principal) -> UserResponse:
        user = await self.mutator.fetch(db, principal.id)
        return to_response(user)

    async def update_profile(
        self,
        db: AsyncSession,
        principal: Principal,
        payload: UserUpdate,
    ) -> UserResponse:
        patch: Dict[str, Any] = payload.model_dump(exclude_unset=True)
        if patch.get("interests") is None and "interests" in patch:
            patch["interests"] = []
        if "bookmarks" in patch:
            patch["bookmarks"] = [str(podcast_id) for podcast_id in patch["bookmarks"] or []]
        user = await self.mutator.update(db, principal.id, principal.id, patch)
        return to_response(user)


user_service = UserService()
