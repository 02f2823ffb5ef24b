"""
PodReview Backend — Authentication Helpers
===========================================

What:  Password hashing, access-token signing, and the FastAPI dependency
       that resolves a bearer token to the acting Principal.
How:   passlib's CryptContext (salted PBKDF2-SHA512) for passwords,
       python-jose for HS256 JWTs, FastAPI's OAuth2PasswordBearer to read
       the `Authorization: Bearer …` header.

Token claims:
    sub:  user id (string UUID)
    role: user role at signing time
    exp:  expiry, `access_token_expire_minutes` after issue
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.config import settings
from podreview.database import get_db_session
from podreview.exceptions import AuthenticationError
from podreview.models.user import User
from podreview.schemas.user import Principal

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["pbkdf2_sha512"],
    deprecated="auto",
    pbkdf2_sha512__rounds=settings.password_hash_rounds,
)

# At least 8 characters, one lowercase, one uppercase, one of @#$%^&+=
PASSWORD_POLICY = re.compile(r"^(?=.{8,})(?=.*[a-z])(?=.*[A-Z])(?=.*[@#$%^&+=]).*$")

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters, and contain at least one uppercase "
    "and one lowercase letter, and one special character"
)

# auto_error=False: a missing header is reported through AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/local", auto_error=False)


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Checks if a plain password matches a stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def is_strong_password(password: str) -> bool:
    return bool(PASSWORD_POLICY.match(password))


# ── Tokens ────────────────────────────────────────────────────────────────
def create_access_token(user_id: uuid.UUID, role: str) -> str:
    """Sign a JWT for the given user."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Validate a token and return the user id it was issued for.

    Raises:
        AuthenticationError: bad signature, expired, or malformed subject.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(context={"reason": type(e).__name__})

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError(context={"reason": "missing subject"})
    try:
        return uuid.UUID(subject)
    except (TypeError, ValueError):
        raise AuthenticationError(context={"reason": "malformed subject"})


# ── Identity Resolver ─────────────────────────────────────────────────────
async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    """
    FastAPI dependency: resolve the bearer token to the acting Principal.

    Runs before any core logic on authenticated routes. The user row is
    re-read on every request so the principal carries the current name,
    which is what new reviews snapshot as their reviewer name.

    Raises:
        AuthenticationError (→ 401): missing/invalid token or unknown user.
    """
    if not token:
        raise AuthenticationError(message="Authentication required")

    user_id = decode_access_token(token)
    user = await db.get(User, user_id)
    if user is None:
        logger.warning("Token presented for unknown user %s", user_id)
        raise AuthenticationError()

    return Principal(id=user.id, name=user.name, role=user.role)
