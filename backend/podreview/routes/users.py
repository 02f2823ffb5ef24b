"""
PodReview Backend — User Route Handlers
========================================

Signup is public and answers with a token, like login. Profile reads and
edits always target the caller's own account; there is no user id in the path.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.auth import get_current_principal
from podreview.database import get_db_session
from podreview.schemas.common import ErrorResponse, TokenResponse
from podreview.schemas.user import Principal, UserCreate, UserResponse, UserUpdate
from podreview.services.user_service import user_service

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.post(
    "/",
    response_model=TokenResponse,
    responses={
        400: {"description": "Missing fields, bad email or weak password", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Sign up",
)
async def signup(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await user_service.signup(db, payload)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="Get my profile",
)
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_profile(db, principal)


@router.put(
    "/",
    response_model=UserResponse,
    responses={
        400: {"description": "Name emptied", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
    },
    summary="Update my profile (name, interests, bookmarks)",
)
async def update_me(
    payload: UserUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_profile(db, principal, payload)
