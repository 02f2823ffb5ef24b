"""
PodReview Backend — Login Route
================================

POST /auth/local exchanges an email and password for a bearer token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.database import get_db_session
from podreview.schemas.common import ErrorResponse, TokenResponse
from podreview.schemas.user import LoginRequest
from podreview.services.user_service import user_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/local",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await user_service.authenticate(db, payload.email, payload.password)
