"""
PodReview Backend — Review Route Handlers
==========================================

`/mine` is declared before `/{podcast_id}` so it is not captured as an id.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.auth import get_current_principal
from podreview.database import get_db_session
from podreview.schemas.common import ErrorResponse
from podreview.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from podreview.schemas.user import Principal
from podreview.services.review_service import review_service

router = APIRouter(prefix="/api/review", tags=["Reviews"])


@router.get(
    "/mine",
    response_model=List[ReviewResponse],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="List the caller's own reviews",
)
async def list_my_reviews(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewResponse]:
    return await review_service.list_mine(db, principal)


@router.get(
    "/{podcast_id}",
    response_model=List[ReviewResponse],
    responses={400: {"description": "Malformed podcast ID", "model": ErrorResponse}},
    summary="List reviews of a podcast",
)
async def list_podcast_reviews(
    podcast_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewResponse]:
    return await review_service.list_for_podcast(db, podcast_id)


@router.post(
    "/",
    response_model=ReviewResponse,
    responses={
        400: {"description": "Required fields missing", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        409: {"description": "Caller already reviewed this podcast/episode", "model": ErrorResponse},
    },
    summary="Write a review",
    description=(
        "Creates a review owned by the caller. The reviewer is always taken from "
        "the bearer token. One review per podcast/episode per user."
    ),
)
async def create_review(
    payload: ReviewCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.create_review(db, payload, principal)


@router.put(
    "/{review_id}",
    response_model=ReviewResponse,
    responses={
        400: {"description": "Malformed ID or emptied required field", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Review belongs to someone else", "model": ErrorResponse},
        404: {"description": "Review not found", "model": ErrorResponse},
        409: {"description": "Would duplicate another of the caller's reviews", "model": ErrorResponse},
    },
    summary="Edit one of your reviews",
)
async def update_review(
    review_id: str,
    payload: ReviewUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.update_review(db, review_id, principal, payload)


@router.delete(
    "/{review_id}",
    status_code=204,
    response_class=Response,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Review belongs to someone else", "model": ErrorResponse},
        404: {"description": "Review not found", "model": ErrorResponse},
    },
    summary="Delete one of your reviews",
)
async def delete_review(
    review_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await review_service.delete_review(db, review_id, principal)
    return Response(status_code=204)
