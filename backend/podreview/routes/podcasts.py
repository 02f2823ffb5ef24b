"""
PodReview Backend — Podcast Route Handlers
===========================================

Reads are public. Writes need a bearer token but no ownership: any signed-in
user may edit or delete any podcast.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from podreview.auth import get_current_principal
from podreview.database import get_db_session
from podreview.schemas.common import ErrorResponse
from podreview.schemas.podcast import PodcastCreate, PodcastResponse, PodcastUpdate
from podreview.schemas.user import Principal
from podreview.services.podcast_service import podcast_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/podcast", tags=["Podcasts"])


@router.get(
    "/",
    response_model=List[PodcastResponse],
    summary="List all podcasts",
)
async def list_podcasts(
    db: AsyncSession = Depends(get_db_session),
) -> List[PodcastResponse]:
    return await podcast_service.list_podcasts(db)


@router.get(
    "/{podcast_id}",
    response_model=PodcastResponse,
    responses={
        400: {"description": "Malformed podcast ID", "model": ErrorResponse},
        404: {"description": "Podcast not found", "model": ErrorResponse},
    },
    summary="Get one podcast",
)
async def get_podcast(
    podcast_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> PodcastResponse:
    return await podcast_service.get_podcast(db, podcast_id)


@router.post(
    "/",
    response_model=PodcastResponse,
    responses={
        400: {"description": "Name or description missing", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        409: {"description": "Name already taken", "model": ErrorResponse},
    },
    summary="Create a podcast",
)
async def create_podcast(
    payload: PodcastCreate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> PodcastResponse:
    logger.info("Podcast create requested by %s", principal.id)
    return await podcast_service.create_podcast(db, payload)


@router.put(
    "/{podcast_id}",
    response_model=PodcastResponse,
    responses={
        400: {"description": "Malformed ID or emptied required field", "model": ErrorResponse},
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Podcast not found", "model": ErrorResponse},
        409: {"description": "Name already taken", "model": ErrorResponse},
    },
    summary="Update a podcast",
)
async def update_podcast(
    podcast_id: str,
    payload: PodcastUpdate,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> PodcastResponse:
    return await podcast_service.update_podcast(db, podcast_id, principal.id, payload)


@router.delete(
    "/{podcast_id}",
    status_code=204,
    response_class=Response,
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        404: {"description": "Podcast not found", "model": ErrorResponse},
    },
    summary="Delete a podcast",
)
async def delete_podcast(
    podcast_id: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await podcast_service.delete_podcast(db, podcast_id, principal.id)
    return Response(status_code=204)
