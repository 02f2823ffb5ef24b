"""
PodReview Backend — Review Request/Response Schemas
====================================================

Request models keep every field optional on purpose: ReviewService decides
what is required so that a missing field is reported together with every
other missing field, as one validation error.

`reviewer` is not part of any request model. Extra keys are ignored, so a
client-supplied reviewer can never reach the service.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Column limits: String(255) names, 32-bit Integer episode numbers
NAME_MAX_LENGTH = 255
EPISODE_MAX = 2**31 - 1


class ReviewCreate(BaseModel):
    """Body of POST /api/review/."""
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH, description="Review title")
    podcast: Optional[uuid.UUID] = Field(default=None, description="Reviewed podcast ID")
    episode: Optional[int] = Field(
        default=None,
        ge=0,
        le=EPISODE_MAX,
        description="Episode number; omit to review the podcast as a whole",
    )
    rating: Optional[float] = Field(default=None, allow_inf_nan=False, description="Numeric rating")
    review: Optional[str] = Field(default=None, description="Review text")
    spoilers: Optional[bool] = Field(
        default=None,
        description="Whether the review contains spoilers (false is a valid answer)",
    )

    model_config = {"extra": "ignore"}


class ReviewUpdate(BaseModel):
    """Body of PUT /api/review/{id}. Only the keys sent are applied."""
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    podcast: Optional[uuid.UUID] = None
    episode: Optional[int] = Field(default=None, ge=0, le=EPISODE_MAX)
    rating: Optional[float] = Field(default=None, allow_inf_nan=False)
    review: Optional[str] = None
    spoilers: Optional[bool] = None

    model_config = {"extra": "ignore"}


class ReviewerSnapshot(BaseModel):
    """Author identity captured when the review was written."""
    id: uuid.UUID
    name: str


class ReviewResponse(BaseModel):
    id: uuid.UUID
    name: str
    podcast: uuid.UUID
    episode: Optional[int] = None
    rating: float
    review: str
    spoilers: bool
    reviewer: ReviewerSnapshot
    created_at: datetime
