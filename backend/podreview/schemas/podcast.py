"""
PodReview Backend — Podcast Request/Response Schemas
=====================================================

Wire names follow the web client's existing contract (`imageURL` on the
podcast, `imageUrl` on episodes); Python code uses `image_url` for both.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# Column limits on the podcasts table
NAME_MAX_LENGTH = 255
URL_MAX_LENGTH = 2048


class CastMember(BaseModel):
    actor: Optional[str] = None
    character: Optional[str] = None


class EpisodeItem(BaseModel):
    name: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    model_config = {"populate_by_name": True}


class PodcastCreate(BaseModel):
    """
    Body of POST /api/podcast/.

    `name` and `description` are required; PodcastService checks them so that
    both can be reported in a single error.
    """
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    link: Optional[str] = Field(default=None, max_length=URL_MAX_LENGTH)
    release: Optional[datetime] = None
    producer: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    cast: Optional[List[CastMember]] = None
    length: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    description: Optional[str] = None
    episodes: Optional[List[EpisodeItem]] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(default=None, max_length=URL_MAX_LENGTH, alias="imageURL")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class PodcastUpdate(PodcastCreate):
    """Body of PUT /api/podcast/{id}. Only the keys sent are applied."""


class PodcastResponse(BaseModel):
    id: uuid.UUID
    name: str
    link: Optional[str] = None
    release: Optional[datetime] = None
    producer: Optional[str] = None
    cast: List[CastMember] = Field(default_factory=list)
    length: Optional[float] = None
    description: str
    episodes: List[EpisodeItem] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    created_at: datetime

    model_config = {"populate_by_name": True, "from_attributes": True}
