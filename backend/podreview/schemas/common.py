"""
PodReview Backend — Shared Response Schemas
============================================

What:  Response models used by more than one router: the error envelope,
       the token envelope and the health report.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body returned by every global exception handler.

    Example:
        {
            "error": "conflict",
            "message": "You already have a review for this podcast/episode!",
            "details": {"podcast": "…", "episode": null},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class TokenResponse(BaseModel):
    """Returned by signup and login. Send it back as `Authorization: Bearer <token>`."""
    token: str = Field(description="Signed JWT access token")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
