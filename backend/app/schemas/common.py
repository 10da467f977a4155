"""
Biodex Backend - Shared Response Schemas
=========================================

What:  Pydantic models shared by every API area: error envelope, health
       report and the notification triple shown to users.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NotificationVariant(str, Enum):
    """Severity of a user-facing notification."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    """
    What:  A (title, description, severity) triple for the notification surface.
    How:   Fire-and-forget. Pages flash these into the signed session cookie
           and render them once; the JSON API returns them in the body.
    """
    title: str = Field(description="Short headline, e.g. 'Changes Saved!'")
    description: str = Field(default="", description="Longer explanation")
    variant: NotificationVariant = Field(
        default=NotificationVariant.DEFAULT,
        description="'destructive' for failures, 'default' otherwise",
    )


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Please fix the highlighted fields",
            "details": {"errors": {"kingdom": "Input should be 'Animalia', ..."}},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response: service status and database connectivity."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
