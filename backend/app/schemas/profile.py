"""
Biodex Backend - Profile Schemas
=================================

What:  Read-only API contract for profiles (the users page and /api/profiles).
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    """One profile card: who the user is and what they wrote about themselves."""
    id: uuid.UUID = Field(description="Auth user id")
    display_name: str = Field(description="Name shown on the card")
    email: str = Field(description="Contact email")
    biography: Optional[str] = Field(default=None, description="Free-text biography")

    model_config = {"from_attributes": True}


class ProfileListResponse(BaseModel):
    """All profiles, newest id first."""
    profiles: List[ProfileResponse] = Field(description="Profiles ordered by id descending")
