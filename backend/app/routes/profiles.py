"""
Biodex Backend - Profile API Route Handlers
============================================

What:  GET /api/profiles, the JSON counterpart of the users page.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, require_session
from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.profile import ProfileListResponse
from app.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.get(
    "/profiles",
    response_model=ProfileListResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all profiles",
    description="Returns every profile ordered by id descending.",
)
async def list_profiles(
    response: Response,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileListResponse:
    profiles = await profile_service.list_profiles(db)
    response.headers["X-Total-Count"] = str(len(profiles))
    return ProfileListResponse(profiles=profiles)
