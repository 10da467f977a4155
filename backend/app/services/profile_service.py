"""
Biodex Backend - Profile Service
=================================

What:  Read-only access to the profiles table for the users page.
How:   One query, newest id first. Driver failures are wrapped in
       DatabaseError so they are never mistaken for "no profiles".
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.profile import Profile
from app.schemas.profile import ProfileResponse

logger = logging.getLogger(__name__)


class ProfileService:
    """Lists profiles. Profiles are created by the auth service, never here."""

    async def list_profiles(self, db: AsyncSession) -> List[ProfileResponse]:
        """
        Fetch every profile ordered by id descending.

        Query plan:
            SELECT * FROM profiles ORDER BY id DESC

        Raises:
            DatabaseError: the query failed (the caller must not render the
                           empty state in that case)
        """
        try:
            result = await db.execute(select(Profile).order_by(desc(Profile.id)))
            rows = result.scalars().all()
        except Exception as e:
            logger.error("Database error listing profiles: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load profiles. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [ProfileResponse.model_validate(row) for row in rows]


profile_service = ProfileService()
