"""
Biodex Backend - Species Service (Data Store Access)
=====================================================

What:  Row-level operations on the species table: select all, get one,
       insert, partial update by id, delete by id.
Why:   The list page and the species editor talk to the store only through
       this service, so every outcome is either a SpeciesResponse or one of
       our exceptions carrying a human-readable message.
Who:   Called by page routes, API routes and SpeciesEditor.

Error Handling Strategy:
    NotFoundError        no row matched the id (404, or a failure
                         notification in the editor)
    DatabaseError        anything the driver raised, with a generic message;
                         the original exception type is kept in `context`

Design Decision:
    SpeciesService is stateless; the database session is passed into every
    call and committed by get_db_session() when the request succeeds.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.species import Species
from app.schemas.species import SpeciesForm, SpeciesResponse

logger = logging.getLogger(__name__)


class SpeciesService:
    """Business logic layer for species rows."""

    async def list_species(self, db: AsyncSession) -> List[SpeciesResponse]:
        """
        Fetch every species ordered by id descending (newest first).

        Raises:
            DatabaseError: the query failed
        """
        try:
            result = await db.execute(select(Species).order_by(desc(Species.id)))
            rows = result.scalars().all()
        except Exception as e:
            logger.error("Database error listing species: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load species. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [SpeciesResponse.model_validate(row) for row in rows]

    async def get_species(self, db: AsyncSession, species_id: int) -> SpeciesResponse:
        """
        Fetch a single species by id.

        Raises:
            NotFoundError: no species has this id
            DatabaseError: the query failed
        """
        try:
            result = await db.execute(select(Species).where(Species.id == species_id))
            row = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching species %s: %s", species_id, str(e))
            raise DatabaseError(
                message="Could not load the species. Please try again.",
                context={"species_id": species_id},
            )

        if row is None:
            raise NotFoundError(resource="species", resource_id=str(species_id))
        return SpeciesResponse.model_validate(row)

    async def create_species(
        self, db: AsyncSession, author: uuid.UUID, form: SpeciesForm
    ) -> SpeciesResponse:
        """
        Insert a new species owned by `author`.

        Raises:
            DatabaseError: the insert failed
        """
        species = Species(author=author, **form.model_dump())
        try:
            db.add(species)
            await db.flush()  # assigns the identity id
        except Exception as e:
            logger.error("Database error creating species: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the species. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Species %s created by %s", species.id, author)
        return SpeciesResponse.model_validate(species)

    async def update_species(
        self, db: AsyncSession, species_id: int, form: SpeciesForm
    ) -> SpeciesResponse:
        """
        Partial update keyed by id: writes exactly the validated form fields.

        Query plan:
            UPDATE species SET ... WHERE id = :id RETURNING *

        Raises:
            NotFoundError: no species has this id
            DatabaseError: the update failed
        """
        values = form.model_dump()
        try:
            result = await db.execute(
                update(Species)
                .where(Species.id == species_id)
                .values(**values)
                .returning(Species)
            )
            row = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error updating species %s: %s", species_id, str(e))
            raise DatabaseError(
                message="Could not save your changes. Please try again.",
                context={"species_id": species_id, "error_type": type(e).__name__},
            )

        if row is None:
            raise NotFoundError(resource="species", resource_id=str(species_id))

        logger.info("Species %s updated", species_id)
        return SpeciesResponse.model_validate(row)

    async def delete_species(self, db: AsyncSession, species_id: int) -> None:
        """
        Delete by id.

        Raises:
            NotFoundError: no species has this id
            DatabaseError: the delete failed
        """
        try:
            result = await db.execute(delete(Species).where(Species.id == species_id))
        except Exception as e:
            logger.error("Database error deleting species %s: %s", species_id, str(e))
            raise DatabaseError(
                message="Could not delete the species. Please try again.",
                context={"species_id": species_id, "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="species", resource_id=str(species_id))

        logger.info("Species %s deleted", species_id)


# ── Singleton Instance ────────────────────────────────────────────────────
species_service = SpeciesService()
