"""
Biodex Backend - Species API Route Handlers
============================================

What:  JSON endpoints for species: list, create, get, partial update, delete.
Why:   Lets scripts and other front ends use the same store and rules as the
       pages (form validation, author-only mutations).
How:   Routes stay thin: validate with validate_species(), check authorship,
       delegate to SpeciesService. Errors map to status codes through the
       global handlers (400 validation, 401 signed out, 403 not the author,
       404 missing, 500 database).

Route Inventory:
    GET    /api/species          list (id descending)
    POST   /api/species          create, author = session user
    GET    /api/species/{id}     one species
    PATCH  /api/species/{id}     partial update (omitted fields keep their
                                 stored values)
    DELETE /api/species/{id}     delete
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, require_session
from app.database import get_db_session
from app.exceptions import PermissionDeniedError
from app.schemas.common import ErrorResponse, Notification
from app.schemas.species import (
    SpeciesListResponse,
    SpeciesMutationResponse,
    SpeciesResponse,
    validate_species,
)
from app.services.species_editor import baseline_from_record
from app.services.species_service import species_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Species"])

_MUTATION_ERRORS = {
    400: {"description": "Invalid species fields", "model": ErrorResponse},
    401: {"description": "Not signed in", "model": ErrorResponse},
    403: {"description": "Not the author of this species", "model": ErrorResponse},
    404: {"description": "Species not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def _ensure_author(species: SpeciesResponse, session: Session, action: str) -> None:
    if species.author != session.user_id:
        logger.warning(
            "User %s tried to %s species %s owned by %s",
            session.user_id, action, species.id, species.author,
        )
        raise PermissionDeniedError(context={"species_id": species.id, "action": action})


@router.get(
    "/species",
    response_model=SpeciesListResponse,
    responses={401: _MUTATION_ERRORS[401], 500: _MUTATION_ERRORS[500]},
    summary="List all species",
)
async def list_species(
    response: Response,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesListResponse:
    species = await species_service.list_species(db)
    response.headers["X-Total-Count"] = str(len(species))
    return SpeciesListResponse(species=species)


@router.post(
    "/species",
    response_model=SpeciesMutationResponse,
    status_code=201,
    responses=_MUTATION_ERRORS,
    summary="Create a species authored by the signed-in user",
)
async def create_species(
    payload: Dict[str, Any] = Body(...),
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesMutationResponse:
    form = validate_species(payload)
    created = await species_service.create_species(db, author=session.user_id, form=form)
    return SpeciesMutationResponse(
        species=created,
        notification=Notification(
            title="New species created!",
            description="Successfully added " + created.scientific_name + ".",
        ),
    )


@router.get(
    "/species/{species_id}",
    response_model=SpeciesResponse,
    responses={401: _MUTATION_ERRORS[401], 404: _MUTATION_ERRORS[404]},
    summary="Get a single species",
)
async def get_species(
    species_id: int,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesResponse:
    return await species_service.get_species(db, species_id)


@router.patch(
    "/species/{species_id}",
    response_model=SpeciesMutationResponse,
    responses=_MUTATION_ERRORS,
    summary="Update a species you authored",
)
async def update_species(
    species_id: int,
    payload: Dict[str, Any] = Body(...),
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesMutationResponse:
    current = await species_service.get_species(db, species_id)
    _ensure_author(current, session, "update")

    form = validate_species({**baseline_from_record(current), **payload})
    updated = await species_service.update_species(db, species_id, form)
    return SpeciesMutationResponse(
        species=updated,
        notification=Notification(
            title="Changes Saved!",
            description="Saved your changes to " + form.scientific_name,
        ),
    )


@router.delete(
    "/species/{species_id}",
    response_model=SpeciesMutationResponse,
    responses=_MUTATION_ERRORS,
    summary="Delete a species you authored",
)
async def delete_species(
    species_id: int,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SpeciesMutationResponse:
    current = await species_service.get_species(db, species_id)
    _ensure_author(current, session, "delete")

    await species_service.delete_species(db, species_id)
    return SpeciesMutationResponse(
        notification=Notification(
            title="Species Deleted!",
            description="Your card has been successfully deleted",
        ),
    )
