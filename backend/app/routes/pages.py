"""
Biodex Backend - List Page Route Handlers
==========================================

What:  The landing page and the two list pages (users, species), plus the
       "add species" form on the species list.
Why:   The list pages are the enclosing routes every mutation reloads.
How:   `require_session` runs before any fetch; a signed-out visitor is
       redirected to "/" by the global AuthenticationRequiredError handler.

Empty vs failed:
    An empty result renders the fixed empty-state text. A failed fetch
    raises DatabaseError and renders the error page instead, so "nothing
    there" and "could not load" never look the same.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_303_SEE_OTHER

from app.auth import Session, get_current_session, require_session
from app.database import get_db_session
from app.exceptions import ValidationError
from app.models.species import Kingdom
from app.schemas.species import validate_species
from app.services.notifications import NotificationQueue, flash
from app.services.profile_service import profile_service
from app.services.species_service import species_service
from app.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

NO_PROFILES_MESSAGE = "No profiles found."
NO_SPECIES_MESSAGE = "No species found."


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home_page(
    request: Request,
    session: Optional[Session] = Depends(get_current_session),
) -> HTMLResponse:
    """Landing page; also where signed-out visitors are sent."""
    return render(request, "home.html", {"session": session})


@router.get("/users", response_class=HTMLResponse, include_in_schema=False)
async def users_page(
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """One card per profile, newest id first."""
    profiles = await profile_service.list_profiles(db)
    return render(
        request,
        "profiles.html",
        {
            "session": session,
            "profiles": profiles,
            "empty_message": NO_PROFILES_MESSAGE,
        },
    )


@router.get("/species", response_class=HTMLResponse, include_in_schema=False)
async def species_page(
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """One card per species, newest id first, with the add-species form."""
    species = await species_service.list_species(db)
    return render(request, "species_list.html", _list_context(session, species))


@router.post("/species", include_in_schema=False)
async def create_species(
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a species authored by the session user.

    Invalid input re-renders the list with the draft and field errors
    (400). Success flashes a notification and reloads /species.
    """
    raw = dict(await request.form())
    queue = NotificationQueue()

    try:
        form = validate_species(raw)
    except ValidationError as e:
        species = await species_service.list_species(db)
        context = _list_context(session, species, draft=raw, errors=e.errors)
        return render(request, "species_list.html", context, status_code=400)

    created = await species_service.create_species(db, author=session.user_id, form=form)
    queue.notify("New species created!", "Successfully added " + created.scientific_name + ".")
    flash(request, queue)
    return RedirectResponse(url="/species", status_code=HTTP_303_SEE_OTHER)


def _list_context(session, species, draft=None, errors=None) -> dict:
    return {
        "session": session,
        "species_list": species,
        "empty_message": NO_SPECIES_MESSAGE,
        "kingdoms": [k.value for k in Kingdom],
        "draft": draft or {},
        "errors": errors or {},
    }
