"""
Biodex Backend - Species Detail Page Route Handlers
====================================================

What:  HTTP surface of the species editor: the "Learn More" detail page and
       the edit / save / cancel / delete actions on it.
How:   Each request rebuilds a SpeciesEditor from the stored record and
       replays it to the state the page was in, then applies the action.
       Drafts travel in the posted form, so nothing is stored server-side
       between requests.

Route Inventory:
    GET  /species/{id}                 viewing
    POST /species/{id}/edit            viewing → editing
    POST /species/{id}/save            editing → viewing (or stay editing)
    POST /species/{id}/cancel          editing → "Revert all unsaved changes?"
    POST /species/{id}/cancel/answer   yes → viewing (reverted), no → editing
    POST /species/{id}/delete          viewing → "Delete the species?"
    POST /species/{id}/delete/answer   yes → deleted, reload /species

Successful saves and deletes flash their notification and answer with a
303 redirect, which reloads the enclosing page's data.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_303_SEE_OTHER

from app.auth import Session, require_session
from app.database import get_db_session
from app.services.notifications import NotificationQueue, flash
from app.services.species_editor import EditorState, SpeciesEditor
from app.services.species_service import species_service
from app.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/species", tags=["Species Pages"])


async def _open_editor(
    species_id: int, session: Session, db: AsyncSession, queue: NotificationQueue
) -> SpeciesEditor:
    species = await species_service.get_species(db, species_id)
    return SpeciesEditor(species, session.user_id, db, queue)


async def _submitted(request: Request) -> Dict[str, Any]:
    return dict(await request.form())


def _accepted(raw: Dict[str, Any]) -> bool:
    return str(raw.get("accepted", "")).lower() == "yes"


def _detail(request: Request, editor: SpeciesEditor, queue: NotificationQueue, status_code: int = 200):
    return render(
        request,
        "species_detail.html",
        {"editor": editor, "species": editor.species},
        queue=queue,
        status_code=status_code,
    )


def _confirmation(request: Request, editor: SpeciesEditor, queue: NotificationQueue):
    return render(
        request,
        "confirm.html",
        {"editor": editor, "species": editor.species, "prompt": editor.prompt},
        queue=queue,
    )


def _reload(request: Request, queue: NotificationQueue, url: str) -> RedirectResponse:
    flash(request, queue)
    return RedirectResponse(url=url, status_code=HTTP_303_SEE_OTHER)


@router.get("/{species_id}", response_class=HTMLResponse, include_in_schema=False)
async def species_detail(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    return _detail(request, editor, queue)


@router.post("/{species_id}/edit", response_class=HTMLResponse, include_in_schema=False)
async def start_editing(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.start_editing()
    return _detail(request, editor, queue)


@router.post("/{species_id}/save", include_in_schema=False)
async def save_species(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
):
    """Confirm: validate and save. Failures keep the draft on screen."""
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.start_editing()
    editor.load_draft(await _submitted(request))

    if await editor.confirm():
        return _reload(request, queue, f"/species/{species_id}")

    status_code = 400 if editor.errors else 200
    return _detail(request, editor, queue, status_code=status_code)


@router.post("/{species_id}/cancel", response_class=HTMLResponse, include_in_schema=False)
async def request_cancel(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.start_editing()
    editor.load_draft(await _submitted(request))
    editor.request_cancel()
    return _confirmation(request, editor, queue)


@router.post("/{species_id}/cancel/answer", response_class=HTMLResponse, include_in_schema=False)
async def answer_cancel(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    """Yes shows the last saved values again; no returns to the draft."""
    raw = await _submitted(request)
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.start_editing()
    editor.load_draft(raw)
    editor.request_cancel()
    await editor.answer(_accepted(raw))
    return _detail(request, editor, queue)


@router.post("/{species_id}/delete", response_class=HTMLResponse, include_in_schema=False)
async def request_delete(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.request_delete()
    return _confirmation(request, editor, queue)


@router.post("/{species_id}/delete/answer", include_in_schema=False)
async def answer_delete(
    species_id: int,
    request: Request,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
):
    raw = await _submitted(request)
    queue = NotificationQueue()
    editor = await _open_editor(species_id, session, db, queue)
    editor.request_delete()
    await editor.answer(_accepted(raw))

    if editor.state == EditorState.DELETED:
        return _reload(request, queue, "/species")
    return _detail(request, editor, queue)
