"""
Biodex Backend - Species Editor (Editable-Record Form Controller)
==================================================================

What:  Holds the view/edit state of one species card and the form bound to
       its fields: start editing, confirm (validate and save), cancel
       (revert to the saved values) and delete.
Why:   Every page that shows a species detail needs the same rules: only the
       author may change the record, nothing invalid is sent, a failed save
       keeps the user's draft, and a cancel or delete always asks first.
How:   A small state machine over EditorState. Saving and deleting go through
       SpeciesService; outcomes are reported on a NotificationQueue and a
       successful mutation sets `reload_requested` so the caller reloads the
       whole enclosing page.

State Machine:

        start_editing()             request_cancel()
    VIEWING ──────────▶ EDITING ─────────────────▶ CONFIRMING_CANCEL
       ▲  ▲               │  ▲                           │
       │  │   confirm() ok│  └──────── answer(False) ────┤
       │  └───────────────┘                              │
       │  ◀─────────────────────── answer(True) ─────────┘
       │
       │ request_delete()
       ▼
    CONFIRMING_DELETE ── answer(True), delete ok ──▶ DELETED (terminal)
       │  answer(False) or delete failed → VIEWING

    Confirmation prompts are explicit states answered by answer(accepted)
    instead of blocking dialogs, so an HTTP round trip (a confirmation page
    whose yes/no form posts back) can drive them.

Across requests:
    The editor is rebuilt for each request from the stored record and
    replayed to the state the page was in (start_editing → load_draft →
    request_cancel → answer). Every replay re-checks authorship.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    BiodexError,
    EditorStateError,
    PermissionDeniedError,
    ValidationError,
)
from app.models.species import Kingdom
from app.schemas.species import FORM_FIELDS, SpeciesResponse, validate_species
from app.services.notifications import NotificationQueue
from app.services.species_service import SpeciesService, species_service

logger = logging.getLogger(__name__)

_TRUTHY_STRINGS = {"true", "on", "1", "yes"}


class EditorState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"
    CONFIRMING_CANCEL = "confirming_cancel"
    CONFIRMING_DELETE = "confirming_delete"
    DELETED = "deleted"


class PendingAction(str, Enum):
    CANCEL = "cancel"
    DELETE = "delete"


@dataclass(frozen=True)
class ConfirmationPrompt:
    """A yes/no question the user must answer before the action runs."""

    action: PendingAction
    question: str


CANCEL_PROMPT = ConfirmationPrompt(PendingAction.CANCEL, "Revert all unsaved changes?")
DELETE_PROMPT = ConfirmationPrompt(PendingAction.DELETE, "Delete the species?")


def endangered_label(value: Any) -> str:
    """Display text for the endangered flag (draft values may still be strings)."""
    if isinstance(value, str):
        value = value.strip().lower() in _TRUTHY_STRINGS
    return "Endangered" if value else "Not Endangered"


def baseline_from_record(species: SpeciesResponse) -> Dict[str, Any]:
    """The form values a freshly opened editor shows for `species`."""
    return {name: getattr(species, name) for name in FORM_FIELDS}


class SpeciesEditor:
    """
    Form controller for one species record.

    Attributes:
        species:          The record as last loaded or saved
        baseline:         Last saved field values; cancel reverts to these
        values:           Current form values (the draft while editing)
        errors:           Field → message from the last failed validation
        state:            Current EditorState
        prompt:           Pending ConfirmationPrompt, if any
        reload_requested: True after a successful save or delete
    """

    def __init__(
        self,
        species: SpeciesResponse,
        current_user_id: Optional[uuid.UUID],
        db: AsyncSession,
        notifications: NotificationQueue,
        service: Optional[SpeciesService] = None,
    ):
        self.species = species
        self.current_user_id = current_user_id
        self.notifications = notifications
        self._db = db
        self._service = service or species_service

        self.baseline: Dict[str, Any] = baseline_from_record(species)
        self.values: Dict[str, Any] = dict(self.baseline)
        self.errors: Dict[str, str] = {}
        self.state = EditorState.VIEWING
        self.prompt: Optional[ConfirmationPrompt] = None
        self.reload_requested = False

    # ── Read-only view helpers ────────────────────────────────────────────

    @property
    def can_edit(self) -> bool:
        """Edit and delete controls exist only for the record's author."""
        if self.current_user_id is None:
            return False
        return str(self.current_user_id) == str(self.species.author)

    @property
    def is_editing(self) -> bool:
        return self.state == EditorState.EDITING

    @property
    def endangered_label(self) -> str:
        return endangered_label(self.values.get("endangered"))

    @property
    def kingdom_options(self) -> List[str]:
        return [kingdom.value for kingdom in Kingdom]

    def display_value(self, name: str) -> str:
        """Form value as the text an input shows (None → empty)."""
        value = self.values.get(name)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)

    # ── Guards ────────────────────────────────────────────────────────────

    def _require_state(self, action: str, *allowed: EditorState) -> None:
        if self.state not in allowed:
            raise EditorStateError(action=action, state=self.state.value)

    def _require_author(self, action: str) -> None:
        if not self.can_edit:
            logger.warning(
                "User %s tried to %s species %s owned by %s",
                self.current_user_id, action, self.species.id, self.species.author,
            )
            raise PermissionDeniedError(
                context={"species_id": self.species.id, "action": action},
            )

    # ── Transitions ───────────────────────────────────────────────────────

    def start_editing(self) -> None:
        """VIEWING → EDITING (author only)."""
        self._require_author("edit")
        self._require_state("edit", EditorState.VIEWING)
        self.errors = {}
        self.state = EditorState.EDITING

    def load_draft(self, raw: Mapping[str, Any]) -> None:
        """Replace in-progress values with submitted form input."""
        self._require_state("change fields", EditorState.EDITING)
        for name in FORM_FIELDS:
            if name in raw:
                self.values[name] = raw[name]

    async def confirm(self) -> bool:
        """
        Validate the draft and save it as a partial update keyed by id.

        Returns:
            True when saved. False when validation failed (see `errors`) or
            the store rejected the update (a destructive notification was
            queued); in both cases the editor stays in EDITING with the
            draft untouched so the user can retry or cancel.
        """
        self._require_author("save")
        self._require_state("save", EditorState.EDITING)

        try:
            form = validate_species(self.values)
        except ValidationError as e:
            self.errors = e.errors
            return False

        try:
            updated = await self._service.update_species(self._db, self.species.id, form)
        except BiodexError as e:
            logger.warning("Saving species %s failed: %s", self.species.id, e.message)
            self.notifications.error(e.message)
            return False

        self.species = updated
        self.baseline = form.model_dump()
        self.values = dict(self.baseline)
        self.errors = {}
        self.state = EditorState.VIEWING
        self.reload_requested = True
        self.notifications.notify(
            "Changes Saved!",
            "Saved your changes to " + form.scientific_name,
        )
        return True

    def request_cancel(self) -> ConfirmationPrompt:
        """EDITING → CONFIRMING_CANCEL."""
        self._require_state("cancel", EditorState.EDITING)
        self.state = EditorState.CONFIRMING_CANCEL
        self.prompt = CANCEL_PROMPT
        return self.prompt

    def request_delete(self) -> ConfirmationPrompt:
        """VIEWING → CONFIRMING_DELETE (author only)."""
        self._require_author("delete")
        self._require_state("delete", EditorState.VIEWING)
        self.state = EditorState.CONFIRMING_DELETE
        self.prompt = DELETE_PROMPT
        return self.prompt

    async def answer(self, accepted: bool) -> None:
        """Resolve the pending confirmation prompt."""
        if self.prompt is None:
            raise EditorStateError(action="answer", state=self.state.value)

        pending = self.prompt.action
        self.prompt = None

        if pending == PendingAction.CANCEL:
            if accepted:
                self.values = dict(self.baseline)
                self.errors = {}
                self.state = EditorState.VIEWING
            else:
                self.state = EditorState.EDITING
            return

        if not accepted:
            self.state = EditorState.VIEWING
            return

        try:
            await self._service.delete_species(self._db, self.species.id)
        except BiodexError as e:
            logger.warning("Deleting species %s failed: %s", self.species.id, e.message)
            self.notifications.error(e.message)
            self.state = EditorState.VIEWING
            return

        self.state = EditorState.DELETED
        self.reload_requested = True
        self.notifications.notify(
            "Species Deleted!",
            "Your card has been successfully deleted",
        )
