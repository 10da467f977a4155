"""
Biodex Backend - Species Schemas and Form Validation
=====================================================

What:  The species form contract (`SpeciesForm`), the function that turns raw
       form input into a validated field set (`validate_species`), and the
       response models for species.
Why:   Both the HTML editor and the JSON API submit the same seven fields;
       validating them in one place guarantees that blank optional values
       never reach the database as empty strings.
How:   Pydantic "before" validators normalize raw input (trim, blank → None,
       missing endangered → False); type and range checks do the rest.

Normalization rules:
    scientific_name   required, trimmed, must not be blank
    common_name       trimmed, blank → None
    kingdom           one of the six Kingdom values
    total_population  blank → None, else a positive whole number
    image             trimmed, blank → None, else a valid URL
    description       trimmed, blank → None
    endangered        always a bool, missing → False
"""

import uuid
from typing import Any, Dict, List, Mapping, Optional

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.models.species import Kingdom
from app.schemas.common import Notification

# Field names the species form edits, in display order
FORM_FIELDS = (
    "scientific_name",
    "common_name",
    "kingdom",
    "total_population",
    "endangered",
    "image",
    "description",
)

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _blank_to_none(value: Any) -> Any:
    """Trim strings; empty or whitespace-only input becomes None."""
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class SpeciesForm(BaseModel):
    """
    What:  Validated field set for creating or updating a species.
    Who:   Built by validate_species(); sent as the update payload by the
           species editor and the JSON API.
    """
    scientific_name: str = Field(description="Binomial name, e.g. 'Panthera leo'")
    common_name: Optional[str] = Field(default=None, description="Everyday name")
    kingdom: Kingdom = Field(description="Biological kingdom")
    total_population: Optional[int] = Field(
        default=None, gt=0, description="Estimated number of living individuals"
    )
    image: Optional[str] = Field(default=None, description="Image URL")
    description: Optional[str] = Field(default=None, description="Free-text description")
    endangered: bool = Field(default=False, description="Conservation status flag")

    @field_validator("scientific_name", mode="before")
    @classmethod
    def _require_scientific_name(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Scientific name is required")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Scientific name is required")
        return v

    @field_validator("common_name", "description", mode="before")
    @classmethod
    def _normalize_optional_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("total_population", mode="before")
    @classmethod
    def _normalize_population(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        # bool is an int subclass; a checkbox value is not a population
        if isinstance(v, bool):
            raise ValueError("Total population must be a whole number")
        return v

    @field_validator("image", mode="before")
    @classmethod
    def _normalize_image(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("Image must be a valid URL")
        try:
            _URL_ADAPTER.validate_python(v)
        except PydanticValidationError:
            raise ValueError("Image must be a valid URL")
        return v

    @field_validator("endangered", mode="before")
    @classmethod
    def _default_endangered(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return False
        return v


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into {field: first message}."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else "__root__"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def validate_species(raw: Mapping[str, Any]) -> SpeciesForm:
    """
    Validate raw species form input.

    Only the form fields are read; anything else in `raw` (submit button
    names, CSRF tokens) is ignored.

    Raises:
        ValidationError: with `errors` mapping each failing field to a message
    """
    data = {name: raw.get(name) for name in FORM_FIELDS if name in raw}
    try:
        return SpeciesForm.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message="Please fix the highlighted fields",
            errors=_field_errors(exc),
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SpeciesResponse(BaseModel):
    """Full representation of one species row."""
    id: int = Field(description="Species identifier")
    scientific_name: str
    common_name: Optional[str] = None
    kingdom: Kingdom
    total_population: Optional[int] = None
    image: Optional[str] = None
    description: Optional[str] = None
    endangered: bool = Field(default=False, description="NULL in the store reads as false")
    author: uuid.UUID = Field(description="Profile id of the user who owns this species")

    model_config = {"from_attributes": True}

    @field_validator("endangered", mode="before")
    @classmethod
    def _null_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class SpeciesListResponse(BaseModel):
    """All species, newest id first."""
    species: List[SpeciesResponse] = Field(description="Species ordered by id descending")


class SpeciesMutationResponse(BaseModel):
    """
    What:  Result of a create/update/delete through the JSON API.
    Why:   Carries the notification the pages would have flashed, so API
           clients can surface the same message.
    """
    species: Optional[SpeciesResponse] = Field(
        default=None, description="The stored row (null after a delete)"
    )
    notification: Notification
