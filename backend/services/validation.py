"""Form validation: raw game input in, GameFormData or per-field errors out."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from backend.models.game import MIN_RELEASE_YEAR, GameFormData

# Optional numeric fields where an empty form value means "not given"
_OPTIONAL_NUMBERS = ("rating", "playtimeHours", "completionPercentage")

# Only the user-editable fields are accepted from a form
_IGNORED_FIELDS = ("id", "dateAdded", "date_added")

_LABELS = {
    "title": "Title",
    "platform": "Platform",
    "genre": "Genre",
    "releaseYear": "Release year",
    "developer": "Developer",
    "status": "Status",
    "rating": "Rating",
    "playtimeHours": "Playtime",
    "completionPercentage": "Completion",
    "notes": "Notes",
}

_MESSAGES = {
    ("title", "string_too_short"): "Title is required",
    ("title", "string_too_long"): "Title must be less than 100 characters",
    ("genre", "string_too_short"): "Genre is required",
    ("genre", "string_too_long"): "Genre must be less than 50 characters",
    ("developer", "string_too_short"): "Developer is required",
    ("developer", "string_too_long"): "Developer must be less than 100 characters",
    ("releaseYear", "greater_than_equal"): f"Release year must be at least {MIN_RELEASE_YEAR}",
    ("rating", "greater_than_equal"): "Rating must be at least 1",
    ("rating", "less_than_equal"): "Rating must be at most 10",
    ("playtimeHours", "greater_than_equal"): "Playtime must be positive",
    ("completionPercentage", "greater_than_equal"): "Completion must be at least 0%",
    ("completionPercentage", "less_than_equal"): "Completion must be at most 100%",
    ("notes", "string_too_long"): "Notes must be less than 500 characters",
}


class FormValidationError(Exception):
    """Raised when form input is invalid. `errors` maps field name to message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid game data: {fields}")

    def to_dict(self) -> dict:
        return {"errors": self.errors}


def _field_name(loc: tuple) -> str:
    if not loc:
        return "__root__"
    name = str(loc[0])
    field = GameFormData.model_fields.get(name)
    if field is not None and field.alias:
        return field.alias
    return name


def _message(field: str, error: dict) -> str:
    kind = error["type"]
    if kind == "missing":
        return f"{_LABELS.get(field, field)} is required"
    if kind == "not_a_number":
        return f"{_LABELS.get(field, field)} must be a number"
    if (field, kind) in _MESSAGES:
        return _MESSAGES[(field, kind)]
    if kind == "value_error":
        # Raised by our own validators; pydantic prefixes "Value error, "
        return str(error["ctx"]["error"]) if "ctx" in error else error["msg"]
    return error["msg"]


def _prepare(data: Mapping[str, Any]) -> dict[str, Any]:
    prepared = {k: v for k, v in data.items() if k not in _IGNORED_FIELDS}
    for key in _OPTIONAL_NUMBERS:
        if prepared.get(key) == "":
            prepared[key] = None
    return prepared


def validate_game_form(data: Mapping[str, Any]) -> GameFormData:
    """Validate raw form input.

    Raises FormValidationError with one message per invalid field.
    """
    if not isinstance(data, Mapping):
        raise FormValidationError({"__root__": "Game data must be an object"})

    try:
        return GameFormData.model_validate(_prepare(data))
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for error in exc.errors(include_url=False):
            field = _field_name(error["loc"])
            # First problem per field wins
            errors.setdefault(field, _message(field, error))
        raise FormValidationError(errors) from exc
