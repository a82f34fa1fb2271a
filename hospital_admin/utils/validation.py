"""
Per-field validation errors.

Pydantic reports a flat list of errors with a `loc` path; forms need them
grouped by field so each offending input can be highlighted.
"""

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

NON_FIELD_ERRORS = "non_field_errors"

# Prefixes FastAPI adds to the location of request-body errors
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie", "form"}

ModelT = TypeVar("ModelT", bound=BaseModel)


class FormValidationError(Exception):
    """Raised when submitted form data fails validation."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Validation failed")
        self.errors = errors


def _clean_message(msg: str) -> str:
    # field_validator errors come back as "Value error, <our message>"
    for prefix in ("Value error, ", "Assertion failed, "):
        if msg.startswith(prefix):
            return msg[len(prefix):]
    return msg


def collect_field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic error dicts by field name.

    Nested locations are joined with dots (items.0.quantity). Errors raised
    by model-level validators land under NON_FIELD_ERRORS.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or NON_FIELD_ERRORS
        grouped.setdefault(field, []).append(_clean_message(str(error.get("msg", "Invalid value"))))
    return grouped


def validate_form(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """
    Validate raw form data against a schema.

    Returns the parsed model or raises FormValidationError with the
    per-field error map.
    """
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        raise FormValidationError(collect_field_errors(exc.errors())) from exc
