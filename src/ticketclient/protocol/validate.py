"""Structural validation of ticket documents prior to submission.

Only the shape of the document is checked here. Command payloads are
opaque: a barcode whose data cannot be encoded under its symbology is for
the daemon to reject, not this module.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from .document import TicketDocument


class ValidationError(ValueError):
    """A ticket document is missing a required field.

    :ivar field: Dotted name of the first missing field.
    """

    def __init__(self, field: str):
        self.field = field
        ValueError.__init__(self, "missing " + field)


def _version(document: dict) -> bool:
    return bool(document.get("version"))


def _model(document: dict) -> bool:
    profile = document.get("profile")
    if isinstance(profile, dict):
        return bool(profile.get("model"))
    return False


def _commands(document: dict) -> bool:
    commands = document.get("commands")
    if isinstance(commands, (list, tuple)):
        return len(commands) > 0
    return False


# Checked in this order; only the first failure is reported.
rules: Tuple[Tuple[str, Callable[[dict], bool]], ...] = (
    ("version", _version),
    ("profile.model", _model),
    ("commands", _commands),
)


def _as_dict(document: Any) -> dict:
    if isinstance(document, TicketDocument):
        return document.to_dict()
    if isinstance(document, dict):
        return document
    raise TypeError("document must be a TicketDocument or dictionary, not " + type(document).__name__)


def check(document: Any) -> Optional[ValidationError]:
    """Return the first violated rule as a ValidationError, or None."""

    document = _as_dict(document)

    for field, rule in rules:
        if not rule(document):
            return ValidationError(field)

    return None


def validate(document: Any) -> None:
    """Raise ValidationError for the first missing required field."""

    error = check(document)
    if error is not None:
        raise error


def is_valid(document: Any) -> bool:
    return check(document) is None
