"""
Input validation for actionpack.

Validates:
- Handler table keys
- Action types
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List

from .errors import ConfigurationError


@dataclass
class ValidationError:
    """A validation error."""
    field: str
    message: str
    value: str = ""


class ValidationResult:
    """Result of validation check."""

    def __init__(self):
        self.errors: List[ValidationError] = []

    def add_error(self, field: str, message: str, value: str = "") -> None:
        self.errors.append(ValidationError(field, message, value))

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def raise_if_invalid(self, context: str = "Validation") -> None:
        if not self.is_valid:
            msgs = [f"{e.field}: {e.message}" for e in self.errors]
            raise ConfigurationError(
                f"{context} failed:\n" + "\n".join(msgs),
                key=self.errors[0].value or None,
            )


def validate_handler_keys(keys: Iterable[Any], allowed: Iterable[str]) -> ValidationResult:
    """Flag every key not in ``allowed``, in iteration order."""
    result = ValidationResult()
    allowed = set(allowed)
    for key in keys:
        if key not in allowed:
            result.add_error("handlers", f"unknown handler key {key!r}", str(key))
    return result


def validate_action_type(action_type: Any) -> ValidationResult:
    """Action types must be non-empty strings."""
    result = ValidationResult()

    if not isinstance(action_type, str):
        result.add_error("type", "Must be a string", repr(action_type))
    elif not action_type.strip():
        result.add_error("type", "Cannot be empty", action_type)

    return result
