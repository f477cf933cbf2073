"""
Error types raised by actionpack.

Only programming mistakes are raised:
- ConfigurationError: a handler table or hook slot is malformed
- UsageError: an API was called on something it cannot work with

A tracked computation that fails is NOT an error here. It becomes an
ordinary FAILURE action.
"""
from __future__ import annotations

from typing import Optional


class ActionPackError(Exception):
    """Base class for actionpack errors."""

    def __init__(
        self,
        message: str,
        action_type: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.action_type = action_type
        self.key = key


class ConfigurationError(ActionPackError, ValueError):
    """Invalid handler table, handler slot or hook slot."""


class UsageError(ActionPackError, TypeError):
    """An actionpack function was used on the wrong kind of input."""
