"""
Required key validation for envstore.

A required key is a variable that must be present with a usable value for the
application to be considered configured. Keys that are absent, set to None,
set to an empty string or set to a null literal (``null``, ``(null)``) all
count as missing.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from .coercer import coerce


def is_missing(value: str | None) -> bool:
    """Return True if a raw value does not count as a usable value."""
    return value is None or value == "" or coerce(value) is None


def find_missing(required: Iterable[str], loaded: Mapping[str, str | None]) -> list[str]:
    """Return the required keys without a usable value, in required order."""
    return [key for key in required if is_missing(loaded.get(key))]


def validate(required: Iterable[str], loaded: Mapping[str, str | None]) -> None:
    """
    Check that every required key has a usable value.

    Raises:
        MissingVariableError: Naming every missing key
    """
    missing = find_missing(required, loaded)
    if missing:
        raise MissingVariableError(missing)


class RequiredKeysValidator:
    """
    Holds the set of required keys and checks loaded variables against it.

    The key set persists until replaced with ``set_required``.
    """

    def __init__(self, required: Iterable[str] | None = None) -> None:
        self._required: tuple[str, ...] = tuple(dict.fromkeys(required or ()))

    @property
    def required(self) -> tuple[str, ...]:
        """The current required keys, in the order they were given."""
        return self._required

    def set_required(self, keys: Iterable[str]) -> None:
        """Replace the required keys wholesale. Duplicates are dropped."""
        self._required = tuple(dict.fromkeys(keys))

    def validate(self, loaded: Mapping[str, str | None]) -> None:
        validate(self._required, loaded)


class MissingVariableError(RuntimeError):
    """Exception raised when one or more required variables are missing."""

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys = list(keys)
        if len(self.keys) == 1:
            message = f"Required environment variable [{self.keys[0]}] is missing."
        else:
            message = f"Required environment variables [{', '.join(self.keys)}] are missing."
        self.message = message
        super().__init__(message)
