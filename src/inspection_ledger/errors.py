"""Typed failures surfaced by the store adapters and workflow services."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every failure raised to callers of this package."""


class NotFoundError(LedgerError):
    """A referenced inspection, version or release does not exist."""


class PermissionDeniedError(LedgerError):
    """The backing store rejected the caller."""


class UnavailableError(LedgerError):
    """Transient backend failure. Never retried internally."""


class InvalidArgumentError(LedgerError):
    """A required argument is missing or malformed."""


class MalformedDocumentError(LedgerError):
    """A stored document does not match the shape of its model."""


def require_id(value: str | None, name: str) -> str:
    """Return ``value`` stripped, or raise when it is blank."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{name} is required")
    return str(value).strip()
