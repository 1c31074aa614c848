from __future__ import annotations


class CoachError(Exception):
    """Base class for everything raised by the coach core."""


class MalformedUpstreamResult(CoachError):
    """The correction/rewrite service returned something we cannot use."""

    def __init__(self, message: str, *, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


class RemoteStoreError(CoachError):
    """Remote record store failed (network, backend, bad row)."""


class AuthenticationRequired(CoachError):
    """A remote mutation was attempted without an authenticated user."""


class StoreConfigError(CoachError, ValueError):
    """Unsupported or malformed store DSN."""
