"""Exception hierarchy shared by the client, config and CLI layers."""

from __future__ import annotations

from typing import Optional


class GhDiscoError(Exception):
    """Base class for every error the command reports to the user."""


class ValidationError(GhDiscoError):
    """One or more command inputs are missing or invalid.

    All problems are collected before raising so the user sees them together.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("invalid arguments:\n  " + "\n  ".join(self.problems))


class TransportError(GhDiscoError):
    """The GitHub API could not be reached or returned a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class FetchCancelledError(TransportError):
    """The process was interrupted while a request was in flight."""


class MalformedResponseError(GhDiscoError):
    """A response body does not have the shape the query asked for."""

    def __init__(self, message: str, raw: str, path: str = "") -> None:
        super().__init__(f"{message}:\n{raw}")
        self.raw = raw
        self.path = path


class SecretResolutionError(GhDiscoError):
    """A secret reference could not be resolved to a value."""
