"""Exception hierarchy shared by the synthesis pipeline."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .services.persistence import TierAttempt


class DocSynthError(RuntimeError):
    """Base class for pipeline failures."""


class CodecError(DocSynthError):
    """Raised when a document tree cannot be serialized to DOCX."""


class TransportError(DocSynthError):
    """Raised when a remote collaborator cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DiscoveryError(DocSynthError):
    """Raised inside discovery helpers; never leaves the discovery service."""


class GenerationError(DocSynthError):
    """Raised when the text generator fails or returns no content."""


class PersistenceError(DocSynthError):
    """Raised when every persistence tier failed.

    ``cause`` is the error of the first tier, which is also chained as
    ``__cause__``. ``attempts`` lists every tier that was tried.
    """

    def __init__(self, message: str, *, cause: BaseException, attempts: Sequence["TierAttempt"]) -> None:
        super().__init__(message)
        self.cause = cause
        self.attempts = list(attempts)


__all__ = [
    "CodecError",
    "DiscoveryError",
    "DocSynthError",
    "GenerationError",
    "PersistenceError",
    "TransportError",
]
