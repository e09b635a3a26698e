"""
Failure classification.

Known failures carry a FailureKind plus a user-appropriate message so the
tool layer can explain them instead of surfacing a stack trace.

"Nothing matched" is NOT a failure. Catalog lookups return empty results
for that and never raise.
"""

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for tool responses."""
        result: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.detail:
            result["detail"] = self.detail
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result
