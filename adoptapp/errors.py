"""
Error taxonomy for adoption request handling.

Every failure raised by the managers belongs to exactly one ErrorKind, so
callers can branch on ``error.kind`` instead of parsing message text.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Categories of adoption request failures."""
    MALFORMED_REQUEST = "malformed_request"
    NOT_FOUND = "not_found"
    RULE_VIOLATION = "rule_violation"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AdoptionRequestError(Exception):
    """
    Base class for categorized adoption request failures.

    Attributes:
        kind: Error category
        message: Human-readable description
        context: Structured details (ids, emails) about the failure
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for API responses."""
        return {
            "kind": self.kind.value,
            "error": self.message,
            "context": self.context,
        }


class MalformedRequestError(AdoptionRequestError):
    """Missing, empty or ill-typed request fields."""
    kind = ErrorKind.MALFORMED_REQUEST


class NotFoundError(AdoptionRequestError):
    """Referenced city, pet or user does not exist."""
    kind = ErrorKind.NOT_FOUND


class RuleViolationError(AdoptionRequestError):
    """Duplicate interest request or quota exceeded."""
    kind = ErrorKind.RULE_VIOLATION


class ConflictError(AdoptionRequestError):
    """Withdrawal of an unregistered interest, or a concurrent modification."""
    kind = ErrorKind.CONFLICT


class InternalError(AdoptionRequestError):
    """Unexpected failure of an underlying store."""
    kind = ErrorKind.INTERNAL


class StoreError(Exception):
    """Raised by repositories when the backing store fails."""


class StaleWriteError(StoreError):
    """Raised when an entity was modified after it was read."""

    def __init__(self, entity: str, entity_id: Optional[int], expected: int, actual: int):
        super().__init__(
            f"{entity.capitalize()} {entity_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual


class DuplicateEmailError(StoreError):
    """Raised when a new user claims an email that is already in use."""

    def __init__(self, email: str):
        super().__init__(f"Email {email} is already in use")
        self.email = email
