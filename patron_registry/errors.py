from __future__ import annotations

from enum import Enum
from typing import Optional


class ValidationReason(Enum):
    INVALID_FORMAT = "INVALID_FORMAT"
    EMPTY = "EMPTY"
    TOO_SHORT = "TOO_SHORT"
    TOO_LONG = "TOO_LONG"
    FORMAT_MISMATCH = "FORMAT_MISMATCH"
    NOT_A_NUMBER = "NOT_A_NUMBER"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    NEGATIVE = "NEGATIVE"


class PatronRegistryError(Exception):
    """Base error for this package."""


class ValidationError(PatronRegistryError):
    """Raised when a single field value fails its validation rule.

    `field` names the offending field, `reason` is the machine-readable
    ValidationReason and the exception message is meant for the librarian.
    """

    def __init__(self, field: str, reason: ValidationReason, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.message = message


class MalformedLineError(PatronRegistryError):
    """Raised when a line does not have the ID-Name-Address-Fine shape."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"malformed line ({reason}): {line!r}")
        self.line = line
        self.reason = reason


class InvalidFieldError(PatronRegistryError):
    """Raised when a line has the right shape but one captured field is invalid."""

    def __init__(self, line: str, field: str, reason: str, cause: Optional[ValidationError] = None) -> None:
        super().__init__(f"invalid {field} ({reason}): {line!r}")
        self.line = line
        self.field = field
        self.reason = reason
        self.cause = cause


class DuplicateIdError(PatronRegistryError):
    """Raised when a patron id is already present in the directory."""

    def __init__(self, patron_id: str) -> None:
        super().__init__(f"a patron with ID {patron_id} already exists")
        self.patron_id = patron_id


class NotFoundError(PatronRegistryError):
    """Raised when no patron has the requested id."""

    def __init__(self, patron_id: str) -> None:
        super().__init__(f"no patron with ID {patron_id} was found")
        self.patron_id = patron_id
