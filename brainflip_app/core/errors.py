"""Error taxonomy shared by the storage, editor and player layers."""

from __future__ import annotations

from dataclasses import dataclass


class BrainFlipError(Exception):
    """Base class for application errors."""


class StorageError(BrainFlipError):
    """Raised when the key-value store cannot be read or written."""


class NotFoundError(BrainFlipError):
    """Raised when a referenced quiz or question does not exist."""


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single violated rule, tied to the field that should be corrected."""

    field: str
    message: str


class ValidationError(BrainFlipError):
    """Raised when user input violates a data-model invariant."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        if not issues:
            raise ValueError("ValidationError requires at least one issue.")
        self.issues = list(issues)
        super().__init__(issues[0].message)
