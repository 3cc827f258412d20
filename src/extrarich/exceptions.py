"""Exception classes for extrarich.

Declined operations (no selection, cursor not at a recognized start,
unsupported block) are not errors and never raise. These exceptions
signal caller mistakes or a corrupt tree.
"""

from __future__ import annotations


class ExtraRichError(Exception):
    """Base class for extrarich errors."""


class InvalidPathError(ExtraRichError):
    """Raised when a path does not address a node of the expected kind."""

    def __init__(self, message: str, path: tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.path = path


class InvalidPointError(ExtraRichError):
    """Raised when a point's offset lies outside its leaf's text."""


class TreeIntegrityError(ExtraRichError):
    """Raised when a batch would commit a tree that breaks an invariant."""


class DeserializationError(ExtraRichError):
    """Raised when rich-text JSON cannot be converted to a tree."""
