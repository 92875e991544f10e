"""Library patron records: line codec, validators and an in-memory directory."""

from patron_registry.domain.patron import Patron
from patron_registry.errors import (
    DuplicateIdError,
    InvalidFieldError,
    MalformedLineError,
    NotFoundError,
    PatronRegistryError,
    ValidationError,
    ValidationReason,
)
from patron_registry.repositories.directory import PatronDirectory
from patron_registry.storage.line_file import LoadReport, load_file, load_lines, save_file

__all__ = [
    "DuplicateIdError",
    "InvalidFieldError",
    "LoadReport",
    "MalformedLineError",
    "NotFoundError",
    "Patron",
    "PatronDirectory",
    "PatronRegistryError",
    "ValidationError",
    "ValidationReason",
    "load_file",
    "load_lines",
    "save_file",
]
