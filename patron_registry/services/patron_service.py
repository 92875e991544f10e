from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from patron_registry.config import Config
from patron_registry.domain.patron import Patron
from patron_registry.domain.record_codec import DELIMITER
from patron_registry.domain.validators import (
    FieldKind,
    validate_amount,
    validate_id,
    validate_text,
)
from patron_registry.errors import NotFoundError
from patron_registry.repositories.directory import PatronDirectory
from patron_registry.storage.atomic_writer import AtomicFileWriter
from patron_registry.storage.line_file import LoadReport, load_file, save_file

logger = logging.getLogger(__name__)


class PatronService:
    """Business-level operations over a PatronDirectory.

    Responsibilities:
    - Validate raw librarian input (strings) field by field before any
      change reaches the directory.
    - Bulk load and explicit save through the line-file storage.

    Errors from validation (ValidationError) and from the directory
    (DuplicateIdError, NotFoundError) are raised to the caller unchanged;
    nothing is printed here.
    """

    def __init__(self, directory: PatronDirectory, config: Optional[Config] = None) -> None:
        self.directory = directory
        self.config = config or Config()
        # last file loaded from or saved to; None until one succeeds
        self.current_file: Optional[str] = None

    @property
    def active_file(self) -> str:
        """File that load() and save() use when no path is given."""
        return self.current_file or self.config.patrons_file

    def find_patron(self, patron_id: str) -> Optional[Patron]:
        return self.directory.find(patron_id.strip())

    def list_patrons(self) -> List[Patron]:
        return self.directory.list()

    def build_patron(self, patron_id: str, name: str, address: str, fine: str) -> Patron:
        """Validate the four raw fields and return an uncommitted Patron."""
        return Patron(
            id=validate_id(patron_id),
            name=validate_text(FieldKind.PATRON_NAME, name),
            address=validate_text(FieldKind.PATRON_ADDRESS, address),
            fine=validate_amount(fine, self.config.min_fine, self.config.max_fine),
        )

    def add_patron(self, patron_id: str, name: str, address: str, fine: str) -> Patron:
        patron = self.build_patron(patron_id, name, address, fine)
        self.directory.add(patron)
        self._warn_if_name_splits(patron)
        logger.info("Patron %s added", patron.id)
        return patron

    def edit_patron(
        self,
        original_id: str,
        *,
        patron_id: Optional[str] = None,
        name: Optional[str] = None,
        address: Optional[str] = None,
        fine: Optional[str] = None,
    ) -> Patron:
        """Change some fields of an existing patron.

        Fields left as None keep their current value. A new id is committed
        in place of the original one and must not belong to another patron.
        """
        original_id = validate_id(original_id)
        current = self.directory.find(original_id)
        if current is None:
            raise NotFoundError(original_id)

        updated = self.build_patron(
            current.id if patron_id is None else patron_id,
            current.name if name is None else name,
            current.address if address is None else address,
            f"{current.fine:.2f}" if fine is None else fine,
        )
        self.directory.update(original_id, updated)
        self._warn_if_name_splits(updated)
        if updated.id != original_id:
            logger.info("Patron %s updated (new ID %s)", original_id, updated.id)
        else:
            logger.info("Patron %s updated", original_id)
        return updated

    def remove_patron(self, patron_id: str) -> Patron:
        removed = self.directory.remove(validate_id(patron_id))
        logger.info("Patron %s removed", removed.id)
        return removed

    def load(self, path: Union[str, Path, None] = None, replace: bool = False) -> LoadReport:
        """Load a patron file into the directory.

        With replace=True the directory is emptied first, so reloading the
        same file does not report every line as a duplicate. The current
        patrons are only dropped once the file has been read.

        Without a path the active file is read. After a successful read the
        loaded file becomes the active one.
        """
        source = str(path or self.active_file)
        target = PatronDirectory() if replace else self.directory
        report = load_file(
            source,
            target,
            self.config.min_fine,
            self.config.max_fine,
            encoding=self.config.encoding,
        )
        if replace:
            self.directory.clear()
            for patron in target:
                self.directory.add(patron)
        self.current_file = source
        return report

    def save(self, path: Union[str, Path, None] = None) -> int:
        """Write every patron to `path`, or to the active file when omitted."""
        destination = str(path or self.active_file)
        writer = AtomicFileWriter(temp_suffix=self.config.temp_suffix)
        count = save_file(
            destination,
            self.directory.list(),
            encoding=self.config.encoding,
            writer=writer,
        )
        self.current_file = destination
        return count

    @staticmethod
    def _warn_if_name_splits(patron: Patron) -> None:
        if DELIMITER in patron.name:
            logger.warning(
                "Patron %s name %r contains %r; after a save and reload the part after it "
                "is read as the start of the address",
                patron.id,
                patron.name,
                DELIMITER,
            )
