"""Bulk load and explicit save of patron line files.

Loading never stops on a bad record: blank lines are skipped, malformed or
invalid lines are reported, and a repeated id keeps the first patron seen.
Only a source that cannot be opened or read raises (OSError).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from patron_registry.domain.patron import Patron
from patron_registry.domain.record_codec import decode, encode
from patron_registry.domain.validators import Amount
from patron_registry.errors import DuplicateIdError, InvalidFieldError, MalformedLineError
from patron_registry.repositories.directory import PatronDirectory
from patron_registry.storage.atomic_writer import AtomicFileWriter

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SkippedLine:
    line_number: int
    raw: str
    reason: str


@dataclass
class LoadReport:
    """Outcome of one bulk load pass."""

    loaded: int = 0
    blank: int = 0
    malformed: List[SkippedLine] = field(default_factory=list)
    duplicates: List[SkippedLine] = field(default_factory=list)

    @property
    def skipped_malformed(self) -> int:
        return len(self.malformed)

    @property
    def skipped_duplicate(self) -> int:
        return len(self.duplicates)

    @property
    def skipped(self) -> List[SkippedLine]:
        return sorted(self.malformed + self.duplicates, key=lambda s: s.line_number)

    @property
    def skipped_lines(self) -> List[str]:
        """Raw text of every skipped line, in file order."""
        return [s.raw for s in self.skipped]


_ESCAPED_BYTES = range(0xDC80, 0xDD00)


def _has_undecodable_bytes(line: str) -> bool:
    # surrogateescape maps each bad byte to U+DC80..U+DCFF
    return any(ord(ch) in _ESCAPED_BYTES for ch in line)


def _printable(line: str) -> str:
    return "".join("\ufffd" if ord(ch) in _ESCAPED_BYTES else ch for ch in line)


def load_lines(
    lines: Iterable[str],
    directory: PatronDirectory,
    min_fine: Amount,
    max_fine: Amount,
    encoding: str = "utf-8",
) -> LoadReport:
    """Decode each line and add the patrons to `directory`.

    Lines read with errors="surrogateescape" that still carry undecodable
    bytes are reported as malformed; `encoding` names the source encoding.
    """
    report = LoadReport()

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line:
            report.blank += 1
            continue

        if _has_undecodable_bytes(line):
            shown = _printable(line)
            logger.warning("Line %d skipped: not valid %s", line_number, encoding)
            report.malformed.append(SkippedLine(line_number, shown, f"not valid {encoding} text"))
            continue

        try:
            patron = decode(line, min_fine, max_fine)
        except (MalformedLineError, InvalidFieldError) as exc:
            logger.warning("Line %d skipped: %s", line_number, exc)
            report.malformed.append(SkippedLine(line_number, line, str(exc)))
            continue

        try:
            directory.add(patron)
        except DuplicateIdError as exc:
            logger.warning("Line %d skipped: duplicate ID %s", line_number, exc.patron_id)
            report.duplicates.append(SkippedLine(line_number, line, str(exc)))
            continue

        report.loaded += 1

    logger.info(
        "Load finished: loaded=%d malformed=%d duplicates=%d blank=%d",
        report.loaded,
        report.skipped_malformed,
        report.skipped_duplicate,
        report.blank,
    )
    return report


def load_file(
    path: PathLike,
    directory: PatronDirectory,
    min_fine: Amount,
    max_fine: Amount,
    encoding: str = "utf-8",
) -> LoadReport:
    """Stream a patron file into `directory`.

    A line that does not decode in `encoding` is skipped like any other
    malformed line; the rest of the file still loads.

    Raises:
        OSError: if the file cannot be opened or read.
    """
    path = Path(path)
    logger.info("Loading patrons from %s", path)
    with path.open("r", encoding=encoding, errors="surrogateescape") as fh:
        return load_lines(fh, directory, min_fine, max_fine, encoding=encoding)


def save_file(
    path: PathLike,
    patrons: Iterable[Patron],
    encoding: str = "utf-8",
    writer: Optional[AtomicFileWriter] = None,
) -> int:
    """Write patrons to `path`, one line each, replacing the file atomically.

    Returns the number of patrons written.
    """
    lines = [encode(p) for p in patrons]
    content = "".join(line + "\n" for line in lines)

    writer = writer or AtomicFileWriter()
    writer.atomic_write(str(path), content, encoding=encoding)
    logger.info("Saved %d patrons to %s", len(lines), path)
    return len(lines)
