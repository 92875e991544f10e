"""Line codec for patron records.

A record is a single line with four hyphen-delimited fields:

    <7-digit id>-<name>-<address>-<fine>

    1234567-Jane Doe-123 Pine St Apt #2-12.50

Names and addresses may contain the delimiter themselves, e.g.

    1234567-Mr. Sherlock Holmes-221-B Baker St., London-UK-15-0.00

so a plain split does not work. Decoding anchors both ends instead:

- head: the line starts with exactly 7 digits followed by the delimiter;
- tail: the text after the last delimiter is a run of digits and dots
  (the fine never contains the delimiter, so the last one is the cut);
- middle: what lies between is cut at its first delimiter; the left part is
  the name, the right part (delimiters included) is the address.

A delimiter written inside a name therefore comes back as part of the
address on the next decode; the id and fine always survive unchanged.
The partition is the same one `^(\\d{7})-(.*?)-(.*?)-([\\d.]+)$` yields.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from patron_registry.domain.patron import Patron
from patron_registry.domain.validators import (
    FieldKind,
    Amount,
    validate_amount,
    validate_id,
    validate_text,
)
from patron_registry.errors import InvalidFieldError, MalformedLineError, ValidationError

DELIMITER = "-"
ID_WIDTH = 7
_DIGITS = frozenset("0123456789")
_FINE_CHARS = frozenset("0123456789.")


@dataclass(frozen=True)
class RecordFields:
    """Raw (untrimmed, unvalidated) field text cut out of one line."""

    id: str
    name: str
    address: str
    fine: str


def encode(patron: Patron) -> str:
    """Render a patron as its file line (no trailing newline)."""
    return f"{patron.id}{DELIMITER}{patron.name}{DELIMITER}{patron.address}{DELIMITER}{patron.fine:.2f}"


def split_record(line: str) -> RecordFields:
    """Cut a line into its four raw fields using the head/tail anchors.

    Raises:
        MalformedLineError: if the line does not have the record shape.
    """
    text = line.strip()

    head = text[:ID_WIDTH]
    if len(head) < ID_WIDTH or not set(head) <= _DIGITS:
        raise MalformedLineError(line, "expected a 7-digit ID at the start")
    if text[ID_WIDTH:ID_WIDTH + 1] != DELIMITER:
        raise MalformedLineError(line, "ID must be exactly 7 digits followed by '-'")

    last = text.rfind(DELIMITER)
    fine = text[last + 1:]
    if not fine or not set(fine) <= _FINE_CHARS:
        raise MalformedLineError(line, "expected the fine amount after the last '-'")

    # last may be the id delimiter itself, which leaves an empty middle
    middle = text[ID_WIDTH + 1:last] if last > ID_WIDTH else ""
    cut = middle.find(DELIMITER)
    if last <= ID_WIDTH or cut < 0:
        raise MalformedLineError(line, "expected 4 fields: ID-Name-Address-Fine")

    return RecordFields(id=head, name=middle[:cut], address=middle[cut + 1:], fine=fine)


def decode(line: str, min_fine: Amount, max_fine: Amount) -> Patron:
    """Decode and validate one line into a Patron.

    Raises:
        MalformedLineError: shape mismatch, nothing is partially parsed.
        InvalidFieldError: shape matched but a field failed validation.
    """
    raw = split_record(line)
    text = line.strip()

    try:
        patron_id = validate_id(raw.id)
    except ValidationError as exc:
        raise InvalidFieldError(text, "id", exc.message, exc) from exc
    try:
        name = validate_text(FieldKind.PATRON_NAME, raw.name)
    except ValidationError as exc:
        raise InvalidFieldError(text, "name", exc.message, exc) from exc
    try:
        address = validate_text(FieldKind.PATRON_ADDRESS, raw.address)
    except ValidationError as exc:
        raise InvalidFieldError(text, "address", exc.message, exc) from exc
    try:
        fine: Decimal = validate_amount(raw.fine, min_fine, max_fine)
    except ValidationError as exc:
        raise InvalidFieldError(text, "fine", exc.message, exc) from exc

    return Patron(id=patron_id, name=name, address=address, fine=fine)
