from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Optional, Union

from patron_registry.domain.patron import to_money
from patron_registry.errors import ValidationError, ValidationReason

ID_RE = re.compile(r"[0-9]{7}")
MONEY_RE = re.compile(r"[0-9]+(?:\.[0-9]{1,2})?")
QUANTITY_RE = re.compile(r"[+-]?[0-9]+")

SKU_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._/-]{0,31}")
EMAIL_RE = re.compile(r"[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}")
PHONE_RE = re.compile(r"[0-9]{0,15}")
IMAGE_RE = re.compile(r".*\.(?:png|jpe?g|gif)", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s+")

MAX_QUANTITY = 2**64 - 1

TEXT_SYMBOLS = frozenset(" '_@#$%^&/.:-")
ADDRESS_SYMBOLS = frozenset(" ,.'’#-/()")

Amount = Union[Decimal, int, str]


def _letters_and(symbols: frozenset, categories: str) -> Callable[[str], bool]:
    # categories is a string of unicode major classes, e.g. "LMN"
    def check(text: str) -> bool:
        for ch in text:
            if ch in symbols:
                continue
            if unicodedata.category(ch)[0] in categories:
                continue
            if "0" <= ch <= "9":
                continue
            return False
        return True

    return check


def _no_markup(text: str) -> bool:
    return not any(ch in "<>" or unicodedata.category(ch) == "Cc" for ch in text)


def password_problems(text: str) -> list[str]:
    problems: list[str] = []
    if any(ch.isspace() for ch in text):
        problems.append("not contain spaces")
    if not re.search(r"[a-z]", text):
        problems.append("include at least one lowercase letter")
    if not re.search(r"[A-Z]", text):
        problems.append("include at least one uppercase letter")
    if not re.search(r"[0-9]", text):
        problems.append("include at least one digit (0-9)")
    if not re.search(r"[^\w\s]", text):
        problems.append("include at least one symbol (e.g. !, @, #, $, %)")
    return problems


@dataclass(frozen=True)
class FieldRule:
    label: str
    min_len: int
    max_len: Optional[int]
    shape: Optional[Callable[[str], bool]] = None
    expected: str = ""


_text_shape = _letters_and(TEXT_SYMBOLS, "LM")


class FieldKind(Enum):
    """Closed set of text field kinds, each with its bounds and shape."""

    PATRON_NAME = FieldRule("Name", 1, None)
    PATRON_ADDRESS = FieldRule("Address", 1, None)
    NAME = FieldRule(
        "Name", 2, 40, _text_shape,
        "letters, digits, spaces, apostrophes, hyphens, periods and common symbols",
    )
    BRAND = FieldRule(
        "Brand", 2, 40, _text_shape,
        "letters, digits, spaces and standard punctuation",
    )
    CATEGORY = FieldRule(
        "Category", 3, 30, _text_shape,
        "letters, digits, spaces and standard punctuation",
    )
    SKU = FieldRule(
        "Sku", 1, 32, lambda s: SKU_RE.fullmatch(s) is not None,
        "letters/digits plus . _ - /, no spaces",
    )
    DESCRIPTION = FieldRule(
        "Description", 1, 10000, _no_markup,
        "printable characters only; no control characters or < >",
    )
    ADDRESS = FieldRule(
        "Address", 5, 100, _letters_and(ADDRESS_SYMBOLS, "LMN"),
        "letters, numbers, spaces, commas, periods, apostrophes, # - / ( )",
    )
    EMAIL = FieldRule(
        "Email", 5, 100, lambda s: EMAIL_RE.fullmatch(s) is not None,
        "email format (name@provider.com)",
    )
    PHONE = FieldRule(
        "Phone", 10, 15, lambda s: PHONE_RE.fullmatch(s) is not None,
        "Phone number (no dashes nor parenthesis)",
    )
    IMAGE = FieldRule(
        "Image", 1, 255, lambda s: IMAGE_RE.fullmatch(s) is not None,
        "jpeg, png or gif file name",
    )
    PASSWORD = FieldRule(
        "Password", 4, 64, lambda s: not password_problems(s),
        "lowercase, UPPERCASE, digit and symbol, no spaces",
    )

    @property
    def rule(self) -> FieldRule:
        return self.value


def validate_id(value: Optional[str], field: str = "id") -> str:
    """Return the trimmed id if it is exactly 7 ASCII digits.

    Raises:
        ValidationError: INVALID_FORMAT otherwise.
    """
    text = (value or "").strip()
    if ID_RE.fullmatch(text) is None:
        raise ValidationError(
            field, ValidationReason.INVALID_FORMAT, f"ID must be exactly 7 digits, got {text!r}"
        )
    return text


def validate_text(
    kind: FieldKind,
    value: Optional[str],
    min_len: Optional[int] = None,
    max_len: Optional[int] = None,
) -> str:
    """Validate free text for the given field kind and return it trimmed.

    Checks run in order: empty, length bounds (on the trimmed text), then the
    kind's shape predicate, applied with whitespace runs collapsed to one
    space. Explicit bounds override the kind's defaults.
    """
    rule = kind.rule
    field = kind.name.lower()
    lo = rule.min_len if min_len is None else min_len
    hi = rule.max_len if max_len is None else max_len

    text = (value or "").strip()
    if not text:
        raise ValidationError(field, ValidationReason.EMPTY, f"{rule.label} must not be empty")
    if len(text) < lo:
        raise ValidationError(
            field, ValidationReason.TOO_SHORT, f"{rule.label} too short (min {lo} characters)"
        )
    if hi is not None and len(text) > hi:
        raise ValidationError(
            field, ValidationReason.TOO_LONG, f"{rule.label} too long (max {hi} characters)"
        )

    if kind is FieldKind.PASSWORD:
        problems = password_problems(text)
        if problems:
            raise ValidationError(
                field, ValidationReason.FORMAT_MISMATCH, "Password must " + "; ".join(problems)
            )
    elif rule.shape is not None and not rule.shape(_WHITESPACE_RUN.sub(" ", text)):
        raise ValidationError(
            field, ValidationReason.FORMAT_MISMATCH, f"Please enter a valid {rule.expected}."
        )
    return text


def validate_amount(value: Optional[str], minimum: Amount, maximum: Amount, field: str = "fine") -> Decimal:
    """Parse a plain decimal amount (at most 2 fraction digits) within [minimum, maximum].

    Only digits and a single dot are accepted: no sign, no thousands
    separators, no commas. The result is quantized to 2 places.

    Raises:
        ValidationError: NOT_A_NUMBER for a bad form, OUT_OF_RANGE for a
            value outside the bounds (including negative amounts).
    """
    text = (value or "").strip()
    lo = Decimal(str(minimum))
    hi = Decimal(str(maximum))

    if text.startswith("-") and MONEY_RE.fullmatch(text[1:]):
        raise ValidationError(
            field, ValidationReason.OUT_OF_RANGE, f"{field} must be non-negative, got {text}"
        )
    if MONEY_RE.fullmatch(text) is None:
        if not text:
            message = f"{field} is required"
        else:
            message = f"{field} must be a non-negative number with up to 2 decimals, got {text!r}"
        raise ValidationError(field, ValidationReason.NOT_A_NUMBER, message)

    try:
        amount = to_money(Decimal(text))
    except InvalidOperation as exc:
        raise ValidationError(
            field, ValidationReason.NOT_A_NUMBER, f"{field} is not a number: {text!r}"
        ) from exc

    if amount < lo or amount > hi:
        raise ValidationError(
            field, ValidationReason.OUT_OF_RANGE, f"{field} {amount} out of range [{lo:.2f} - {hi:.2f}]"
        )
    return amount


def validate_quantity(value: Optional[str], field: str = "quantity") -> int:
    """Parse a whole, non-negative quantity that fits an unsigned 64-bit integer."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(field, ValidationReason.EMPTY, "Quantity is required.")
    if QUANTITY_RE.fullmatch(text) is None:
        raise ValidationError(
            field,
            ValidationReason.NOT_A_NUMBER,
            f"Quantity required: a non-negative whole number. We got {text!r}.",
        )

    qty = int(text)
    if qty < 0:
        raise ValidationError(
            field,
            ValidationReason.NEGATIVE,
            f"Quantity required: a non-negative whole number. We got {text!r}.",
        )
    if qty > MAX_QUANTITY:
        raise ValidationError(field, ValidationReason.OUT_OF_RANGE, f"Quantity is too large. We got {text!r}.")
    return qty
