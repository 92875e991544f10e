from __future__ import annotations

from decimal import Decimal

import pytest

from patron_registry.domain.record_codec import decode, encode, split_record
from patron_registry.errors import InvalidFieldError, MalformedLineError
from tests.conftest import make_patron

MIN_FINE = Decimal("0.00")
MAX_FINE = Decimal("1000.00")


def test_encode_renders_two_decimals():
    patron = make_patron("0000001", "Jane Doe", "123 Pine St Apt #2", "12.5")
    assert encode(patron) == "0000001-Jane Doe-123 Pine St Apt #2-12.50"


@pytest.mark.parametrize(
    "patron",
    [
        make_patron(),
        make_patron("0070070", "Jean Picard", "Rue du Bac-Paris-FR", "0.07"),
        make_patron("9999999", "Ms. Elizabeth Bennet", "Longbourn Manor, White-Hall Rd.", "1000.00"),
    ],
)
def test_decode_reverses_encode(patron):
    decoded = decode(encode(patron), MIN_FINE, MAX_FINE)
    assert decoded == patron
    assert (decoded.id, decoded.name, decoded.address, decoded.fine) == (
        patron.id, patron.name, patron.address, patron.fine,
    )


def test_split_simple_line():
    fields = split_record("1234567-Jane Doe-123 Pine St Apt #2-12.50")
    assert fields.id == "1234567"
    assert fields.name == "Jane Doe"
    assert fields.address == "123 Pine St Apt #2"
    assert fields.fine == "12.50"


def test_split_keeps_hyphens_in_address():
    fields = split_record("1234567-Mr. Sherlock Holmes-221-B Baker St., London-UK-15-0.00")
    assert fields.id == "1234567"
    assert fields.name == "Mr. Sherlock Holmes"
    assert fields.address == "221-B Baker St., London-UK-15"
    assert fields.fine == "0.00"


def test_hyphenated_middle_reconstructs_line():
    line = "0070070-James Bond-25 Wellington Square, Apartment 2-B, Chelsea, London-UK-0.07"
    patron = decode(line, MIN_FINE, MAX_FINE)

    assert patron.id == "0070070"
    assert patron.fine == Decimal("0.07")
    assert "-".join([patron.id, patron.name, patron.address, f"{patron.fine:.2f}"]) == line


def test_name_takes_text_up_to_first_middle_hyphen():
    # the non-greedy split gives the first hyphen to the name/address cut
    fields = split_record("1234567-David Ben-Gurion-17 Ben-Gurion Boulevard, Tel Aviv, Israel-1.07")
    assert fields.name == "David Ben"
    assert fields.address == "Gurion-17 Ben-Gurion Boulevard, Tel Aviv, Israel"


def test_split_strips_line_ending():
    fields = split_record("1234567-Jane-Addr-1.00\n")
    assert fields.fine == "1.00"


@pytest.mark.parametrize(
    "line",
    [
        "123456-Jane Doe-123 Pine St-1.00",      # 6-digit id
        "12345678-Jane Doe-123 Pine St-1.00",    # 8-digit id
        "A234567-Jane Doe-123 Pine St-1.00",     # non-digit id
        "1234567 Jane Doe-123 Pine St-1.00",     # no delimiter after id
    ],
)
def test_id_run_must_be_exactly_seven_digits(line):
    with pytest.raises(MalformedLineError):
        decode(line, MIN_FINE, MAX_FINE)


@pytest.mark.parametrize(
    "line",
    [
        "1234567-Jane Doe-12.50",                             # only three fields
        "1234567-12.50",                                      # id and fine only
        "1234567-Jane Doe-123 Pine St-",                      # empty fine
        "1234567-Jane Doe-123 Pine St-$12.50",                # currency symbol
        "9876543-Alexandria Ocasio-Cortez-74-09 37th Ave-1_000.00",
        "1234567-Jane Doe-123 Pine St-12.50 USD",
        "",
    ],
)
def test_malformed_shapes_are_rejected(line):
    with pytest.raises(MalformedLineError):
        split_record(line)


@pytest.mark.parametrize(
    "line, field",
    [
        ("1234567-Jane Doe-123 Pine St-1.2.3", "fine"),
        ("1234567-Jane Doe-123 Pine St-1.234", "fine"),
        ("1234567-Jane Doe-123 Pine St-1000.01", "fine"),
        ("1234567--123 Pine St-1.00", "name"),
        ("1234567-Jane Doe- -1.00", "address"),
    ],
)
def test_shape_ok_but_field_invalid(line, field):
    with pytest.raises(InvalidFieldError) as exc_info:
        decode(line, MIN_FINE, MAX_FINE)
    assert exc_info.value.field == field
    assert exc_info.value.cause is not None


def test_decode_trims_inner_fields():
    patron = decode("1234567- Jane Doe - 123 Pine St -5", MIN_FINE, MAX_FINE)
    assert patron.name == "Jane Doe"
    assert patron.address == "123 Pine St"
    assert str(patron.fine) == "5.00"
