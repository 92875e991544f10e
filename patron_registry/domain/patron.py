from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

CENTS = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    """Quantize an amount to 2 decimal places, rounding half-up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Patron:
    """One library patron.

    Two patrons are the same patron when their ids match; name, address and
    fine are attributes and take no part in equality or hashing.

    The id is kept as text so leading zeros survive. No validation happens
    here: build patrons through the validators, the record codec or
    PatronService.
    """

    id: str
    name: str = field(compare=False)
    address: str = field(compare=False)
    fine: Decimal = field(compare=False)

    def __post_init__(self) -> None:
        # frozen, so go through object.__setattr__ to normalise the scale
        object.__setattr__(self, "fine", to_money(Decimal(self.fine)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "fine": f"{self.fine:.2f}",
        }
