"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from catalog.domain.exceptions import ValidationError

_HUNDRED = Decimal("100")
_CLOCK_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount.

    Uses Decimal so percentage discounts never pick up float noise.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def percent_off(self, percent: Decimal) -> Money:
        """Take ``percent`` % off this amount, floored at zero."""
        reduced = self.amount - self.amount * (percent / _HUNDRED)
        return Money(max(Decimal("0"), reduced))

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


def to_decimal(value: str | float | int | Decimal, field_name: str) -> Decimal:
    """Coerce a numeric payload value to Decimal."""
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid number for {field_name}: {value!r}") from exc


@dataclass(frozen=True)
class ClockTime:
    """A wall-clock time of day in ``HH:mm`` form."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _CLOCK_RE.match(self.value):
            raise ValidationError(
                f"Time must be in HH:mm format, got {self.value!r}",
                code="INVALID_TIME_WINDOW",
            )

    @property
    def minutes(self) -> int:
        hours, minutes = self.value.split(":")
        return int(hours) * 60 + int(minutes)

    def __str__(self) -> str:
        return self.value
