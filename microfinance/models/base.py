"""Base value types shared across products."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from microfinance.exceptions import InvalidPeriodRangeError

ZERO = Decimal("0")


def as_money(value: Any) -> Decimal:
    """Coerce a possibly missing numeric field to ``Decimal``.

    ``None`` and empty strings become zero. Floats go through ``str`` so
    that ``0.1`` stays ``Decimal("0.1")``.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class PeriodRange:
    """Inclusive ``[start, end]`` window used to scope every computation."""

    start: datetime
    end: datetime
    label: str = ""

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidPeriodRangeError(
                f"Period range starts after it ends: {self.start.isoformat()} > {self.end.isoformat()}"
            )

    def contains(self, instant: datetime | None) -> bool:
        """Return True if ``instant`` falls inside the range, both ends included."""
        if instant is None:
            return False
        return self.start <= instant <= self.end
