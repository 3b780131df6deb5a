"""DAS (MEI monthly tax) amount and due-date rules.

MEI pays a flat share of gross revenue with a fixed monthly floor. The DAS of
a competência is due on a fixed day of the following month.
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from paimcontab.core.config import settings
from paimcontab.core.exceptions import InvalidInputError

CENTS = Decimal("0.01")

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class Period:
    """A calendar month (competência)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidInputError(f"Invalid month: {self.month}")
        if not 1 <= self.year <= 9998:
            raise InvalidInputError(f"Invalid year: {self.year}")

    @classmethod
    def parse(cls, value: str) -> "Period":
        """Parse a ``YYYY-MM`` string."""
        match = _PERIOD_RE.match(value.strip()) if value else None
        if match is None:
            raise InvalidInputError(f"Invalid period '{value}', expected YYYY-MM")
        return cls(int(match.group(1)), int(match.group(2)))

    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def end_exclusive(self) -> date:
        """First day of the following month."""
        if self.month == 12:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.month + 1, 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert to a Decimal rounded to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_tax(
    gross_revenue: Decimal,
    rate: Decimal | None = None,
    min_amount: Decimal | None = None,
) -> Decimal:
    """Compute the DAS due on a month's gross revenue.

    ``tax = max(gross_revenue * rate, min_amount)``, rounded to cents.

    Raises:
        InvalidInputError: If gross_revenue is negative.
    """
    revenue = Decimal(str(gross_revenue))
    if revenue < 0:
        raise InvalidInputError(f"Gross revenue must not be negative: {revenue}")
    rate = settings.DAS_RATE if rate is None else rate
    min_amount = settings.DAS_MIN_AMOUNT if min_amount is None else min_amount
    return to_money(max(revenue * rate, min_amount))


def compute_due_date(period: Period, due_day: int | None = None) -> date:
    """Due date of the DAS for ``period``: a fixed day of the next month."""
    year, month = (period.year + 1, 1) if period.month == 12 else (period.year, period.month + 1)
    return date(year, month, due_day or settings.DAS_DUE_DAY)
