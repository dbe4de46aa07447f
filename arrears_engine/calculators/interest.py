"""
Progressive Interest Accrual

Applies monthly late interest to overdue amounts.
All use Decimal for precision with ROUND_HALF_UP rounding, applied once to
the final result.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from ..models import Bidder, InterestBreakdown, InterestType
from ..validators import to_decimal

logger = logging.getLogger(__name__)


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half up."""
    return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class InterestAccrual:
    """Compounds late interest one whole month at a time."""

    # Limits applied only to the fractional-month estimate shown in notices
    NOTICE_MAX_MONTHLY_PERCENT = Decimal('20')
    NOTICE_MAX_DAYS = 1825
    NOTICE_MAX_INTEREST_MULTIPLE = Decimal('5')

    def accrue(self, base: Decimal, percent: Decimal | None, months: int) -> Decimal:
        """
        Compound `percent` per month over `months` whole months.

        Returns base unchanged when months < 1 or the rate is unset or not positive.
        Intermediate values are not rounded.
        """
        if months < 1 or not percent or to_decimal(percent) <= 0:
            return base

        rate = to_decimal(percent) / Decimal('100')
        amount = base
        for _ in range(months):
            amount = amount + amount * rate

        return quantize_money(amount)

    def accrue_simple(self, base: Decimal, percent: Decimal | None, months: int) -> Decimal:
        """Simple interest: base × (1 + rate × months)."""
        if months < 1 or not percent or to_decimal(percent) <= 0:
            return base

        rate = to_decimal(percent) / Decimal('100')
        return quantize_money(base + base * rate * months)

    def for_bidder(self, base: Decimal, bidder: Bidder, months: int) -> Decimal:
        """Apply the bidder's own rate and interest type."""
        if bidder.interest_type == InterestType.SIMPLE:
            return self.accrue_simple(base, bidder.late_interest_percent, months)
        return self.accrue(base, bidder.late_interest_percent, months)

    def notice_preview(
        self,
        base: Decimal,
        days_overdue: int,
        percent: Decimal | None,
        interest_type: str = InterestType.COMPOUND,
    ) -> InterestBreakdown:
        """
        Estimate interest for a collection notice using fractional months (days / 30).

        Rates above 20%/month, lateness beyond 5 years and interest above 500%
        of the base are capped.
        """
        if days_overdue <= 0 or not percent or percent <= 0 or base <= 0:
            return InterestBreakdown(interest=Decimal('0'), total=base)

        if days_overdue > self.NOTICE_MAX_DAYS:
            logger.warning(f"Days overdue {days_overdue} capped at {self.NOTICE_MAX_DAYS}")
            days_overdue = self.NOTICE_MAX_DAYS

        percent = to_decimal(percent)
        if percent > self.NOTICE_MAX_MONTHLY_PERCENT:
            logger.warning(f"Interest rate {percent}% capped at {self.NOTICE_MAX_MONTHLY_PERCENT}%")
            percent = self.NOTICE_MAX_MONTHLY_PERCENT

        rate = percent / Decimal('100')
        months = Decimal(days_overdue) / Decimal('30')

        if interest_type == InterestType.SIMPLE:
            interest = base * rate * months
        else:
            # Fractional exponent: float power, converted back through str
            factor = Decimal(str((1 + float(rate)) ** float(months)))
            interest = base * factor - base

        ceiling = base * self.NOTICE_MAX_INTEREST_MULTIPLE
        if interest > ceiling:
            logger.warning(f"Interest {quantize_money(interest)} capped at 500% of base {base}")
            interest = ceiling

        return InterestBreakdown(
            interest=quantize_money(interest),
            total=quantize_money(base + interest),
        )
