"""
Unit Amount Calculator

Splits a bidder's total into per-unit base amounts.
"""

from decimal import Decimal

from ..models import Bidder, Modality, PaymentPlan
from ..validators import parse_currency
from .interest import quantize_money


class UnitAmountCalculator:
    """Computes totals and per-unit amounts. Intermediate shares are not rounded."""

    DEFAULT_DOWN_PAYMENT_RATE = Decimal('0.30')

    TRIPLE_WEIGHT = 3
    DOUBLE_WEIGHT = 2
    SINGLE_WEIGHT = 1

    def total_amount(self, bidder: Bidder) -> Decimal:
        """
        Total owed by the bidder.

        Priority order:
        1. Multiplier pricing (bid × factor) when enabled with positive values
        2. Numeric amount
        3. Parsed amount string
        """
        if bidder.uses_multiplier and bidder.bid_value and bidder.multiplier:
            if bidder.bid_value > 0 and bidder.multiplier > 0:
                return quantize_money(bidder.bid_value * bidder.multiplier)

        if bidder.amount is not None:
            return bidder.amount

        return parse_currency(bidder.amount_text)

    def unit_amounts(self, plan: PaymentPlan, bidder: Bidder, total: Decimal | None = None) -> list[Decimal]:
        """Base amount of every unit, in unit order."""
        if total is None:
            total = self.total_amount(bidder)

        if plan.modality == Modality.CASH:
            return [total]

        if plan.modality == Modality.DOWN_PAYMENT_INSTALLMENTS:
            down_payment = self.down_payment_amount(plan, total)
            remainder = total - down_payment
            return [down_payment] + self._installments(remainder, plan.installment_count, bidder)

        return self._installments(total, plan.installment_count, bidder)

    def down_payment_amount(self, plan: PaymentPlan, total: Decimal) -> Decimal:
        if plan.down_payment_amount is not None and plan.down_payment_amount > 0:
            return plan.down_payment_amount
        return total * self.DEFAULT_DOWN_PAYMENT_RATE

    def _installments(self, amount: Decimal, count: int, bidder: Bidder) -> list[Decimal]:
        if count < 1:
            return []

        weights = self.installment_weights(bidder, count)
        total_weight = sum(weights)
        share = amount / total_weight
        return [share * weight for weight in weights]

    def installment_weights(self, bidder: Bidder, count: int) -> list[int]:
        """
        Weight of each installment.

        A tiered structure (triples, then doubles, then singles) applies only
        when it accounts for exactly `count` installments; otherwise equal.
        """
        tiers = bidder.triple_installments + bidder.double_installments + bidder.single_installments
        if not bidder.has_tiered_structure or tiers != count:
            return [self.SINGLE_WEIGHT] * count

        return (
            [self.TRIPLE_WEIGHT] * bidder.triple_installments
            + [self.DOUBLE_WEIGHT] * bidder.double_installments
            + [self.SINGLE_WEIGHT] * bidder.single_installments
        )
