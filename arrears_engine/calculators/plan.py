"""
PaymentPlan Resolver

Derives the effective payment plan for a bidder from its own overrides, the
lot it won and the auction defaults.
"""

from datetime import datetime

from ..models import Auction, Bidder, Lot, Modality, PaymentPlan, PlanOverride


class PlanResolver:
    """Resolves payment plans, preferring the most specific configuration."""

    DEFAULT_MODALITY = Modality.INSTALLMENTS
    DEFAULT_INSTALLMENT_COUNT = 12
    DEFAULT_DUE_DAY = 15

    def resolve(self, auction: Auction, lot: Lot | None, bidder: Bidder, now: datetime) -> PaymentPlan:
        """
        Resolve a plan field by field.

        Priority order:
        1. Bidder override
        2. Lot override
        3. Auction default
        4. Built-in fallback (installments, 12 units, day 15, month of `now`)
           when nothing at all is configured
        """
        layers = [bidder.plan, lot.plan if lot else PlanOverride(), auction.plan]

        if all(layer.is_empty for layer in layers):
            return self.fallback_plan(now)

        modality = self._pick(layers, "modality") or self.DEFAULT_MODALITY
        count = self._pick(layers, "installment_count")
        if count is None or count < 1:
            count = self.DEFAULT_INSTALLMENT_COUNT

        return PaymentPlan(
            modality=modality,
            installment_count=1 if modality == Modality.CASH else count,
            start_month=self._pick(layers, "start_month"),
            due_day=self._pick(layers, "due_day"),
            cash_due_date=self._pick(layers, "cash_due_date"),
            down_payment_due_date=self._pick(layers, "down_payment_due_date"),
            down_payment_amount=self._pick(layers, "down_payment_amount"),
        )

    def resolve_for_bidder(self, auction: Auction, bidder: Bidder, now: datetime) -> PaymentPlan:
        """Resolve using the lot referenced by the bidder, if any."""
        return self.resolve(auction, auction.find_lot(bidder.lot_id), bidder, now)

    def fallback_plan(self, now: datetime) -> PaymentPlan:
        return PaymentPlan(
            modality=self.DEFAULT_MODALITY,
            installment_count=self.DEFAULT_INSTALLMENT_COUNT,
            start_month=f"{now.year:04d}-{now.month:02d}",
            due_day=self.DEFAULT_DUE_DAY,
        )

    @staticmethod
    def _pick(layers: list[PlanOverride], name: str):
        for layer in layers:
            value = getattr(layer, name)
            if value is not None:
                return value
        return None
