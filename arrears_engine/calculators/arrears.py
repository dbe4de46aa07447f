"""
Arrears Classifier

Classifies every payment unit of a plan as settled, pending or overdue given
the progress counter and an explicit instant.
"""

from datetime import datetime

from ..models import (
    BidderStatus,
    Classification,
    Modality,
    PaymentPlan,
    UnitKind,
    UnitState,
    UnitStatus,
)
from ..validators import clamp_units
from .due_dates import DueDateCalculator


class ArrearsClassifier:
    """Turns (plan, progress, now) into a per-unit classification."""

    def __init__(self, due_dates: DueDateCalculator | None = None):
        self.due_dates = due_dates or DueDateCalculator()

    def classify(
        self,
        plan: PaymentPlan,
        units_settled: int,
        fully_settled: bool,
        now: datetime,
    ) -> Classification:
        """
        Classify all units.

        Rules:
        - fully_settled: every unit is settled, nothing is due
        - units below the counter are settled
        - the first unsettled unit is overdue if now is past the end of its
          due day, pending otherwise; when it has no due date the next
          unsettled unit with one is checked instead
        - later units stay pending, except the first installment of a
          down-payment plan when it is overdue together with the down payment
        """
        total = plan.total_units
        dates = self.due_dates.schedule(plan, now)

        if fully_settled:
            units = [self._unit(plan, i, dates[i], UnitStatus.SETTLED, now) for i in range(total)]
            return Classification(
                units=units,
                units_settled=total,
                total_units=total,
                status=BidderStatus.PAID,
                last_settled_index=total - 1 if total else None,
            )

        settled = clamp_units(units_settled, total)
        # A next unit without a date (down payment never scheduled) cannot be
        # chased, so the first unsettled unit with a date stands in for it
        chased = next((i for i in range(settled, total) if dates[i] is not None), None)
        units = []
        for i in range(total):
            if i < settled:
                status = UnitStatus.SETTLED
            elif i == chased and self.due_dates.is_past_due(dates[i], now):
                status = UnitStatus.OVERDUE
            else:
                status = UnitStatus.PENDING
            units.append(self._unit(plan, i, dates[i], status, now))

        if self._down_payment_and_first_installment_overdue(plan, settled, units, now):
            first = units[1]
            units[1] = self._unit(plan, 1, first.due_date, UnitStatus.OVERDUE, now)

        candidates = [u.index for u in units if u.status == UnitStatus.OVERDUE]
        primary = None
        if candidates:
            # Earliest due date is the most urgent; ties keep the lower index
            primary = min(candidates, key=lambda i: (units[i].due_date, i))

        next_due = settled if settled < total else None
        if next_due is None:
            # Counter reached the end without the fully-settled flag
            status = BidderStatus.PAID
        elif candidates:
            status = BidderStatus.OVERDUE
        else:
            status = BidderStatus.PENDING

        past_due = [
            u.index
            for u in units
            if u.status != UnitStatus.SETTLED and self.due_dates.is_past_due(u.due_date, now)
        ]

        return Classification(
            units=units,
            units_settled=settled,
            total_units=total,
            status=status,
            next_due_index=next_due,
            last_settled_index=settled - 1 if settled > 0 else None,
            overdue_candidates=candidates,
            primary_overdue_index=primary,
            past_due_units=past_due,
        )

    def _down_payment_and_first_installment_overdue(
        self, plan: PaymentPlan, settled: int, units: list[UnitState], now: datetime
    ) -> bool:
        if plan.modality != Modality.DOWN_PAYMENT_INSTALLMENTS or settled != 0 or len(units) < 2:
            return False
        return units[0].status == UnitStatus.OVERDUE and self.due_dates.is_past_due(units[1].due_date, now)

    def _unit(self, plan: PaymentPlan, index: int, due, status: str, now: datetime) -> UnitState:
        kind, number = self.unit_label(plan, index)
        days = months = 0
        if status == UnitStatus.OVERDUE:
            days = self.due_dates.days_overdue(due, now)
            months = self.due_dates.months_overdue(days)
        return UnitState(
            index=index,
            kind=kind,
            number=number,
            due_date=due,
            status=status,
            days_overdue=days,
            months_overdue=months,
        )

    @staticmethod
    def unit_label(plan: PaymentPlan, index: int) -> tuple[str, int]:
        """Kind of unit and its human number (0 for the down payment)."""
        if plan.modality == Modality.CASH:
            return UnitKind.CASH, 1
        if plan.modality == Modality.DOWN_PAYMENT_INSTALLMENTS:
            if index == 0:
                return UnitKind.DOWN_PAYMENT, 0
            return UnitKind.INSTALLMENT, index
        return UnitKind.INSTALLMENT, index + 1
