"""
Due-Date Calculator

Maps a resolved plan and a zero-based unit index to a concrete due date.
"""

from datetime import date, datetime, time, timedelta

from ..models import Modality, PaymentPlan


class DueDateCalculator:
    """Computes due dates and lateness for payment units."""

    # Months overdue use a fixed 30-day month, not calendar months
    DAYS_PER_MONTH = 30
    END_OF_DAY = time(23, 59, 59)

    def due_date(self, plan: PaymentPlan, index: int, now: datetime) -> date | None:
        """
        Due date of unit `index`, or None when it cannot be computed.

        - Cash: the configured date (index ignored), or today when unconfigured
        - Installments: start month + index, on the configured day
        - Down payment + installments: unit 0 is the down payment,
          unit i >= 1 is installment i - 1
        """
        if index < 0:
            return None

        if plan.modality == Modality.CASH:
            return plan.cash_due_date or now.date()

        if plan.modality == Modality.DOWN_PAYMENT_INSTALLMENTS:
            if index == 0:
                return plan.down_payment_due_date
            return self.installment_date(plan, index - 1, now)

        return self.installment_date(plan, index, now)

    def schedule(self, plan: PaymentPlan, now: datetime) -> list[date | None]:
        """Due dates for every unit of the plan."""
        return [self.due_date(plan, i, now) for i in range(plan.total_units)]

    def installment_date(self, plan: PaymentPlan, installment: int, now: datetime) -> date | None:
        start = self.parse_start_month(plan.start_month, now)
        if start is None or plan.due_day is None or not 1 <= plan.due_day <= 31:
            return None

        year, month = start
        months = (month - 1) + installment
        year += months // 12
        month = months % 12 + 1
        try:
            # Days past the end of the month roll into the next one (31 Feb -> 2/3 Mar)
            return date(year, month, 1) + timedelta(days=plan.due_day - 1)
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def parse_start_month(value, now: datetime) -> tuple[int, int] | None:
        """Parse "YYYY-MM" or a bare month number (current year)."""
        if value is None:
            return None
        text = str(value).strip()
        try:
            if "-" in text:
                year_part, month_part = text.split("-")[:2]
                year, month = int(year_part), int(month_part)
            else:
                year, month = now.year, int(text)
        except ValueError:
            return None
        if not 1 <= month <= 12 or year < 1:
            return None
        return year, month

    @classmethod
    def end_of_day(cls, due: date) -> datetime:
        return datetime.combine(due, cls.END_OF_DAY)

    @classmethod
    def is_past_due(cls, due: date | None, now: datetime) -> bool:
        return due is not None and now > cls.end_of_day(due)

    @classmethod
    def days_overdue(cls, due: date | None, now: datetime) -> int:
        """
        Whole days late, counted from the end of the due day.

        The first instant after 23:59:59 on the due date counts as day 1.
        """
        if not cls.is_past_due(due, now):
            return 0
        elapsed = now - cls.end_of_day(due)
        return elapsed.days + 1

    @classmethod
    def months_overdue(cls, days_overdue: int) -> int:
        return max(0, days_overdue) // cls.DAYS_PER_MONTH
