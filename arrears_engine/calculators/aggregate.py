"""
Status & Totals Aggregator

Combines per-bidder classifications and amounts into status records and
portfolio-wide totals.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from ..models import (
    BidderAssessment,
    BidderStatus,
    BidderStatusRecord,
    DebtorProfile,
    PortfolioTotals,
    UnitAmount,
    UnitStatus,
)
from .due_dates import DueDateCalculator
from .interest import InterestAccrual, quantize_money


class Severity:
    RECENT = "recente"
    MODERATE = "moderado"
    CRITICAL = "critico"


class StatusAggregator:
    """Builds status records and rolls them up across the portfolio."""

    MODERATE_AFTER_DAYS = 15
    CRITICAL_AFTER_DAYS = 30

    def __init__(self, interest: InterestAccrual | None = None, due_dates: DueDateCalculator | None = None):
        self.interest = interest or InterestAccrual()
        self.due_dates = due_dates or DueDateCalculator()

    def build_record(self, assessment: BidderAssessment, now: datetime) -> BidderStatusRecord:
        """Enrich one bidder with amounts owed, received and overdue."""
        auction = assessment.auction
        bidder = assessment.bidder
        classification = assessment.classification

        received = pending = overdue = Decimal('0')
        overdue_units = 0
        schedule = []

        for unit in classification.units:
            base = assessment.unit_amounts[unit.index] if unit.index < len(assessment.unit_amounts) else Decimal('0')

            if unit.status == UnitStatus.SETTLED:
                amount = self._received_amount(assessment, unit.index, base)
                received += amount
            elif unit.index in classification.past_due_units:
                days = self.due_dates.days_overdue(unit.due_date, now)
                amount = self.interest.for_bidder(base, bidder, self.due_dates.months_overdue(days))
                overdue += amount
                overdue_units += 1
            else:
                amount = base
                pending += amount

            schedule.append(UnitAmount(index=unit.index, base=base, with_interest=amount, interest=amount - base))

        next_unit = classification.next_due
        next_amount = schedule[next_unit.index].with_interest if next_unit else Decimal('0')

        urgent = classification.primary_overdue
        if urgent is not None:
            due = urgent.due_date
            days = urgent.days_overdue
            months = urgent.months_overdue
        else:
            due = next_unit.due_date if next_unit else None
            days = months = 0

        return BidderStatusRecord(
            auction_id=auction.id,
            auction_name=auction.name,
            bidder_id=bidder.id,
            bidder_name=bidder.name,
            document=bidder.document,
            status=classification.status,
            modality=assessment.plan.modality,
            total_amount=assessment.total_amount,
            units_settled=classification.units_settled,
            total_units=classification.total_units,
            next_due_index=classification.next_due_index,
            next_due_date=due,
            next_amount=quantize_money(next_amount),
            days_overdue=days,
            months_overdue=months,
            severity=self.severity(days) if classification.status == BidderStatus.OVERDUE else None,
            received=quantize_money(received),
            pending=quantize_money(pending),
            overdue=quantize_money(overdue),
            overdue_units=overdue_units,
            schedule=schedule,
            classification=classification,
        )

    def aggregate(self, records: list[BidderStatusRecord]) -> PortfolioTotals:
        """Counts by status, sums and averages across all records."""
        totals = PortfolioTotals(
            severity_counts={Severity.RECENT: 0, Severity.MODERATE: 0, Severity.CRITICAL: 0}
        )
        total_value = Decimal('0')
        overdue_days = []

        for record in records:
            totals.bidder_count += 1
            if record.status == BidderStatus.PAID:
                totals.paid_count += 1
            elif record.status == BidderStatus.OVERDUE:
                totals.overdue_count += 1
                overdue_days.append(record.days_overdue)
                totals.severity_counts[record.severity] += 1
            else:
                totals.pending_count += 1

            totals.total_received += record.received
            totals.total_pending += record.pending
            totals.total_overdue += record.overdue
            totals.overdue_unit_count += record.overdue_units
            total_value += record.total_amount

        if overdue_days:
            average = Decimal(sum(overdue_days)) / len(overdue_days)
            totals.average_days_overdue = int(average.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        if records:
            totals.average_amount_per_bidder = quantize_money(total_value / len(records))

        return totals

    def sort_records(self, records: list[BidderStatusRecord]) -> list[BidderStatusRecord]:
        """
        Display order: overdue, then pending, then settled.

        Within overdue and pending, the earliest due date comes first
        (most overdue / soonest due); unknown dates go last.
        """
        def key(record: BidderStatusRecord):
            order = BidderStatus.DISPLAY_ORDER.get(record.status, len(BidderStatus.DISPLAY_ORDER))
            if record.status == BidderStatus.PAID:
                return (order, False, date.max)
            return (order, record.next_due_date is None, record.next_due_date or date.max)

        return sorted(records, key=key)

    def severity(self, days_overdue: int) -> str:
        if days_overdue > self.CRITICAL_AFTER_DAYS:
            return Severity.CRITICAL
        if days_overdue > self.MODERATE_AFTER_DAYS:
            return Severity.MODERATE
        return Severity.RECENT

    def debtor_profile(
        self, records: list[BidderStatusRecord], name: str, document: str | None = None
    ) -> DebtorProfile:
        """Group a bidder's contracts across auctions by name or document."""
        profile = DebtorProfile(name=name, document=document)

        for record in records:
            same_name = record.bidder_name == name
            same_document = bool(document) and record.document == document
            if not (same_name or same_document):
                continue

            profile.contracts.append(record)
            profile.scheduled_units += record.total_units
            profile.settled_units += record.units_settled
            profile.overdue_units += record.overdue_units
            profile.total_value += record.total_amount
            profile.current_overdue += record.overdue

        return profile

    def _received_amount(self, assessment: BidderAssessment, index: int, base: Decimal) -> Decimal:
        """Settled amount, with interest when it was paid after its due date."""
        paid_on = assessment.bidder.paid_on
        if index >= len(paid_on) or paid_on[index] is None:
            return base

        due = assessment.classification.units[index].due_date
        paid_at = datetime(paid_on[index].year, paid_on[index].month, paid_on[index].day)
        days = self.due_dates.days_overdue(due, paid_at)
        return self.interest.for_bidder(base, assessment.bidder, self.due_dates.months_overdue(days))
