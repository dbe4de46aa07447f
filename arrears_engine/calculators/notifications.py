"""
Notification Triggers

Decides which e-mails a host should send. Nothing is delivered here:
payment confirmations come from diffing two bidder snapshots, reminders and
charges from a bidder's current status record.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from ..models import Auction, Bidder, BidderStatus, BidderStatusRecord, PaymentPlan
from ..settings import NotificationSettings
from ..validators import clamp_units
from .arrears import ArrearsClassifier
from .due_dates import DueDateCalculator
from .plan import PlanResolver


@dataclass
class UnitSettledEvent:
    auction_id: str
    bidder_id: str | None
    bidder_name: str
    unit_index: int
    unit_kind: str
    unit_number: int


@dataclass
class FullySettledEvent:
    auction_id: str
    bidder_id: str | None
    bidder_name: str


@dataclass
class DueNotice:
    """A reminder before the due date or a charge after it."""

    kind: str  # "reminder" or "charge"
    auction_id: str
    bidder_name: str
    email: str
    due_date: date
    amount: Decimal
    days_until_due: int = 0
    days_overdue: int = 0
    days_until_interest: int = 0


class NotificationPlanner:
    """Computes notification triggers from engine output."""

    REMINDER = "reminder"
    CHARGE = "charge"

    def __init__(self, settings: NotificationSettings | None = None, resolver: PlanResolver | None = None):
        self.settings = settings or NotificationSettings.from_env()
        self.resolver = resolver or PlanResolver()

    def payment_events(
        self, auction_id: str, previous: Bidder, current: Bidder, plan: PaymentPlan
    ) -> list:
        """
        One event per newly settled unit, plus one when the bidder becomes fully settled.

        Unmarking produces no events.
        """
        total = plan.total_units
        before = self._settled(previous, total)
        after = self._settled(current, total)

        events = []
        for index in range(before, after):
            kind, number = ArrearsClassifier.unit_label(plan, index)
            events.append(
                UnitSettledEvent(
                    auction_id=auction_id,
                    bidder_id=current.id,
                    bidder_name=current.name,
                    unit_index=index,
                    unit_kind=kind,
                    unit_number=number,
                )
            )

        if current.fully_settled and not previous.fully_settled:
            events.append(FullySettledEvent(auction_id=auction_id, bidder_id=current.id, bidder_name=current.name))

        return events

    def snapshot_events(self, previous: list[Auction], current: list[Auction], now: datetime) -> list:
        """Diff two portfolio snapshots. Bidders are matched by id, else by name."""
        known = {}
        for auction in previous:
            for bidder in auction.bidders:
                known[(auction.id, bidder.id or bidder.name)] = bidder

        events = []
        for auction in current:
            for bidder in auction.bidders:
                before = known.get((auction.id, bidder.id or bidder.name))
                if before is None:
                    continue
                plan = self.resolver.resolve_for_bidder(auction, bidder, now)
                events.extend(self.payment_events(auction.id, before, bidder, plan))
        return events

    def due_notice(self, bidder: Bidder, record: BidderStatusRecord, now: datetime) -> DueNotice | None:
        """Reminder when the next due date is close, charge once overdue long enough."""
        if not bidder.email or record.status == BidderStatus.PAID or record.next_due_date is None:
            return None

        if record.status == BidderStatus.OVERDUE:
            if record.days_overdue < self.settings.charge_days_after:
                return None
            return DueNotice(
                kind=self.CHARGE,
                auction_id=record.auction_id,
                bidder_name=bidder.name,
                email=bidder.email,
                due_date=record.next_due_date,
                amount=record.overdue,
                days_overdue=record.days_overdue,
                days_until_interest=max(0, DueDateCalculator.DAYS_PER_MONTH - record.days_overdue),
            )

        days_until = (record.next_due_date - now.date()).days
        if 0 < days_until <= self.settings.reminder_days_before:
            return DueNotice(
                kind=self.REMINDER,
                auction_id=record.auction_id,
                bidder_name=bidder.name,
                email=bidder.email,
                due_date=record.next_due_date,
                amount=record.next_amount,
                days_until_due=days_until,
            )
        return None

    @staticmethod
    def _settled(bidder: Bidder, total: int) -> int:
        return total if bidder.fully_settled else clamp_units(bidder.units_settled, total)
