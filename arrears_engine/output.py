"""
Output Builder

Constructs the API response from processing results.
"""

from datetime import date
from decimal import Decimal

from .models import BidderStatusRecord, PortfolioResult, PortfolioTotals, UnitState


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"R${value:,.2f}"


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


class OutputBuilder:
    """Builds the final output response."""

    def build(self, result: PortfolioResult) -> dict:
        """Construct the complete portfolio response."""
        return {
            "generated_at": result.generated_at.isoformat(),
            "bidders": [self._build_record(record) for record in result.records],
            "totals": self._build_totals(result.totals),
        }

    def build_interest(
        self, base: Decimal, total: Decimal, months: int | None = None, percent: Decimal | None = None
    ) -> dict:
        """Interest preview section."""
        interest = total - base
        result = {
            "base": to_money(base),
            "interest": to_money(interest),
            "total": to_money(total),
        }
        if months is not None and percent is not None:
            result["description"] = (
                f"{_fmt(to_money(base))} × (1 + {percent}%)^{months} = {_fmt(to_money(total))}"
                if interest else "No interest applies"
            )
        return result

    def _build_record(self, record: BidderStatusRecord) -> dict:
        """Build one bidder's status record, with the per-unit breakdown for reports."""
        units = record.classification.units if record.classification else []
        return {
            "auction_id": record.auction_id,
            "auction_name": record.auction_name,
            "bidder_id": record.bidder_id,
            "bidder_name": record.bidder_name,
            "document": record.document,
            "status": record.status,
            "modality": record.modality,
            "total_amount": to_money(record.total_amount),
            "units_settled": record.units_settled,
            "total_units": record.total_units,
            "next_due_index": record.next_due_index,
            "next_due_date": _iso(record.next_due_date),
            "next_amount": to_money(record.next_amount),
            "days_overdue": record.days_overdue,
            "months_overdue": record.months_overdue,
            "severity": record.severity,
            "received": to_money(record.received),
            "pending": to_money(record.pending),
            "overdue": to_money(record.overdue),
            "overdue_units": record.overdue_units,
            "primary_overdue_index": record.classification.primary_overdue_index if record.classification else None,
            "overdue_candidates": list(record.classification.overdue_candidates) if record.classification else [],
            "schedule": [
                self._build_unit(unit, record.schedule[unit.index])
                for unit in units
                if unit.index < len(record.schedule)
            ],
        }

    def _build_unit(self, unit: UnitState, amount) -> dict:
        return {
            "index": unit.index,
            "kind": unit.kind,
            "number": unit.number,
            "due_date": _iso(unit.due_date),
            "status": unit.status,
            "days_overdue": unit.days_overdue,
            "months_overdue": unit.months_overdue,
            "amount": to_money(amount.base),
            "interest": to_money(amount.interest),
            "amount_with_interest": to_money(amount.with_interest),
        }

    def _build_totals(self, totals: PortfolioTotals) -> dict:
        """Build the portfolio totals section."""
        return {
            "bidders": totals.bidder_count,
            "by_status": {
                "pago": totals.paid_count,
                "pendente": totals.pending_count,
                "atrasado": totals.overdue_count,
            },
            "total_received": to_money(totals.total_received),
            "total_pending": to_money(totals.total_pending),
            "total_overdue": to_money(totals.total_overdue),
            "total_outstanding": to_money(totals.total_outstanding),
            "overdue_units": totals.overdue_unit_count,
            "average_days_overdue": totals.average_days_overdue,
            "average_amount_per_bidder": to_money(totals.average_amount_per_bidder),
            "severity": dict(totals.severity_counts),
        }
