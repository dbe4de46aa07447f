"""
Progress Tracker

Marks and unmarks payment units under the monotonic rule: only the next
unsettled unit can be marked paid, only the most recently settled unit can be
unmarked.
"""

from dataclasses import replace

from ..models import Bidder, Classification, PaymentPlan
from ..validators import clamp_units


class ProgressTracker:
    """Moves the settled-units counter and the fully-settled flag together."""

    def can_mark(self, classification: Classification, index: int) -> bool:
        return classification.next_due_index is not None and index == classification.next_due_index

    def can_unmark(self, classification: Classification, index: int) -> bool:
        return classification.last_settled_index is not None and index == classification.last_settled_index

    def mark_next_paid(self, bidder: Bidder, plan: PaymentPlan) -> Bidder:
        """Settle the next unit. Reaching the last unit sets fully_settled."""
        total = plan.total_units
        if bidder.fully_settled:
            raise ValueError(f"Bidder {bidder.name!r} is already fully settled")

        settled = clamp_units(bidder.units_settled, total)
        if settled >= total:
            raise ValueError(f"Bidder {bidder.name!r} has no unsettled unit left")

        settled += 1
        return replace(bidder, units_settled=settled, fully_settled=settled == total)

    def unmark_last_paid(self, bidder: Bidder, plan: PaymentPlan) -> Bidder:
        """Reopen the most recently settled unit. Always clears fully_settled."""
        total = plan.total_units
        settled = total if bidder.fully_settled else clamp_units(bidder.units_settled, total)
        if settled <= 0:
            raise ValueError(f"Bidder {bidder.name!r} has no settled unit to reopen")

        return replace(bidder, units_settled=settled - 1, fully_settled=False)

    def toggle(self, bidder: Bidder, plan: PaymentPlan, classification: Classification, index: int) -> Bidder:
        """Toggle unit `index`, enforcing the monotonic order."""
        if self.can_mark(classification, index):
            return self.mark_next_paid(bidder, plan)
        if self.can_unmark(classification, index):
            return self.unmark_last_paid(bidder, plan)
        raise ValueError(
            f"Unit {index} cannot be toggled: next due is {classification.next_due_index}, "
            f"last settled is {classification.last_settled_index}"
        )
