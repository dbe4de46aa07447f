"""
Plan Edit Events

Typed publish/subscribe for payment-plan edits, plus a store that keeps one
authoritative auction snapshot up to date with published edits.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field, fields, replace
from typing import Callable

from .models import Auction, PlanOverride

logger = logging.getLogger(__name__)

PLAN_FIELDS = {f.name for f in fields(PlanOverride)}


@dataclass(frozen=True)
class PlanParametersChanged:
    """
    Plan parameters edited on an auction, a lot or a bidder.

    The target is the bidder when bidder_id is set, else the lot when lot_id
    is set, else the auction itself. `changes` maps PlanOverride field names
    to new values (None clears a field).
    """

    auction_id: str
    changes: dict = field(default_factory=dict)
    lot_id: str | None = None
    bidder_id: str | None = None


class PlanEventBus:
    """Dispatches events to handlers subscribed to their exact type."""

    def __init__(self):
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def publish(self, event) -> int:
        """Deliver to every subscriber in subscription order. Returns the handler count."""
        handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            handler(event)
        return len(handlers)


class PlanEditStore:
    """Single source of truth for the auction snapshot the engine reads."""

    def __init__(self, auctions: list[Auction], bus: PlanEventBus | None = None):
        self._auctions = {auction.id: auction for auction in auctions}
        if bus is not None:
            bus.subscribe(PlanParametersChanged, self.apply)

    @property
    def auctions(self) -> list[Auction]:
        return list(self._auctions.values())

    def get(self, auction_id: str) -> Auction | None:
        return self._auctions.get(auction_id)

    def apply(self, event: PlanParametersChanged) -> None:
        """Apply an edit immutably. Edits for unknown auctions are ignored."""
        unknown = set(event.changes) - PLAN_FIELDS
        if unknown:
            raise ValueError(f"Unknown plan fields: {sorted(unknown)}")
        changes = PlanOverride.coerce_changes(event.changes)

        auction = self._auctions.get(event.auction_id)
        if auction is None:
            logger.debug(f"Plan edit for unknown auction {event.auction_id}, ignoring")
            return

        if event.bidder_id is not None:
            bidders = [
                replace(b, plan=replace(b.plan, **changes)) if b.id == event.bidder_id else b
                for b in auction.bidders
            ]
            updated = replace(auction, bidders=bidders)
        elif event.lot_id is not None:
            lots = [
                replace(lot, plan=replace(lot.plan, **changes)) if lot.id == event.lot_id else lot
                for lot in auction.lots
            ]
            updated = replace(auction, lots=lots)
        else:
            updated = replace(auction, plan=replace(auction.plan, **changes))

        self._auctions[auction.id] = updated
