"""
Portfolio Processor - Main Orchestrator

Coordinates the arrears pipeline through discrete, testable steps.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from .calculators import (
    ArrearsClassifier,
    DueDateCalculator,
    InterestAccrual,
    PlanResolver,
    StatusAggregator,
    UnitAmountCalculator,
)
from .models import Auction, Bidder, BidderAssessment, InterestType, PortfolioResult
from .output import OutputBuilder
from .validators import InputValidator, parse_instant, to_decimal

logger = logging.getLogger(__name__)


class PortfolioProcessor:
    """
    Main orchestrator for portfolio processing.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Normalize Records
    3. Resolve Payment Plan (per bidder)
    4. Compute Unit Amounts
    5. Classify Units
    6. Build Status Records (interest applied)
    7. Aggregate Totals
    8. Build Output
    """

    def __init__(self):
        self.validator = InputValidator()
        self.resolver = PlanResolver()
        self.due_dates = DueDateCalculator()
        self.amounts = UnitAmountCalculator()
        self.classifier = ArrearsClassifier(self.due_dates)
        self.interest = InterestAccrual()
        self.aggregator = StatusAggregator(self.interest, self.due_dates)
        self.output_builder = OutputBuilder()

    def process(self, auctions: list[Auction], now: datetime, include_archived: bool = False) -> PortfolioResult:
        """
        Process every bidder of every auction against `now`.

        Args:
            auctions: Normalized auction records
            now: The evaluation instant; never read from the clock here
            include_archived: Also process archived auctions

        Returns:
            PortfolioResult with sorted records and totals
        """
        records = []
        for auction in auctions:
            if auction.archived and not include_archived:
                continue
            for bidder in auction.bidders:
                assessment = self.assess(auction, bidder, now)
                records.append(self.aggregator.build_record(assessment, now))

        records = self.aggregator.sort_records(records)
        totals = self.aggregator.aggregate(records)

        logger.debug(
            f"Processed {totals.bidder_count} bidders: "
            f"{totals.overdue_count} overdue, {totals.pending_count} pending, {totals.paid_count} paid"
        )
        return PortfolioResult(generated_at=now, records=records, totals=totals)

    def assess(self, auction: Auction, bidder: Bidder, now: datetime) -> BidderAssessment:
        """Resolve, price and classify a single bidder."""
        plan = self.resolver.resolve_for_bidder(auction, bidder, now)
        total = self.amounts.total_amount(bidder)
        classification = self.classifier.classify(plan, bidder.units_settled, bidder.fully_settled, now)

        return BidderAssessment(
            auction=auction,
            bidder=bidder,
            plan=plan,
            classification=classification,
            total_amount=total,
            unit_amounts=self.amounts.unit_amounts(plan, bidder, total),
        )

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a portfolio from raw dictionary input.

        Convenience method for API usage.
        """
        self.validator.validate(data)
        now = parse_instant(data["now"])
        auctions = [Auction.from_dict(a) for a in data["auctions"]]
        result = self.process(auctions, now, include_archived=bool(data.get("include_archived", False)))
        return self.output_builder.build(result)

    def interest_preview_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Interest on a single amount.

        With "months": whole-month accrual (compound by default).
        With "days_overdue": the fractional-month notice estimate.
        """
        if not isinstance(data, dict) or "amount" not in data:
            raise ValueError("amount is required")

        base = to_decimal(data["amount"])
        percent = to_decimal(data.get("percent", 0))
        interest_type = InterestType.normalize(data.get("interest_type"))

        if "days_overdue" in data:
            breakdown = self.interest.notice_preview(base, int(data["days_overdue"]), percent, interest_type)
            return self.output_builder.build_interest(base, breakdown.total)

        months = int(data.get("months", 0))
        if interest_type == InterestType.SIMPLE:
            total = self.interest.accrue_simple(base, percent, months)
        else:
            total = self.interest.accrue(base, percent, months)
        return self.output_builder.build_interest(base, total, months=months, percent=percent)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_portfolio_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Process a portfolio from Python dict and return Python dict."""
    processor = PortfolioProcessor()
    return processor.process_from_dict(input_data)


def process_portfolio_from_json(json_input: str) -> str:
    """
    Process a portfolio from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = PortfolioProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        logger.error(f"Portfolio processing failed: {str(e)}", exc_info=True)
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
