"""
Input Validation and Normalization for the Arrears Engine

Two kinds of checks live here:
- Request validation: a malformed request (no auctions list, unparseable
  instant) raises ValueError with a clear message.
- Domain normalization: malformed record values (currency strings, dates,
  counters) never raise. They degrade to 0 / None and are logged.
"""

import logging
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^\d.,-]")


def to_decimal(value) -> Decimal:
    """Convert a number or numeric string to Decimal, 0 when not numeric."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, (int, float)):
        result = Decimal(str(value))
        return result if result.is_finite() else Decimal("0")
    return parse_currency(value)


def parse_currency(value) -> Decimal:
    """
    Parse a currency string such as "R$ 1.234,56" into a Decimal.

    - A comma means Brazilian formatting: dots are thousands, comma is decimal.
    - Only dots: a last group of 3+ digits means thousands, otherwise decimal.
    - Anything unparseable yields 0.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return to_decimal(value)

    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return Decimal("0")

    if "," in cleaned:
        normalized = cleaned.replace(".", "").replace(",", ".", 1).replace(",", "")
    elif "." in cleaned:
        parts = cleaned.split(".")
        if len(parts[-1]) >= 3:
            normalized = cleaned.replace(".", "")
        else:
            normalized = "".join(parts[:-1]) + "." + parts[-1]
    else:
        normalized = cleaned

    try:
        result = Decimal(normalized)
    except InvalidOperation:
        logger.debug(f"Unparseable currency value {value!r}, defaulting to 0")
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


def parse_date(value) -> date | None:
    """Parse an ISO date (or the date part of an ISO timestamp). None when invalid."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug(f"Unparseable date {value!r}")
        return None


def parse_instant(value) -> datetime:
    """Parse the evaluation instant. Date-only values are taken at midnight."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif not isinstance(value, str) or not value:
        raise ValueError(f"now must be an ISO date or timestamp, got: {value!r}")
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1]
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"now must be an ISO date or timestamp, got: {value!r}") from None
    # Offsets are converted to UTC; due dates are compared as naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def clamp_units(units_settled: int, total_units: int) -> int:
    """Clamp a progress counter into [0, total_units]."""
    if units_settled > total_units:
        logger.debug(f"units_settled={units_settled} exceeds total_units={total_units}, clamping")
        return total_units
    return max(0, units_settled)


class InputValidator:
    """Validates the shape of a portfolio request."""

    def validate(self, data) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Request body must be an object, got: {type(data).__name__}")

        self._validate_now(data)
        self._validate_auctions(data.get("auctions"))

    def _validate_now(self, data: dict) -> None:
        if "now" not in data:
            raise ValueError("now is required so computations are reproducible")
        parse_instant(data["now"])

    def _validate_auctions(self, auctions) -> None:
        if not isinstance(auctions, list):
            raise ValueError("auctions must be a list of auction records")

        for i, auction in enumerate(auctions):
            if not isinstance(auction, dict):
                raise ValueError(f"Auction {i} must be an object, got: {type(auction).__name__}")

            bidders = auction.get("arrematantes", auction.get("bidders"))
            if bidders is not None and not isinstance(bidders, list):
                raise ValueError(f"Auction {i} bidders must be a list")

            lots = auction.get("lotes", auction.get("lots"))
            if lots is not None and not isinstance(lots, list):
                raise ValueError(f"Auction {i} lots must be a list")
