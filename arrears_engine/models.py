"""
Domain Models for the Arrears Engine

These dataclasses provide type-safe representations of auctions, lots, bidders
and payment plans, plus the results produced by the calculators.
All monetary values use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from .validators import parse_currency, parse_date, to_decimal

# =============================================================================
# CONSTANTS
# =============================================================================


class Modality:
    """Payment modalities accepted by a plan."""

    CASH = "cash"
    INSTALLMENTS = "installments"
    DOWN_PAYMENT_INSTALLMENTS = "down_payment_installments"

    # Values used by the synchronization layer's records
    ALIASES = {
        "a_vista": CASH,
        "parcelamento": INSTALLMENTS,
        "entrada_parcelamento": DOWN_PAYMENT_INSTALLMENTS,
        CASH: CASH,
        INSTALLMENTS: INSTALLMENTS,
        DOWN_PAYMENT_INSTALLMENTS: DOWN_PAYMENT_INSTALLMENTS,
    }

    @classmethod
    def normalize(cls, value) -> str | None:
        if not value:
            return None
        return cls.ALIASES.get(str(value))


class UnitKind:
    CASH = "cash"
    DOWN_PAYMENT = "down_payment"
    INSTALLMENT = "installment"


class UnitStatus:
    SETTLED = "settled"
    PENDING = "pending"
    OVERDUE = "overdue"


class BidderStatus:
    """Bidder-level status, ordered by display priority."""

    PAID = "pago"
    PENDING = "pendente"
    OVERDUE = "atrasado"

    DISPLAY_ORDER = {OVERDUE: 0, PENDING: 1, PAID: 2}


class InterestType:
    COMPOUND = "compound"
    SIMPLE = "simple"

    ALIASES = {"composto": COMPOUND, "simples": SIMPLE, COMPOUND: COMPOUND, SIMPLE: SIMPLE}

    @classmethod
    def normalize(cls, value) -> str:
        return cls.ALIASES.get(str(value), cls.COMPOUND) if value else cls.COMPOUND


def _first(data: dict, *keys):
    """Return the first non-empty value found under any of the keys."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _optional_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class PlanOverride:
    """Payment-plan parameters set on an auction, lot or bidder. All optional."""

    modality: str | None = None
    start_month: str | None = None  # "YYYY-MM" or bare "MM"
    due_day: int | None = None
    installment_count: int | None = None
    cash_due_date: date | None = None
    down_payment_due_date: date | None = None
    down_payment_amount: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.modality,
                self.start_month,
                self.due_day,
                self.installment_count,
                self.cash_due_date,
                self.down_payment_due_date,
                self.down_payment_amount,
            )
        )

    @classmethod
    def from_dict(cls, data: dict) -> "PlanOverride":
        start_month = _first(data, "mesInicioPagamento", "start_month")
        down_payment = _first(data, "valorEntrada", "down_payment_amount")
        return cls(
            modality=Modality.normalize(_first(data, "tipoPagamento", "payment_modality")),
            start_month=str(start_month) if start_month is not None else None,
            # Lots and auctions call it diaVencimentoPadrao, bidders diaVencimentoMensal
            due_day=_optional_int(_first(data, "diaVencimentoMensal", "diaVencimentoPadrao", "due_day")),
            installment_count=_optional_int(
                _first(data, "quantidadeParcelas", "parcelasPadrao", "installment_count")
            ),
            cash_due_date=parse_date(_first(data, "dataVencimentoVista", "cash_due_date")),
            down_payment_due_date=parse_date(_first(data, "dataEntrada", "down_payment_due_date")),
            down_payment_amount=parse_currency(down_payment) if down_payment is not None else None,
        )

    @classmethod
    def coerce_changes(cls, changes: dict) -> dict:
        """
        Convert edited field values to the types the engine reads.

        None clears a field. A non-empty value that cannot be converted
        raises ValueError.
        """
        coerced = {}
        for name, value in changes.items():
            if value is None:
                coerced[name] = None
                continue
            if name == "modality":
                converted = Modality.normalize(value)
            elif name == "start_month":
                converted = str(value)
            elif name in ("due_day", "installment_count"):
                converted = _optional_int(value)
            elif name in ("cash_due_date", "down_payment_due_date"):
                converted = parse_date(value)
            else:
                converted = parse_currency(value)
            if converted is None:
                raise ValueError(f"Invalid value for {name}: {value!r}")
            coerced[name] = converted
        return coerced


@dataclass
class PaymentPlan:
    """A fully resolved payment plan."""

    modality: str
    installment_count: int = 0
    start_month: str | None = None
    due_day: int | None = None
    cash_due_date: date | None = None
    down_payment_due_date: date | None = None
    down_payment_amount: Decimal | None = None

    @property
    def has_down_payment(self) -> bool:
        return self.modality == Modality.DOWN_PAYMENT_INSTALLMENTS

    @property
    def total_units(self) -> int:
        """Number of payment units: 1 for cash, the down payment counts as one unit."""
        if self.modality == Modality.CASH:
            return 1
        count = max(0, self.installment_count)
        return count + 1 if self.has_down_payment else count


@dataclass
class Lot:
    """An auctioned lot with its own optional payment-plan override."""

    id: str
    number: str = ""
    description: str = ""
    plan: PlanOverride = field(default_factory=PlanOverride)

    @classmethod
    def from_dict(cls, data: dict) -> "Lot":
        return cls(
            id=str(data.get("id", "")),
            number=str(data.get("numero", data.get("number", ""))),
            description=data.get("descricao", data.get("description", "")) or "",
            plan=PlanOverride.from_dict(data),
        )


@dataclass
class Bidder:
    """The winner of a lot (arrematante), responsible for payment."""

    name: str
    id: str | None = None
    document: str | None = None
    email: str | None = None
    phone: str | None = None
    lot_id: str | None = None
    amount_text: str = ""
    amount: Decimal | None = None
    units_settled: int = 0
    fully_settled: bool = False
    plan: PlanOverride = field(default_factory=PlanOverride)
    late_interest_percent: Decimal = Decimal("0")
    interest_type: str = InterestType.COMPOUND
    uses_multiplier: bool = False
    bid_value: Decimal | None = None
    multiplier: Decimal | None = None
    triple_installments: int = 0
    double_installments: int = 0
    single_installments: int = 0
    paid_on: list[date | None] = field(default_factory=list)

    @property
    def has_tiered_structure(self) -> bool:
        return (self.triple_installments + self.double_installments + self.single_installments) > 0

    @classmethod
    def from_dict(cls, data: dict) -> "Bidder":
        amount = _first(data, "valorPagarNumerico", "amount")
        bid = _first(data, "valorLance", "bid_value")
        factor = _first(data, "fatorMultiplicador", "multiplier")
        return cls(
            name=data.get("nome", data.get("name", "")) or "",
            id=_first(data, "id"),
            document=_first(data, "documento", "document"),
            email=_first(data, "email"),
            phone=_first(data, "telefone", "phone"),
            lot_id=_first(data, "loteId", "lot_id"),
            amount_text=str(_first(data, "valorPagar", "amount_text") or ""),
            amount=to_decimal(amount) if amount is not None else None,
            units_settled=_optional_int(_first(data, "parcelasPagas", "units_settled")) or 0,
            fully_settled=bool(_first(data, "pago", "fully_settled")),
            plan=PlanOverride.from_dict(data),
            late_interest_percent=to_decimal(_first(data, "percentualJurosAtraso", "late_interest_percent") or 0),
            interest_type=InterestType.normalize(_first(data, "tipoJurosAtraso", "interest_type")),
            uses_multiplier=bool(_first(data, "usaFatorMultiplicador", "uses_multiplier")),
            bid_value=to_decimal(bid) if bid is not None else None,
            multiplier=to_decimal(factor) if factor is not None else None,
            triple_installments=_optional_int(_first(data, "parcelasTriplas", "triple_installments")) or 0,
            double_installments=_optional_int(_first(data, "parcelasDuplas", "double_installments")) or 0,
            single_installments=_optional_int(_first(data, "parcelasSimples", "single_installments")) or 0,
            paid_on=[parse_date(d) for d in data.get("datasPagamento", data.get("paid_on", [])) or []],
        )


@dataclass
class Auction:
    """An auction with default plan parameters, lots and bidders."""

    id: str
    name: str
    start_date: date | None = None
    archived: bool = False
    plan: PlanOverride = field(default_factory=PlanOverride)
    lots: list[Lot] = field(default_factory=list)
    bidders: list[Bidder] = field(default_factory=list)

    def find_lot(self, lot_id: str | None) -> Lot | None:
        if not lot_id:
            return None
        for lot in self.lots:
            if lot.id == lot_id:
                return lot
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "Auction":
        # New model: list of bidders. Legacy model: a single bidder field.
        raw_bidders = data.get("arrematantes", data.get("bidders"))
        if not raw_bidders:
            legacy = data.get("arrematante", data.get("bidder"))
            raw_bidders = [legacy] if legacy else []
        return cls(
            id=str(data.get("id", "")),
            name=data.get("nome", data.get("name", "")) or "",
            start_date=parse_date(_first(data, "dataInicio", "start_date")),
            archived=bool(_first(data, "arquivado", "archived")),
            plan=PlanOverride.from_dict(data),
            lots=[Lot.from_dict(lot) for lot in data.get("lotes", data.get("lots", [])) or []],
            bidders=[Bidder.from_dict(b) for b in raw_bidders],
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class UnitState:
    """Classification of a single payment unit."""

    index: int
    kind: str
    number: int  # 0 for the down payment, 1-based for installments
    due_date: date | None
    status: str
    days_overdue: int = 0
    months_overdue: int = 0


@dataclass
class Classification:
    """Result of classifying a plan against a progress counter and an instant."""

    units: list[UnitState]
    units_settled: int
    total_units: int
    status: str
    next_due_index: int | None = None
    last_settled_index: int | None = None
    overdue_candidates: list[int] = field(default_factory=list)
    primary_overdue_index: int | None = None
    past_due_units: list[int] = field(default_factory=list)

    @property
    def remaining_units(self) -> int:
        return max(0, self.total_units - self.units_settled)

    @property
    def next_due(self) -> UnitState | None:
        return self.units[self.next_due_index] if self.next_due_index is not None else None

    @property
    def primary_overdue(self) -> UnitState | None:
        if self.primary_overdue_index is None:
            return None
        return self.units[self.primary_overdue_index]


@dataclass
class UnitAmount:
    """Amount breakdown for one unit."""

    index: int
    base: Decimal
    with_interest: Decimal
    interest: Decimal = Decimal("0")


@dataclass
class InterestBreakdown:
    interest: Decimal
    total: Decimal


@dataclass
class BidderAssessment:
    """Everything computed for one bidder before aggregation."""

    auction: Auction
    bidder: Bidder
    plan: PaymentPlan
    classification: Classification
    total_amount: Decimal
    unit_amounts: list[Decimal]


@dataclass
class BidderStatusRecord:
    """Per-bidder enriched record consumed by UI tables and reports."""

    auction_id: str
    auction_name: str
    bidder_id: str | None
    bidder_name: str
    document: str | None
    status: str
    modality: str
    total_amount: Decimal
    units_settled: int
    total_units: int
    next_due_index: int | None
    next_due_date: date | None
    next_amount: Decimal
    days_overdue: int
    months_overdue: int
    severity: str | None
    received: Decimal
    pending: Decimal
    overdue: Decimal
    overdue_units: int
    schedule: list[UnitAmount] = field(default_factory=list)
    classification: Classification | None = None


@dataclass
class PortfolioTotals:
    """Portfolio-wide aggregates."""

    bidder_count: int = 0
    paid_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0
    total_received: Decimal = Decimal("0")
    total_pending: Decimal = Decimal("0")
    total_overdue: Decimal = Decimal("0")
    overdue_unit_count: int = 0
    average_days_overdue: int = 0
    average_amount_per_bidder: Decimal = Decimal("0")
    severity_counts: dict = field(default_factory=dict)

    @property
    def total_outstanding(self) -> Decimal:
        return self.total_pending + self.total_overdue


@dataclass
class DebtorProfile:
    """A bidder's contracts across all auctions, grouped by name or document."""

    name: str
    document: str | None
    contracts: list[BidderStatusRecord] = field(default_factory=list)
    scheduled_units: int = 0
    settled_units: int = 0
    overdue_units: int = 0
    total_value: Decimal = Decimal("0")
    current_overdue: Decimal = Decimal("0")


@dataclass
class PortfolioResult:
    """Final output of portfolio processing."""

    generated_at: datetime
    records: list[BidderStatusRecord]
    totals: PortfolioTotals
