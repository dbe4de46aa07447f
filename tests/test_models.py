"""
Unit Tests for Record Normalization

Tests verify that raw auction records (current and legacy shapes) become
typed models.
"""

from datetime import date
from decimal import Decimal

from arrears_engine.models import Auction, Bidder, InterestType, Modality, PaymentPlan, PlanOverride


class TestAuctionFromDict:
    """Bidder list and legacy single-bidder shapes."""

    def test_bidder_list(self):
        auction = Auction.from_dict({"id": 7, "nome": "Rural", "arrematantes": [{"nome": "Ana"}, {"nome": "Bia"}]})

        assert auction.id == "7"
        assert [b.name for b in auction.bidders] == ["Ana", "Bia"]

    def test_legacy_single_bidder(self):
        auction = Auction.from_dict({"id": "A1", "arrematante": {"nome": "Ana"}})
        assert [b.name for b in auction.bidders] == ["Ana"]

    def test_list_wins_over_legacy(self):
        auction = Auction.from_dict({"id": "A1", "arrematantes": [{"nome": "Bia"}], "arrematante": {"nome": "Ana"}})
        assert [b.name for b in auction.bidders] == ["Bia"]

    def test_no_bidders(self):
        assert Auction.from_dict({"id": "A1"}).bidders == []

    def test_archived_and_lots(self):
        auction = Auction.from_dict(
            {"id": "A1", "arquivado": True, "lotes": [{"id": "L1", "numero": "001", "parcelasPadrao": 10}]}
        )

        assert auction.archived is True
        assert auction.find_lot("L1").plan.installment_count == 10
        assert auction.find_lot("L9") is None

    def test_english_keys(self):
        auction = Auction.from_dict({"id": "A1", "name": "Rural", "bidders": [{"name": "Ana", "amount": 100}]})
        assert auction.bidders[0].amount == Decimal("100")


class TestBidderFromDict:
    """Source field names map onto the Bidder model."""

    def test_full_record(self):
        bidder = Bidder.from_dict(
            {
                "id": "b1",
                "nome": "Ana Costa",
                "documento": "123.456.789-00",
                "email": "ana@example.com",
                "loteId": "L1",
                "valorPagar": "R$ 12.000,00",
                "valorPagarNumerico": 12000,
                "parcelasPagas": "3",
                "pago": False,
                "percentualJurosAtraso": 2.5,
                "tipoJurosAtraso": "simples",
                "datasPagamento": ["2024-01-15", None],
            }
        )

        assert bidder.amount == Decimal("12000")
        assert bidder.amount_text == "R$ 12.000,00"
        assert bidder.units_settled == 3
        assert bidder.fully_settled is False
        assert bidder.late_interest_percent == Decimal("2.5")
        assert bidder.interest_type == InterestType.SIMPLE
        assert bidder.paid_on == [date(2024, 1, 15), None]

    def test_defaults(self):
        bidder = Bidder.from_dict({"nome": "Ana"})

        assert bidder.units_settled == 0
        assert bidder.late_interest_percent == Decimal("0")
        assert bidder.interest_type == InterestType.COMPOUND
        assert bidder.plan.is_empty

    def test_garbage_counter_is_zero(self):
        assert Bidder.from_dict({"nome": "Ana", "parcelasPagas": "três"}).units_settled == 0

    def test_multiplier_and_tiers(self):
        bidder = Bidder.from_dict(
            {
                "nome": "Ana",
                "usaFatorMultiplicador": True,
                "valorLance": "1.000,00",
                "fatorMultiplicador": 2.5,
                "parcelasTriplas": 2,
                "parcelasSimples": 4,
            }
        )

        assert bidder.uses_multiplier is True
        assert bidder.bid_value == Decimal("1000.00")
        assert bidder.multiplier == Decimal("2.5")
        assert bidder.has_tiered_structure


class TestPlanModels:
    """Plan overrides and unit counts."""

    def test_modality_aliases(self):
        assert PlanOverride.from_dict({"tipoPagamento": "a_vista"}).modality == Modality.CASH
        assert PlanOverride.from_dict({"tipoPagamento": "parcelamento"}).modality == Modality.INSTALLMENTS
        assert (
            PlanOverride.from_dict({"tipoPagamento": "entrada_parcelamento"}).modality
            == Modality.DOWN_PAYMENT_INSTALLMENTS
        )
        assert PlanOverride.from_dict({"tipoPagamento": "boleto"}).modality is None

    def test_lot_and_bidder_due_day_keys(self):
        assert PlanOverride.from_dict({"diaVencimentoPadrao": 20}).due_day == 20
        assert PlanOverride.from_dict({"diaVencimentoMensal": "5"}).due_day == 5

    def test_total_units(self):
        assert PaymentPlan(modality=Modality.CASH, installment_count=12).total_units == 1
        assert PaymentPlan(modality=Modality.INSTALLMENTS, installment_count=12).total_units == 12
        assert PaymentPlan(modality=Modality.DOWN_PAYMENT_INSTALLMENTS, installment_count=12).total_units == 13
