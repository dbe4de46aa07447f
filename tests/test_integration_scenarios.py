"""
Integration Test Scenarios for the Auction Arrears Engine

These tests replay collection cases reported by the auction office and
validate end-to-end behaviour from raw auction records to the portfolio
response.

Run with: python -m pytest tests/test_integration_scenarios.py -v

IMPORTANT: This file has a companion business summary document:
    docs/test_scenarios_business_summary.md

When adding or modifying tests, please update the business summary document
to keep them in sync. The summary provides plain-English explanations of
each test scenario for the collections team.
"""


import pytest

from arrears_engine import PortfolioProcessor


def portfolio(now, *auctions, **options):
    data = {"now": now, "auctions": list(auctions)}
    data.update(options)
    return data


class TestCashSale:
    """Single payment on a fixed date."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    @pytest.fixture
    def cash_auction(self):
        return {
            "id": "A1",
            "nome": "Leilão de Equinos",
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2024-01-10",
            "arrematantes": [{"id": "b1", "nome": "Marcos Rocha", "valorPagarNumerico": 5000, "percentualJurosAtraso": 1}],
        }

    def test_cash_overdue_twenty_two_days(self, processor, cash_auction):
        """Due 2024-01-10, checked 2024-02-01: 22 days late, no whole month yet."""
        record = processor.process_from_dict(portfolio("2024-02-01", cash_auction))["bidders"][0]

        assert record["status"] == "atrasado"
        assert record["modality"] == "cash"
        assert record["days_overdue"] == 22
        assert record["months_overdue"] == 0
        assert record["overdue"] == 5000.0
        assert record["severity"] == "moderado"

    def test_cash_interest_after_two_months(self, processor, cash_auction):
        """65 days late = 2 whole months at 1%: 5000 × 1.01² = 5100.50"""
        record = processor.process_from_dict(portfolio("2024-03-15", cash_auction))["bidders"][0]

        assert record["months_overdue"] == 2
        assert record["overdue"] == 5100.5

    def test_cash_paid(self, processor, cash_auction):
        cash_auction["arrematantes"][0]["parcelasPagas"] = 1
        record = processor.process_from_dict(portfolio("2024-03-15", cash_auction))["bidders"][0]

        assert record["status"] == "pago"
        assert record["received"] == 5000.0
        assert record["next_due_index"] is None


class TestInstallmentPlan:
    """Monthly installments; only the next one drives the bidder status."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    @pytest.fixture
    def installment_auction(self):
        return {
            "id": "A1",
            "nome": "Leilão Rural",
            "tipoPagamento": "parcelamento",
            "quantidadeParcelas": 12,
            "mesInicioPagamento": "2024-01",
            "diaVencimentoPadrao": 15,
            "arrematantes": [
                {
                    "id": "b1",
                    "nome": "Carlos Lima",
                    "valorPagarNumerico": 12000,
                    "parcelasPagas": 2,
                    "percentualJurosAtraso": 2,
                }
            ],
        }

    def test_next_installment_overdue(self, processor, installment_auction):
        """Two paid, third due 2024-03-15, checked 2024-04-20."""
        record = processor.process_from_dict(portfolio("2024-04-20", installment_auction))["bidders"][0]

        assert record["next_due_index"] == 2
        assert record["next_due_date"] == "2024-03-15"
        assert record["status"] == "atrasado"
        assert record["schedule"][2]["status"] == "overdue"
        assert record["schedule"][3]["status"] == "pending"

    def test_interest_compounds_on_overdue_installment(self, processor, installment_auction):
        """Installment 3 is 1 month late (+2%), installment 4 only 5 days late."""
        record = processor.process_from_dict(portfolio("2024-04-20", installment_auction))["bidders"][0]

        assert record["schedule"][2]["amount_with_interest"] == 1020.0
        assert record["schedule"][3]["amount_with_interest"] == 1000.0
        assert record["overdue"] == 2020.0
        assert record["overdue_units"] == 2
        assert record["received"] == 2000.0
        assert record["pending"] == 8000.0

    def test_installment_not_yet_due(self, processor, installment_auction):
        record = processor.process_from_dict(portfolio("2024-03-15T22:00:00", installment_auction))["bidders"][0]

        assert record["status"] == "pendente"
        assert record["days_overdue"] == 0
        assert record["severity"] is None


class TestDownPaymentPlan:
    """Down payment plus installments."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    @pytest.fixture
    def down_payment_auction(self):
        return {
            "id": "A1",
            "nome": "Leilão de Máquinas",
            "arrematantes": [
                {
                    "id": "b1",
                    "nome": "Joana Prado",
                    "valorPagarNumerico": 10000,
                    "tipoPagamento": "entrada_parcelamento",
                    "valorEntrada": "R$ 2.000,00",
                    "dataEntrada": "2024-01-05",
                    "quantidadeParcelas": 8,
                    "mesInicioPagamento": "2024-01",
                    "diaVencimentoMensal": 15,
                    "percentualJurosAtraso": 2,
                }
            ],
        }

    def test_down_payment_and_first_installment_overdue(self, processor, down_payment_auction):
        """Down payment (2024-01-05) and first installment (2024-01-15) both unpaid on 2024-02-01."""
        record = processor.process_from_dict(portfolio("2024-02-01", down_payment_auction))["bidders"][0]

        assert record["overdue_candidates"] == [0, 1]
        assert record["primary_overdue_index"] == 0
        assert record["next_due_date"] == "2024-01-05"
        assert record["days_overdue"] == 27
        assert record["severity"] == "moderado"
        assert record["overdue"] == 3000.0
        assert record["pending"] == 7000.0

    def test_down_payment_settled(self, processor, down_payment_auction):
        down_payment_auction["arrematantes"][0]["parcelasPagas"] = 1
        record = processor.process_from_dict(portfolio("2024-02-01", down_payment_auction))["bidders"][0]

        assert record["overdue_candidates"] == [1]
        assert record["next_due_date"] == "2024-01-15"
        assert record["days_overdue"] == 17
        assert record["received"] == 2000.0
        assert record["total_units"] == 9


class TestFullySettledFlag:
    """The settled flag wins over a stale counter."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    def test_flag_overrides_stale_counter(self, processor):
        auction = {
            "id": "A1",
            "nome": "Leilão Rural",
            "tipoPagamento": "parcelamento",
            "quantidadeParcelas": 12,
            "mesInicioPagamento": "2024-01",
            "diaVencimentoPadrao": 15,
            "arrematantes": [{"nome": "Rita Alves", "valorPagarNumerico": 1200, "parcelasPagas": 3, "pago": True}],
        }
        record = processor.process_from_dict(portfolio("2025-06-01", auction))["bidders"][0]

        assert record["status"] == "pago"
        assert record["units_settled"] == 12
        assert record["received"] == 1200.0
        assert record["overdue"] == 0.0


class TestPlanInheritance:
    """Bidder settings override the lot, which overrides the auction."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    @pytest.fixture
    def auction(self):
        return {
            "id": "A1",
            "nome": "Leilão Misto",
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2024-02-01",
            "lotes": [
                {
                    "id": "L1",
                    "numero": "001",
                    "tipoPagamento": "parcelamento",
                    "parcelasPadrao": 6,
                    "mesInicioPagamento": "2024-01",
                    "diaVencimentoPadrao": 10,
                }
            ],
            "arrematantes": [{"id": "b1", "nome": "Ana Costa", "loteId": "L1", "valorPagarNumerico": 600}],
        }

    def test_lot_plan_overrides_auction(self, processor, auction):
        record = processor.process_from_dict(portfolio("2024-01-05", auction))["bidders"][0]

        assert record["modality"] == "installments"
        assert record["total_units"] == 6
        assert record["next_due_date"] == "2024-01-10"
        assert record["next_amount"] == 100.0

    def test_bidder_plan_overrides_lot(self, processor, auction):
        auction["arrematantes"][0]["diaVencimentoMensal"] = 20
        record = processor.process_from_dict(portfolio("2024-01-05", auction))["bidders"][0]

        assert record["next_due_date"] == "2024-01-20"
        assert record["total_units"] == 6

    def test_nothing_configured_uses_default_plan(self, processor):
        auction = {"id": "A9", "nome": "Sem Plano", "arrematantes": [{"nome": "Bruno", "valorPagarNumerico": 1200}]}
        record = processor.process_from_dict(portfolio("2024-05-10", auction))["bidders"][0]

        assert record["modality"] == "installments"
        assert record["total_units"] == 12
        assert record["next_due_date"] == "2024-05-15"
        assert record["status"] == "pendente"


class TestLegacyRecords:
    """Auctions saved before multi-bidder support."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    def test_single_bidder_field(self, processor):
        auction = {
            "id": "A1",
            "nome": "Leilão Antigo",
            "arrematante": {
                "nome": "Ana",
                "valorPagarNumerico": 500,
                "tipoPagamento": "a_vista",
                "dataVencimentoVista": "2024-06-01",
            },
        }
        result = processor.process_from_dict(portfolio("2024-05-01", auction))

        assert result["totals"]["bidders"] == 1
        assert result["bidders"][0]["modality"] == "cash"
        assert result["bidders"][0]["status"] == "pendente"


class TestMultiplierPricing:
    """Bid value times a multiplier factor."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    def test_bid_times_factor(self, processor):
        auction = {
            "id": "A1",
            "nome": "Leilão de Gado",
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2024-06-01",
            "arrematantes": [
                {
                    "nome": "Pedro",
                    "valorPagarNumerico": 999,
                    "usaFatorMultiplicador": True,
                    "valorLance": 1000,
                    "fatorMultiplicador": 2.5,
                }
            ],
        }
        record = processor.process_from_dict(portfolio("2024-05-01", auction))["bidders"][0]

        assert record["total_amount"] == 2500.0


class TestPortfolioTotals:
    """Totals across several auctions, archived ones excluded."""

    @pytest.fixture
    def processor(self):
        return PortfolioProcessor()

    @pytest.fixture
    def auctions(self):
        overdue = {
            "id": "A1",
            "nome": "Leilão Rural",
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2024-01-25",
            "arrematantes": [{"nome": "Atrasado", "valorPagarNumerico": 1000}],
        }
        pending = {
            "id": "A2",
            "nome": "Leilão Futuro",
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2024-03-01",
            "arrematantes": [{"nome": "Pendente", "valorPagarNumerico": 3000}],
        }
        archived = {
            "id": "A3",
            "nome": "Leilão Arquivado",
            "arquivado": True,
            "tipoPagamento": "a_vista",
            "dataVencimentoVista": "2023-01-01",
            "arrematantes": [{"nome": "Arquivado", "valorPagarNumerico": 9000}],
        }
        return [overdue, pending, archived]

    def test_mixed_portfolio(self, processor, auctions):
        totals = processor.process_from_dict(portfolio("2024-02-01", *auctions))["totals"]

        assert totals["bidders"] == 2
        assert totals["by_status"] == {"pago": 0, "pendente": 1, "atrasado": 1}
        assert totals["total_overdue"] == 1000.0
        assert totals["total_pending"] == 3000.0
        assert totals["average_days_overdue"] == 7
        assert totals["severity"]["recente"] == 1

    def test_archived_included_on_request(self, processor, auctions):
        totals = processor.process_from_dict(portfolio("2024-02-01", *auctions, include_archived=True))["totals"]

        assert totals["bidders"] == 3
        assert totals["by_status"]["atrasado"] == 2
