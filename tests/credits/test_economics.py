"""
Tests for credit pricing, amount formatting and credit purchases.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from accumulate_wallet.client.responses import Failure, Success
from accumulate_wallet.credits.economics import (
    CreditEconomicsService,
    DEFAULT_PURCHASE_MEMO,
    credits_to_token_amount,
    format_acme,
    format_token_amount,
    parse_token_amount,
)
from accumulate_wallet.runtime.errors import ErrorCode, StorageError, ValidationError
from accumulate_wallet.tx.requests import PurchaseCreditsRequest
from accumulate_wallet.tx.signing import SubmissionResult, SubmissionState

PAGE = "acc://alice.acme/book0/1"
PAYER = "acc://" + "ab" * 24 + "/ACME"


class TestCreditsToTokenAmount:
    """Test the credit to ACME conversion."""

    def test_formula(self):
        assert credits_to_token_amount(100, 1_000_000) == 1_000_000
        assert credits_to_token_amount(1, 500_000) == 20_000

    def test_floors(self):
        assert credits_to_token_amount(1, 3) == 10 ** 10 // 3

    def test_zero_credits(self):
        assert credits_to_token_amount(0, 1_000) == 0

    @pytest.mark.parametrize("credits,oracle", [(1, 0), (1, -5), (-1, 100)])
    def test_rejects_bad_input(self, credits, oracle):
        with pytest.raises(ValidationError) as exc:
            credits_to_token_amount(credits, oracle)
        assert exc.value.code == ErrorCode.INVALID_AMOUNT


class TestTokenAmounts:
    """Test formatting and parsing of decimal token amounts."""

    @pytest.mark.parametrize("base_units,precision,text", [
        (150_000_000, 8, "1.5"),
        (100_000_000, 8, "1"),
        (1, 8, "0.00000001"),
        (0, 8, "0"),
        (42, 0, "42"),
        (1234, 2, "12.34"),
    ])
    def test_format(self, base_units, precision, text):
        assert format_token_amount(base_units, precision) == text

    def test_format_acme(self):
        assert format_acme(250_000_000) == "2.5 ACME"

    @pytest.mark.parametrize("text,precision,base_units", [
        ("1.5", 8, 150_000_000),
        ("1", 8, 100_000_000),
        (".5", 2, 50),
        ("5.", 2, 500),
        (" 12.34 ", 2, 1234),
        ("1.50000", 2, 150),
        ("7", 0, 7),
    ])
    def test_parse(self, text, precision, base_units):
        assert parse_token_amount(text, precision) == base_units

    @pytest.mark.parametrize("text", ["", ".", "abc", "1.2.3", "-1", "1e5", None])
    def test_parse_malformed(self, text):
        with pytest.raises(ValidationError):
            parse_token_amount(text, 8)

    def test_parse_excess_precision(self):
        with pytest.raises(ValidationError) as exc:
            parse_token_amount("1.234", 2)
        assert exc.value.code == ErrorCode.INVALID_AMOUNT

    @pytest.mark.parametrize("precision", [-1, 19])
    def test_precision_bounds(self, precision):
        with pytest.raises(ValidationError):
            format_token_amount(1, precision)
        with pytest.raises(ValidationError):
            parse_token_amount("1", precision)

    def test_negative_format(self):
        with pytest.raises(ValidationError):
            format_token_amount(-1, 8)

    @pytest.mark.parametrize("precision", range(0, 19))
    def test_roundtrip_every_precision(self, precision):
        """Formatting then parsing returns the original base units."""
        for base_units in (0, 1, 10 ** precision, 123456789 * 10 ** precision + 7):
            assert parse_token_amount(format_token_amount(base_units, precision), precision) == base_units


@pytest.fixture
def signing():
    return Mock()


@pytest.fixture
def client():
    client = Mock()
    client.value_from_oracle.return_value = 1_000_000
    return client


@pytest.fixture
def economics(client, signing, wallet_storage):
    return CreditEconomicsService(client, signing, wallet_storage)


def _submission(outcome):
    state = SubmissionState.SUCCEEDED if outcome.ok else SubmissionState.FAILED
    return SubmissionResult(outcome=outcome, states=[SubmissionState.BUILD, state])


class TestCreditEconomicsService:
    """Test oracle reads, cost calculation and purchases."""

    def test_calculate_cost_reads_oracle(self, economics, client):
        cost = economics.calculate_credit_cost(100)
        assert cost.acme_amount == 1_000_000
        assert cost.acme_tokens == Decimal("0.01")
        assert cost.to_dict() == {
            "creditAmount": 100,
            "acmeCost": 1_000_000,
            "acmeTokens": "0.01",
            "acmeCostFormatted": "0.01 ACME",
            "oracleValue": 1_000_000,
        }
        client.value_from_oracle.assert_called_once()

    def test_oracle_read_every_time(self, economics, client):
        economics.calculate_credit_cost(1)
        economics.calculate_credit_cost(1)
        assert client.value_from_oracle.call_count == 2

    def test_calculate_cost_given_oracle(self, economics, client):
        assert economics.calculate_credit_cost(1, oracle=500_000).acme_amount == 20_000
        client.value_from_oracle.assert_not_called()

    def test_calculate_negative(self, economics):
        with pytest.raises(ValidationError):
            economics.calculate_credit_cost(-1)

    def test_purchase_success_records_history(self, economics, signing, wallet_storage):
        signing.submit_request.return_value = _submission(Success("tx-9", "h-9"))

        purchase = economics.purchase_credits(PAGE, PAYER, 100)
        assert purchase.ok
        assert purchase.acme_amount == 1_000_000

        request = signing.submit_request.call_args.args[0]
        assert isinstance(request, PurchaseCreditsRequest)
        assert request.principal == PAYER
        assert request.memo == DEFAULT_PURCHASE_MEMO
        assert request.to_body()["amount"] == "1000000"

        records = economics.recent_credit_transactions()
        assert len(records) == 1
        assert records[0].tx_hash == "tx-9"
        assert records[0].amount == "1000000"
        assert records[0].memo == "Credit purchase: 100 credits"
        assert records[0].metadata == {"credits": 100, "oracle": 1_000_000}

    def test_purchase_failure_not_recorded(self, economics, signing):
        signing.submit_request.return_value = _submission(Failure("insufficient balance"))
        purchase = economics.purchase_credits(PAGE, PAYER, 100, memo="custom")
        assert not purchase.ok
        assert purchase.outcome.message == "insufficient balance"
        assert economics.recent_credit_transactions() == []

    def test_record_failure_is_not_fatal(self, client, signing):
        storage = Mock()
        storage.record_transaction.side_effect = StorageError("disk full")
        signing.submit_request.return_value = _submission(Success("tx-9"))
        purchase = CreditEconomicsService(client, signing, storage).purchase_credits(PAGE, PAYER, 100)
        assert purchase.ok

    @pytest.mark.parametrize("credits", [0, -5])
    def test_purchase_non_positive(self, economics, signing, credits):
        with pytest.raises(ValidationError):
            economics.purchase_credits(PAGE, PAYER, credits)
        signing.submit_request.assert_not_called()

    def test_purchase_invalid_url(self, economics, signing):
        with pytest.raises(ValidationError):
            economics.purchase_credits("not-a-url", PAYER, 100)
        signing.submit_request.assert_not_called()

    def test_purchase_amount_rounds_to_zero(self, economics, client):
        """A purchase too small to cost any base units is rejected."""
        client.value_from_oracle.return_value = 10 ** 12
        with pytest.raises(ValidationError):
            economics.purchase_credits(PAGE, PAYER, 1)

    def test_without_storage(self, client, signing):
        service = CreditEconomicsService(client, signing)
        signing.submit_request.return_value = _submission(Success("tx-1"))
        assert service.purchase_credits(PAGE, PAYER, 1).ok
        assert service.recent_credit_transactions() == []
