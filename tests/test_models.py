"""
Tests for Mondo data models and display helpers.
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from mondo.common.display import (
    format_amount,
    merchant_display_name,
    render_table,
    transactions_table,
)
from mondo.models import Attachment, Merchant, Transaction, parse_webhook_event


@pytest.fixture
def transaction_data():
    return {
        "id": "tx_1",
        "amount": -510,
        "account_balance": 13013,
        "currency": "GBP",
        "category": "eating_out",
        "created": "2015-08-22T12:20:18Z",
        "description": "THE DE BEAUVOIR DELI",
        "merchant": {"id": "merch_1", "name": "The De Beauvoir Deli Co.", "emoji": "🍞"},
        "metadata": {"foo": "bar"},
        "settled": True,
    }


class TestTransactionModel:
    def test_amounts_stay_in_minor_units(self, transaction_data):
        transaction = Transaction.model_validate(transaction_data)

        assert transaction.amount == -510
        assert isinstance(transaction.amount, int)
        assert transaction.account_balance == 13013

    def test_unknown_fields_ignored(self, transaction_data):
        transaction_data["local_amount"] = -510
        transaction = Transaction.model_validate(transaction_data)
        assert not hasattr(transaction, "local_amount")

    def test_transactions_are_immutable(self, transaction_data):
        transaction = Transaction.model_validate(transaction_data)
        with pytest.raises(ValidationError):
            transaction.amount = 0

    @pytest.mark.parametrize(
        "settled, expected",
        [(True, True), (False, False), ("2015-08-23T10:00:00Z", True), ("", False), (None, False)],
    )
    def test_settled_is_loosely_typed(self, transaction_data, settled, expected):
        transaction_data["settled"] = settled
        transaction = Transaction.model_validate(transaction_data)

        assert transaction.settled == settled
        assert transaction.is_settled is expected

    def test_unexpanded_merchant(self, transaction_data):
        transaction_data["merchant"] = "merch_1"
        transaction = Transaction.model_validate(transaction_data)

        assert transaction.merchant == "merch_1"
        assert transaction.merchant_name == ""

    def test_null_metadata(self, transaction_data):
        transaction_data["metadata"] = None
        transaction_data["attachments"] = None
        transaction = Transaction.model_validate(transaction_data)

        assert transaction.metadata == {}
        assert transaction.attachments == []

    def test_blank_merchant_created(self):
        merchant = Merchant.model_validate({"id": "merch_1", "created": ""})
        assert merchant.created is None

    def test_blank_attachment_created(self):
        attachment = Attachment.model_validate(
            {"id": "a", "external_id": "tx", "file_url": "u", "file_type": "t", "created": ""}
        )
        assert attachment.created is None


class TestWebhookEvent:
    def test_parse_raw_json(self):
        event = parse_webhook_event(
            '{"type": "transaction.created", "data": {"id": "tx_1", "amount": -350,'
            ' "created": "2015-09-04T14:28:40Z", "currency": "GBP"}}'
        )

        assert event.type == "transaction.created"
        assert event.data.id == "tx_1"
        assert event.data.amount == -350

    def test_parse_dict(self):
        event = parse_webhook_event({"type": "ping"})
        assert event.type == "ping"
        assert event.data is None


class TestDisplay:
    def test_format_amount(self):
        assert format_amount(1234, "GBP") == "£12.34"
        assert format_amount(-510, "GBP") == "£-5.10"
        assert format_amount(500, "USD") == "$5.00"
        assert format_amount(500, "XYZ") == "5.00"

    def test_mondo_category_shown_as_mondo(self, transaction_data):
        transaction_data["category"] = "mondo"
        transaction = Transaction.model_validate(transaction_data)

        assert merchant_display_name(transaction) == "Mondo"
        # The model itself is untouched
        assert transaction.merchant_name == "The De Beauvoir Deli Co."

    def test_render_table(self):
        table = render_table(["A", "Long header"], [["x", "y"], ["longer value", "z"]])
        lines = table.splitlines()

        assert lines[0] == lines[2] == lines[-1]
        assert "| A            | LONG HEADER |" in lines
        assert "| longer value | z           |" in lines

    def test_transactions_table(self, transaction_data):
        transaction = Transaction.model_validate(transaction_data)

        table = transactions_table([transaction], with_id=True)

        assert "tx_1" in table
        assert "The De Beauvoir Deli Co." in table
        assert "£-5.10" in table
        assert "£130.13" in table
        assert "22 Aug 15 12:20 UTC" in table
