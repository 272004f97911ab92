"""
Tests for the bankterm and mondo-webhook entry points.
"""

from datetime import UTC, datetime
from unittest.mock import Mock, patch

import pytest

from mondo.cli import bankterm, webhook
from mondo.common.errors import MondoUnauthenticatedError
from mondo.models import Account, Transaction, Webhook

CREDENTIALS = {
    "client_id": "id",
    "client_secret": "secret",
    "username": "user",
    "password": "pass",
}


@pytest.fixture
def client():
    client = Mock()
    client.list_accounts.return_value = [
        Account(id="acc_1", created=datetime(2015, 11, 13, tzinfo=UTC))
    ]
    return client


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("mondo.cli.bankterm.setup_logging"), patch("mondo.cli.webhook.setup_logging"):
        yield


class TestBankterm:
    def test_prints_first_page(self, client, capsys):
        client.list_transactions.return_value = [
            Transaction(id="tx_1", amount=-510, created=datetime(2015, 8, 22, tzinfo=UTC))
        ]

        with patch.object(bankterm, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            bankterm, "create_mondo_client", return_value=client
        ) as factory:
            assert bankterm.main(["--limit", "10"]) == 0

        factory.assert_called_once_with(**CREDENTIALS)
        client.list_transactions.assert_called_once_with("acc_1", limit=10)
        out = capsys.readouterr().out
        assert "tx_1" in out
        assert "£-5.10" in out

    def test_all_uses_pagination(self, client):
        with patch.object(bankterm, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            bankterm, "create_mondo_client", return_value=client
        ), patch.object(bankterm, "fetch_all_transactions", return_value=[]) as fetch:
            assert bankterm.main(["--all"]) == 0

        fetch.assert_called_once_with(client, "acc_1")

    def test_no_accounts(self, client):
        client.list_accounts.return_value = []

        with patch.object(bankterm, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            bankterm, "create_mondo_client", return_value=client
        ):
            assert bankterm.main([]) == 1

    def test_auth_failure(self):
        with patch.object(bankterm, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            bankterm, "create_mondo_client", side_effect=MondoUnauthenticatedError()
        ):
            assert bankterm.main([]) == 1


class TestWebhookScript:
    def test_register(self, client, capsys):
        client.register_webhook.return_value = Webhook(
            id="webhook_1", account_id="acc_1", url="https://hook.test"
        )

        with patch.object(webhook, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            webhook, "create_mondo_client", return_value=client
        ):
            assert webhook.main(["register", "https://hook.test"]) == 0

        client.register_webhook.assert_called_once_with("acc_1", "https://hook.test")
        assert "webhook_1" in capsys.readouterr().out

    def test_delete(self, client):
        with patch.object(webhook, "get_mondo_credentials", return_value=CREDENTIALS), patch.object(
            webhook, "create_mondo_client", return_value=client
        ):
            assert webhook.main(["delete", "webhook_1"]) == 0

        client.delete_webhook.assert_called_once_with("webhook_1")

    def test_missing_credentials(self):
        with patch.object(
            webhook, "get_mondo_credentials", side_effect=ValueError("could not read $MONDO_USERNAME")
        ):
            assert webhook.main(["delete", "webhook_1"]) == 1
