"""
Built-in mondoctl commands: login, balance, ls and help.
"""

import getpass
import logging
from collections.abc import Callable

from ..adapters.mondo import MondoClient
from ..common.display import currency_symbol, format_amount, transactions_table
from ..common.pagination import DEFAULT_PAGE_SIZE, fetch_all_transactions
from ..config.loader import get_required_env
from ..models import Transaction
from .registry import Command, CommandError, CommandRegistry, ReplState

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 1000


class LoginCommand(Command):
    name = "login"
    help = "login to mondo"

    def __init__(self, prompt: Callable[[str], str] = getpass.getpass):
        self.prompt = prompt

    def run(self, args: list[str], state: ReplState) -> None:
        if state.client is not None:
            return

        client_id = get_required_env("MONDO_CLIENT_ID")
        client_secret = get_required_env("MONDO_CLIENT_SECRET")

        username = self.prompt("please enter the email you use for mondo: ")
        password = self.prompt("please enter your mondo password: ")

        print("thanks! logging in...")

        client = MondoClient.authenticate(
            client_id, client_secret, username, password, config=state.config
        )
        accounts = client.list_accounts()
        if not accounts:
            raise CommandError("no mondo accounts found. sign up!")

        state.client = client
        state.account_id = accounts[0].id
        state.transactions = None
        logger.info(f"Logged in, using account {state.account_id}")


class BalanceCommand(Command):
    name = "balance"
    help = "returns your current balance"

    def run(self, args: list[str], state: ReplState) -> None:
        client = state.require_client()
        balance = client.get_balance(state.account_id)

        if currency_symbol(balance.currency) is None:
            print(f"unrecognised currency '{balance.currency}'")

        print(
            f"your balance is {format_amount(balance.balance, balance.currency)}"
            f" - you've spent {format_amount(balance.spend_today, balance.currency)} so far today!"
        )


class TransactionsCommand(Command):
    name = "ls"
    help = (
        "list transactions. this command takes a list of key value pairs for filtering.\n"
        "\tyou can filter on transaction fields, sorting order and number of results returned\n"
        "\te.g.:\n\n"
        "\tls sort=desc n=100\n"
        "\tls sort=asc n=10 category=eating_out merchant=pret"
    )

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        self.page_size = page_size

    def run(self, args: list[str], state: ReplState) -> None:
        client = state.require_client()

        if state.transactions is None:
            print("loading all of your transactions. this may take a few seconds..")
            state.transactions = fetch_all_transactions(
                client, state.account_id, page_size=self.page_size
            )

        selected, n = filter_transactions(state.transactions, args)
        if not selected:
            print("no matching transactions found")
            return

        print(transactions_table(selected[:n]))


def filter_transactions(
    transactions: list[Transaction], args: list[str]
) -> tuple[list[Transaction], int]:
    """Apply `key=value` arguments in order.

    Supported keys: sort (asc|desc), category (substring), merchant
    (case-insensitive substring) and n (row limit). Unknown keys are ignored.

    Returns:
        Filtered transactions and the row limit
    """
    selected = list(transactions)
    n = DEFAULT_LIST_LIMIT

    for arg in args:
        parts = arg.split("=")
        if len(parts) != 2:
            raise CommandError("invalid key=value parameter")
        key, value = parts

        if key == "sort":
            # Server order is ascending already
            if value == "desc":
                selected.sort(key=lambda t: t.created, reverse=True)
        elif key == "category":
            selected = [t for t in selected if value in t.category]
        elif key == "merchant":
            needle = value.lower()
            selected = [t for t in selected if needle in t.merchant_name.lower()]
        elif key == "n":
            try:
                n = int(value)
            except ValueError:
                raise CommandError(f"invalid value for n: {value!r}") from None
            if n < 0:
                raise CommandError(f"invalid value for n: {value!r}")

    return selected, n


class HelpCommand(Command):
    name = "help"
    help = "lists the help"

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def run(self, args: list[str], state: ReplState) -> None:
        for command in self.registry.commands():
            print(f"{command.name}\t{command.help}\n")
        print()


def default_registry(
    prompt: Callable[[str], str] = getpass.getpass, page_size: int = DEFAULT_PAGE_SIZE
) -> CommandRegistry:
    """Registry with all built-in commands."""
    registry = CommandRegistry()
    registry.register(LoginCommand(prompt=prompt))
    registry.register(BalanceCommand())
    registry.register(TransactionsCommand(page_size=page_size))
    registry.register(HelpCommand(registry))
    return registry
