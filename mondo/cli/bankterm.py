#!/usr/bin/env python3
"""
bankterm - print a table of your latest Mondo transactions.

Reads MONDO_CLIENT_ID, MONDO_CLIENT_SECRET, MONDO_USERNAME and MONDO_PASSWORD
from the environment.

Usage:
    bankterm [--limit N] [--all]
"""

import argparse
import logging
import sys

from ..adapters.mondo import create_mondo_client
from ..common.display import transactions_table
from ..common.errors import MondoError
from ..common.pagination import fetch_all_transactions
from ..config.loader import cfg, get_mondo_credentials
from ..utils.log_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bankterm", description="Print a table of your Mondo transactions"
    )
    parser.add_argument("--limit", type=int, default=100, help="Transactions to fetch (default 100)")
    parser.add_argument("--all", action="store_true", help="Fetch the full history")
    args = parser.parse_args(argv)

    setup_logging(cfg("logging.level", "INFO"), cfg("logging.format", "text"))

    try:
        client = create_mondo_client(**get_mondo_credentials())
        logger.info("Authenticated with Mondo successfully!")

        accounts = client.list_accounts()
        if not accounts:
            logger.error("No accounts with Mondo found :( Sign up!")
            return 1

        account_id = accounts[0].id
        if args.all:
            transactions = fetch_all_transactions(client, account_id)
        else:
            transactions = client.list_transactions(account_id, limit=args.limit)
    except (MondoError, ValueError) as e:
        logger.error(f"bankterm failed: {e}")
        return 1

    if not transactions:
        logger.warning("No transactions found. Sorry!")
        return 0

    print(transactions_table(transactions, with_id=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
