#!/usr/bin/env python3
"""
Register or delete a Mondo webhook.

Reads MONDO_CLIENT_ID, MONDO_CLIENT_SECRET, MONDO_USERNAME and MONDO_PASSWORD
from the environment. The webhook is registered against the first account.

Usage:
    mondo-webhook register https://example.com/hook
    mondo-webhook delete webhook_00009...
"""

import argparse
import logging
import sys

from ..adapters.mondo import create_mondo_client
from ..common.errors import MondoError
from ..config.loader import cfg, get_mondo_credentials
from ..utils.log_setup import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mondo-webhook", description="Manage Mondo webhooks")
    subparsers = parser.add_subparsers(dest="action", required=True)

    register = subparsers.add_parser("register", help="Register a webhook URL")
    register.add_argument("url", help="URL that will receive transaction events")

    delete = subparsers.add_parser("delete", help="Delete a webhook")
    delete.add_argument("webhook_id", help="Id returned when the webhook was registered")

    args = parser.parse_args(argv)

    setup_logging(cfg("logging.level", "INFO"), cfg("logging.format", "text"))

    try:
        client = create_mondo_client(**get_mondo_credentials())

        if args.action == "register":
            accounts = client.list_accounts()
            if not accounts:
                logger.error("No accounts with Mondo found")
                return 1
            webhook = client.register_webhook(accounts[0].id, args.url)
            print(f"registered webhook {webhook.id} -> {webhook.url}")
        else:
            client.delete_webhook(args.webhook_id)
            print(f"deleted webhook {args.webhook_id}")
    except (MondoError, ValueError) as e:
        logger.error(f"Error managing webhook: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
