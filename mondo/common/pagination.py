"""
Cursor pagination over the transactions endpoint.

The API has no "next page" marker: a page that comes back full means there
may be more, and the id of its last transaction is the cursor for the next
request. A short page ends the stream.
"""

import logging
from collections.abc import Iterator

from ..adapters.mondo import MondoClient
from ..models import Transaction

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


def iter_all_transactions(
    client: MondoClient, account_id: str, page_size: int = DEFAULT_PAGE_SIZE
) -> Iterator[Transaction]:
    """Yield every transaction of an account in server order.

    Pages are fetched one at a time; the next request is only sent once the
    previous page has been fully yielded. Each call starts from the beginning.
    """
    cursor = ""
    page = 0

    while True:
        page += 1
        logger.debug(f"Fetching transactions page {page} (since={cursor or '-'})")
        transactions = client.list_transactions(account_id, since=cursor, limit=page_size)
        yield from transactions

        if len(transactions) < page_size:
            break
        cursor = transactions[-1].id

    logger.debug(f"Transaction pagination finished after {page} pages")


def fetch_all_transactions(
    client: MondoClient, account_id: str, page_size: int = DEFAULT_PAGE_SIZE
) -> list[Transaction]:
    """Fetch every transaction of an account into a list."""
    transactions = list(iter_all_transactions(client, account_id, page_size=page_size))
    logger.info(f"Retrieved total of {len(transactions)} transactions for {account_id}")
    return transactions
