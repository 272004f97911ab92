"""
Console formatting for amounts and transaction tables.

This is the only place minor currency units are converted to major units.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from ..models import Transaction

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
}

# RFC 822 layout, e.g. "22 Aug 15 12:20 UTC"
TIME_FORMAT = "%d %b %y %H:%M %Z"


def currency_symbol(currency: str) -> str | None:
    """Symbol for a currency code, or None if unknown."""
    return CURRENCY_SYMBOLS.get(currency)


def format_amount(minor_units: int, currency: str = "GBP") -> str:
    """Format an amount in minor units, e.g. -510 GBP -> '£-5.10'."""
    symbol = currency_symbol(currency) or ""
    return f"{symbol}{minor_units / 100:.2f}"


def format_time(dt: datetime) -> str:
    return dt.strftime(TIME_FORMAT).strip()


def merchant_display_name(transaction: Transaction) -> str:
    """Merchant name, with Mondo's own top-ups shown as 'Mondo'."""
    if transaction.category == "mondo":
        return "Mondo"
    return transaction.merchant_name


def render_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a left-aligned, boxed text table."""
    rows = [list(map(str, row)) for row in rows]
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: Sequence[str]) -> str:
        return "|" + "|".join(f" {cell.ljust(w)} " for cell, w in zip(cells, widths)) + "|"

    out = [border, line([h.upper() for h in headers]), border]
    out.extend(line(row) for row in rows)
    out.append(border)
    return "\n".join(out)


def transactions_table(transactions: Iterable[Transaction], with_id: bool = False) -> str:
    """Render transactions as a table: merchant, time, amount, category, balance."""
    headers = ["Merchant Name", "Time", "Amount", "Category", "Balance"]
    if with_id:
        headers = ["ID"] + headers

    rows = []
    for t in transactions:
        row = [
            merchant_display_name(t),
            format_time(t.created),
            format_amount(t.amount, t.currency),
            t.category,
            format_amount(t.account_balance, t.currency),
        ]
        rows.append([t.id] + row if with_id else row)
    return render_table(headers, rows)
