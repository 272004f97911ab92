"""
Pydantic models for Mondo API data.

All monetary amounts are integers in minor currency units (pence). Converting
them for display is the job of mondo.common.display, never of these models.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

_READONLY = {"extra": "ignore", "frozen": True}


class MerchantAddress(BaseModel):
    """Merchant address."""

    address: str | None = None
    approximate: bool = False
    city: str | None = None
    country: str | None = None
    formatted: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    postcode: str | None = None
    region: str | None = None
    short_formatted: str | None = None
    zoom_level: int | None = None

    model_config = _READONLY


class Merchant(BaseModel):
    """Merchant details (expanded from transaction)."""

    id: str
    group_id: str | None = None
    name: str | None = None
    category: str | None = None
    created: datetime | None = None  # Can be empty string
    emoji: str | None = None
    logo: str | None = None
    online: bool = False
    address: MerchantAddress | None = None

    model_config = _READONLY

    @field_validator("created", mode="before")
    @classmethod
    def blank_created_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Account(BaseModel):
    """A Mondo account."""

    id: str
    account_number: str | None = None
    sort_code: str | None = None
    description: str | None = None
    created: datetime

    model_config = _READONLY


class Transaction(BaseModel):
    """A single transaction.

    ``account_balance`` is the balance immediately after this transaction,
    as reported by the server. It is not a running total kept by the client.
    """

    id: str
    amount: int  # In minor units (pence), negative = spend
    account_balance: int = 0
    currency: str = "GBP"
    category: str = ""
    created: datetime
    description: str = ""
    notes: str = ""
    # Older payloads send a boolean, newer ones a timestamp string.
    settled: bool | str | None = None
    is_load: bool = False
    # Always requested expanded; an unexpanded payload carries the merchant id.
    merchant: Merchant | str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    attachments: list[Any] = Field(default_factory=list)

    model_config = _READONLY

    @field_validator("category", "description", "notes", mode="before")
    @classmethod
    def null_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metadata", "attachments", mode="before")
    @classmethod
    def null_to_empty(cls, value: Any, info) -> Any:
        if value is None:
            return {} if info.field_name == "metadata" else []
        return value

    @property
    def merchant_name(self) -> str:
        """Merchant display name, or empty string when not expanded."""
        if isinstance(self.merchant, Merchant):
            return self.merchant.name or ""
        return ""

    @property
    def is_settled(self) -> bool:
        """Whether the server reported the transaction as settled."""
        if isinstance(self.settled, str):
            return bool(self.settled.strip())
        return bool(self.settled)


class Balance(BaseModel):
    """Current balance snapshot for an account."""

    balance: int
    currency: str
    spend_today: int = 0

    model_config = _READONLY


class FeedItem(BaseModel):
    """Request payload for a basic feed item. Colors left unset get defaults."""

    title: str = ""
    image_url: str = ""
    body: str = ""
    background_color: str | None = None
    body_color: str | None = None
    title_color: str | None = None


class Webhook(BaseModel):
    """A registered webhook."""

    id: str
    account_id: str
    url: str

    model_config = _READONLY


class Attachment(BaseModel):
    """An attachment registered against a transaction."""

    id: str
    user_id: str | None = None
    external_id: str
    file_url: str
    file_type: str
    created: datetime | None = None

    model_config = _READONLY

    @field_validator("created", mode="before")
    @classmethod
    def blank_created_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class WebhookEvent(BaseModel):
    """Payload the server POSTs to a registered webhook URL."""

    type: str
    data: Transaction | None = None

    model_config = _READONLY


def parse_webhook_event(payload: dict[str, Any] | str | bytes) -> WebhookEvent:
    """Parse a webhook POST body (already-decoded dict or raw JSON)."""
    if isinstance(payload, (str, bytes)):
        return WebhookEvent.model_validate_json(payload)
    return WebhookEvent.model_validate(payload)
