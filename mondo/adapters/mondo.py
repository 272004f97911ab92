"""
Mondo API client adapter.

Wraps an OAuth bearer token and performs authenticated GET/POST/DELETE calls
against the Mondo REST API, decoding each endpoint's JSON envelope into typed
models. There is no retry and no automatic token refresh: an expired or
rejected token surfaces as MondoUnauthenticatedError and the caller
authenticates again.
"""

import json
import logging
import os
from datetime import datetime
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, Field, ValidationError
from requests.exceptions import RequestException

from ..common.errors import (
    MondoAPIError,
    MondoFeedError,
    MondoInvalidInputError,
    MondoMalformedResponseError,
    MondoNotFoundError,
    MondoTransportError,
    MondoUnauthenticatedError,
)
from ..config.loader import cfg
from ..models import Account, Attachment, Balance, FeedItem, Transaction, Webhook
from ..utils.oauth import DEFAULT_BASE_URL, OAuthConfig, OAuthManager, OAuthToken
from ..utils.time_utils import format_iso_timestamp

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_BACKGROUND_COLOR = "#FCF1EE"
DEFAULT_BODY_COLOR = "#FCF1EE"
DEFAULT_TITLE_COLOR = "#333"

SUPPORTED_METHODS = ("GET", "POST", "DELETE")


class MondoConfig(BaseModel):
    """Mondo API connection settings."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root URL")
    timeout: float | None = Field(
        default=None, description="Request timeout in seconds (None = transport default)"
    )

    @classmethod
    def from_env(cls) -> "MondoConfig":
        """Load settings from MONDO_BASE_URL / MONDO_TIMEOUT, then the config file."""
        base_url = os.getenv("MONDO_BASE_URL") or cfg("api.base_url") or DEFAULT_BASE_URL
        timeout = os.getenv("MONDO_TIMEOUT") or cfg("api.timeout")
        return cls(base_url=base_url, timeout=float(timeout) if timeout else None)


def _require(**fields: Any) -> None:
    """Raise MondoInvalidInputError for the first empty field."""
    for name, value in fields.items():
        if not value:
            raise MondoInvalidInputError(f"{name} cannot be empty")


def _parse(model: type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MondoMalformedResponseError(f"Invalid {model.__name__} payload: {e}") from e


def _format_cursor(value: str | datetime | None) -> str:
    if isinstance(value, datetime):
        return format_iso_timestamp(value)
    return value or ""


def _error_body(error: MondoAPIError) -> dict[str, Any]:
    try:
        body = json.loads(error.body)
    except (TypeError, ValueError):
        return {}
    return body if isinstance(body, dict) else {}


class MondoClient:
    """Mondo API client bound to a single authenticated session."""

    def __init__(
        self,
        token: OAuthToken,
        config: MondoConfig | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client with an already-acquired token.

        Args:
            token: Bearer token from OAuthManager.authenticate
            config: Connection settings; defaults to the production API
            session: requests session to reuse (a new one is created otherwise)
        """
        self.token = token
        self.config = config or MondoConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.authenticated = True

    @classmethod
    def authenticate(
        cls,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
        config: MondoConfig | None = None,
        session: requests.Session | None = None,
    ) -> "MondoClient":
        """Run the password grant and return a client holding the new token."""
        config = config or MondoConfig()
        session = session or requests.Session()
        manager = OAuthManager(
            OAuthConfig(client_id, client_secret, base_url=config.base_url, timeout=config.timeout),
            session=session,
        )
        token = manager.authenticate(username, password)
        return cls(token, config=config, session=session)

    @property
    def expires_at(self) -> datetime:
        """Time at which the current token expires and has to be replaced."""
        return self.token.expires_at

    def is_valid(self) -> bool:
        """True while the token has not expired.

        Once expiry is observed the client is marked unauthenticated; it never
        becomes authenticated again.
        """
        if not self.token.is_expired:
            return True
        self.authenticated = False
        return False

    def _build_url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def call(self, method: str, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        """Make an authenticated API request.

        GET and DELETE send params as the query string; POST sends them as a
        URL-encoded form body.

        Args:
            method: HTTP method (GET, POST or DELETE)
            path: API endpoint path relative to the base URL
            params: Query or form parameters

        Returns:
            requests.Response object with a successful status

        Raises:
            MondoUnauthenticatedError: HTTP 401; the client is marked unauthenticated
            MondoNotFoundError: HTTP 404
            MondoAPIError: Any other HTTP error status
            MondoTransportError: Network failure
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self._build_url(path)
        headers = {"Authorization": self.token.authorization_header}
        query, form = (None, params) if method == "POST" else (params, None)
        if form is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        logger.debug(f"Making {method} request to {url}")
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=query,
                data=form,
                headers=headers,
                timeout=self.config.timeout,
            )
        except RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise MondoTransportError(str(e)) from e

        if response.status_code == 401:
            self.authenticated = False
            raise MondoUnauthenticatedError()
        elif response.status_code == 404:
            raise MondoNotFoundError(f"Not found (HTTP 404): {path}")
        elif response.status_code >= 400:
            logger.error(f"Mondo API error {response.status_code} for {url}")
            raise MondoAPIError(response.status_code, response.text)

        return response

    def _decode(self, response: requests.Response, key: str | None = None) -> Any:
        """Decode a JSON body, optionally unwrapping one envelope key."""
        try:
            data = response.json()
        except ValueError as e:
            raise MondoMalformedResponseError(f"Response is not valid JSON: {e}") from e

        if key is None:
            return data
        if not isinstance(data, dict) or key not in data:
            raise MondoMalformedResponseError(f"Response is missing '{key}'")
        return data[key]

    def list_accounts(self) -> list[Account]:
        """Get all accounts owned by the authenticated user."""
        accounts = self._decode(self.call("GET", "accounts"), "accounts") or []
        logger.info(f"Retrieved {len(accounts)} accounts")
        return [_parse(Account, account) for account in accounts]

    def get_balance(self, account_id: str) -> Balance:
        """Get the current balance of an account. Never cached."""
        _require(account_id=account_id)
        return _parse(Balance, self._decode(self.call("GET", "balance", {"account_id": account_id})))

    def list_transactions(
        self,
        account_id: str,
        since: str | datetime | None = "",
        before: str | datetime | None = "",
        limit: int = 100,
    ) -> list[Transaction]:
        """Get one page of transactions with the merchant expanded.

        To paginate, pass the id of the last transaction returned as ``since``
        while the page comes back full. See mondo.common.pagination.

        Args:
            account_id: Account to list
            since: Transaction id or timestamp to start after
            before: Timestamp to stop at
            limit: Maximum number of transactions to return

        Returns:
            At most ``limit`` transactions in server order
        """
        _require(account_id=account_id)
        if limit <= 0:
            raise MondoInvalidInputError("limit must be positive")

        params: dict[str, Any] = {
            "account_id": account_id,
            "expand[]": "merchant",
            "limit": limit,
        }
        since, before = _format_cursor(since), _format_cursor(before)
        if since:
            params["since"] = since
        if before:
            params["before"] = before

        transactions = self._decode(self.call("GET", "transactions", params), "transactions") or []
        logger.debug(f"Retrieved {len(transactions)} transactions for {account_id}")
        return [_parse(Transaction, transaction) for transaction in transactions[:limit]]

    def get_transaction(self, account_id: str, transaction_id: str) -> Transaction:
        """Get a single transaction by id.

        Raises:
            MondoNotFoundError: No such transaction
        """
        _require(account_id=account_id, transaction_id=transaction_id)
        params = {"account_id": account_id, "expand[]": "merchant"}
        response = self.call("GET", f"transactions/{transaction_id}", params)
        return _parse(Transaction, self._decode(response, "transaction"))

    def create_feed_item(self, account_id: str, item: FeedItem) -> None:
        """Create a basic feed item in the user's app.

        Feed items cannot be deleted afterwards.

        Raises:
            MondoInvalidInputError: account_id, title, image_url or body is empty
            MondoFeedError: The API reported an error code
        """
        _require(
            account_id=account_id, image_url=item.image_url, title=item.title, body=item.body
        )

        params = {
            "account_id": account_id,
            "type": "basic",
            "params[title]": item.title,
            "params[image_url]": item.image_url,
            "params[background_color]": item.background_color or DEFAULT_BACKGROUND_COLOR,
            "params[body_color]": item.body_color or DEFAULT_BODY_COLOR,
            "params[title_color]": item.title_color or DEFAULT_TITLE_COLOR,
            "params[body]": item.body,
        }

        try:
            result = self._decode(self.call("POST", "feed", params))
        except MondoAPIError as e:
            # feed errors come back as 4xx with a {code, message} body
            result = _error_body(e)
            if not result.get("code"):
                raise
        if isinstance(result, dict) and result.get("code"):
            raise MondoFeedError(str(result["code"]), str(result.get("message") or ""))
        logger.info(f"Created feed item '{item.title}' for {account_id}")

    def register_webhook(self, account_id: str, url: str) -> Webhook:
        """Register a webhook URL for an account.

        Each matching event is POSTed to the URL. Failed deliveries are retried
        by the server (up to 5 attempts, exponential backoff); the client does
        not retry.
        """
        _require(account_id=account_id, url=url)
        response = self.call("POST", "webhooks", {"account_id": account_id, "url": url})
        webhook = _parse(Webhook, self._decode(response, "webhook"))
        logger.info(f"Registered webhook {webhook.id} for {account_id}")
        return webhook

    def delete_webhook(self, webhook_id: str) -> None:
        """Delete a webhook. No further notifications are sent to it."""
        _require(webhook_id=webhook_id)
        self.call("DELETE", f"webhooks/{webhook_id}")
        logger.info(f"Deleted webhook {webhook_id}")

    def register_attachment(self, external_id: str, file_url: str, file_type: str) -> Attachment:
        """Register a hosted file against a transaction.

        Args:
            external_id: Transaction id the attachment belongs to
            file_url: URL of the uploaded or remotely hosted file
            file_type: MIME type of the file
        """
        _require(external_id=external_id, file_url=file_url, file_type=file_type)
        params = {"external_id": external_id, "file_type": file_type, "file_url": file_url}
        response = self.call("POST", "attachment/register", params)
        return _parse(Attachment, self._decode(response, "attachment"))


def create_mondo_client(
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
    config: MondoConfig | None = None,
) -> MondoClient:
    """Factory function to authenticate and build a client.

    Args:
        client_id: OAuth client id
        client_secret: OAuth client secret
        username: User's email address
        password: User's password
        config: Connection settings; loaded from environment/config file when omitted

    Returns:
        Authenticated MondoClient instance
    """
    return MondoClient.authenticate(
        client_id, client_secret, username, password, config=config or MondoConfig.from_env()
    )
