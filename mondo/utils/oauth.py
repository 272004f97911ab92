"""
OAuth utilities for the Mondo API.

Implements the resource-owner password grant: client credentials plus the
user's email and password are exchanged for a bearer token with a fixed
lifetime. Tokens are never refreshed automatically; callers detect expiry and
authenticate again.
"""

import logging
from datetime import datetime
from typing import Any

import requests
from requests.exceptions import RequestException

from ..common.errors import (
    MondoAPIError,
    MondoAuthError,
    MondoInvalidInputError,
    MondoMalformedResponseError,
    MondoTransportError,
    MondoUnauthenticatedError,
)
from .time_utils import expiry_from_now, utc_now

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://production-api.gmon.io"
TOKEN_PATH = "oauth2/token"
GRANT_TYPE_PASSWORD = "password"


class OAuthConfig:
    """OAuth client configuration for the Mondo API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/{TOKEN_PATH}"


class OAuthToken:
    """Bearer token and its absolute expiry time."""

    def __init__(
        self,
        access_token: str,
        expires_at: datetime,
        token_type: str = "Bearer",
        refresh_token: str | None = None,
        user_id: str | None = None,
    ):
        self.access_token = access_token
        self.expires_at = expires_at
        self.token_type = token_type
        self.refresh_token = refresh_token
        self.user_id = user_id

    @property
    def is_expired(self) -> bool:
        """True once the current time has reached the expiry."""
        return utc_now() >= self.expires_at

    @property
    def authorization_header(self) -> str:
        """Get authorization header value."""
        return f"Bearer {self.access_token}"

    def __repr__(self) -> str:
        return f"OAuthToken(token_type={self.token_type!r}, expires_at={self.expires_at.isoformat()})"


class OAuthManager:
    """Exchanges user credentials for access tokens."""

    def __init__(self, config: OAuthConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session or requests.Session()

    def authenticate(self, username: str, password: str) -> OAuthToken:
        """Run the password grant and return a fresh token.

        Args:
            username: Email address the user signs in with
            password: User's password

        Returns:
            OAuthToken whose expiry is now + the server-declared expires_in

        Raises:
            MondoInvalidInputError: Any credential is empty (no request is sent)
            MondoUnauthenticatedError: Server answered HTTP 401
            MondoAuthError: Server answered with an error body
            MondoMalformedResponseError: Token response missing required fields
            MondoTransportError: Network failure
        """
        if not (self.config.client_id and self.config.client_secret and username and password):
            raise MondoInvalidInputError("zero value passed to authenticate")

        data = {
            "grant_type": GRANT_TYPE_PASSWORD,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "username": username,
            "password": password,
        }

        logger.debug(f"POST {self.config.token_url} (grant_type={GRANT_TYPE_PASSWORD})")
        try:
            response = self.session.post(
                self.config.token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except RequestException as e:
            logger.error(f"Token request failed: {e}")
            raise MondoTransportError(str(e)) from e

        if response.status_code == 401:
            raise MondoUnauthenticatedError()

        try:
            token_data = response.json()
        except ValueError as e:
            raise MondoMalformedResponseError(f"Token response is not valid JSON: {e}") from e

        if not isinstance(token_data, dict):
            raise MondoMalformedResponseError("Token response is not a JSON object")

        if token_data.get("error"):
            logger.error(f"Token exchange rejected: {token_data['error']}")
            raise MondoAuthError(str(token_data["error"]))

        if response.status_code >= 400:
            raise MondoAPIError(response.status_code, response.text)

        token = parse_token_response(token_data)
        logger.info(f"Authenticated with Mondo, token valid until {token.expires_at.isoformat()}")
        return token


def parse_token_response(token_data: dict[str, Any]) -> OAuthToken:
    """Build an OAuthToken from a token endpoint body."""
    access_token = token_data.get("access_token")
    token_type = token_data.get("token_type")
    try:
        expires_in = int(token_data.get("expires_in") or 0)
    except (TypeError, ValueError):
        expires_in = 0

    if not access_token or not token_type or expires_in <= 0:
        raise MondoMalformedResponseError("failed to scan token response correctly")

    return OAuthToken(
        access_token=access_token,
        expires_at=expiry_from_now(expires_in),
        token_type=token_type,
        refresh_token=token_data.get("refresh_token"),
        user_id=token_data.get("user_id"),
    )


def authenticate(
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float | None = None,
) -> OAuthToken:
    """Authenticate with the password grant using a one-off manager."""
    manager = OAuthManager(OAuthConfig(client_id, client_secret, base_url=base_url, timeout=timeout))
    return manager.authenticate(username, password)
