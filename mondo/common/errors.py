"""
Exception hierarchy for the Mondo API client.

Every failure surfaced by the client derives from MondoError so callers can
catch the whole family in one place.
"""


class MondoError(Exception):
    """Base exception for Mondo API errors."""

    pass


class MondoInvalidInputError(MondoError, ValueError):
    """A required argument was missing or empty. Raised before any request is sent."""

    pass


class MondoAuthError(MondoError):
    """Authentication error for the Mondo API."""

    pass


class MondoUnauthenticatedError(MondoAuthError):
    """The request was not sent with a valid token (HTTP 401)."""

    def __init__(self, message: str = "your request was not sent with a valid token"):
        super().__init__(message)


class MondoNotFoundError(MondoError):
    """Requested resource does not exist (HTTP 404)."""

    pass


class MondoMalformedResponseError(MondoError):
    """Response body could not be parsed or was missing required fields."""

    pass


class MondoFeedError(MondoError):
    """Business error reported by the feed endpoint."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class MondoAPIError(MondoError):
    """Unexpected non-success HTTP status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error (HTTP {status_code}): {body}")


class MondoTransportError(MondoError):
    """Network or transport failure. The original exception is kept as __cause__."""

    pass
