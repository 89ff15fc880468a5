"""Custom exceptions for ytmdeck.

All exceptions include an HTTP status_code attribute and a retryable flag
so callers can decide whether to offer a retry or ask for a fresh login.
"""


class YTDeckError(Exception):
    """Base exception for ytmdeck.

    Attributes:
        status_code: HTTP status code for API error responses.
        retryable: Whether repeating the same request may succeed.
    """

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class APIError(YTDeckError):
    """YouTube Music API error.

    Raised when the upstream API answers with an error response.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)
    retryable: bool = True


class NetworkError(APIError):
    """The request never produced a response (DNS, refused, timeout)."""

    status_code: int = 503  # Service Unavailable
    retryable: bool = True


class AuthenticationRequiredError(YTDeckError):
    """Authentication required or expired.

    Raised when the session cookies are missing, invalid or expired.
    Retrying does not help, the user has to sign in again.
    """

    status_code: int = 401  # Unauthorized
    retryable: bool = False


class NotFoundError(YTDeckError):
    """Requested entity does not exist or is not accessible."""

    status_code: int = 404  # Not Found
    retryable: bool = False


class ResponseParseError(YTDeckError):
    """Upstream answered, but with nothing that could be parsed.

    Parsers themselves never raise; the client raises this when a parse
    came back empty for an entity that must exist (e.g. a single song).
    """

    status_code: int = 502
    retryable: bool = False


class InvalidIdentifierError(YTDeckError):
    """Failed to extract a video or playlist ID from user input."""

    status_code: int = 400  # Bad Request
