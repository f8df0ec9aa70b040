"""src/reqhop/exceptions.py

Reqhop Exceptions hierarchy.
"""

# pylint: disable=redefined-builtin

from http import HTTPStatus
from typing import List, Optional

__all__ = [
    "ReqhopError",
    "RequestError",
    "TransportError",
    "NetworkError",
    "TimeoutError",
    "ConnectTimeout",
    "ReadTimeout",
    "TlsError",
    "ProtocolError",
    "InvalidResponseError",
    "HTTPError",
    "IneligibleMethodError",
    "LoopAbortError",
]


class ReqhopError(Exception):
    """Base exception for all Reqhop errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class RequestError(ReqhopError):
    """General exception for Request errors."""


class TransportError(RequestError):
    """
    Base exception for failures below the redirect logic.
    Connection, TLS and parse errors are raised as subclasses of this one
    and are never retried or reinterpreted by the driver.
    """


class NetworkError(TransportError):
    """
    Base exception for network-related errors.
    Wraps socket errors and other connection issues.
    """


class TimeoutError(TransportError):
    """
    Base exception for timeouts.
    """

    def __init__(self, message: str = "Operation timed out"):
        super().__init__(message)


class ConnectTimeout(TimeoutError):
    """Timeout during connection establishment."""


class ReadTimeout(TimeoutError):
    """Timeout during data reception."""


class TlsError(NetworkError):
    """TLS/SSL handshake or verification errors."""


class ProtocolError(TransportError):
    """
    Errors related to HTTP protocol (parsing, violations).
    """


class InvalidResponseError(ProtocolError):
    """Server sent a response that could not be understood."""


def status_message(status_code: int, fallback: str = "") -> str:
    """Return the standard reason phrase for a status code."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return fallback


class HTTPError(RequestError):
    """
    Response carried a status the client refuses to treat as a result.

    Attributes:
        status_code: Status code of the offending response.
        status_message: Reason phrase for ``status_code``.
        path: Request target (path and query) of the hop that failed.
        method: Method of the hop that failed.
        url: Full URL of the hop that failed.
        headers: Response headers of the hop that failed.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        status_code: int,
        *,
        path: str,
        method: str = "GET",
        url: Optional[str] = None,
        headers: Optional[object] = None,
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self.status_message = status_message(status_code, reason)
        self.path = path
        self.method = method
        self.url = url
        self.headers = headers
        super().__init__(f"Response code {status_code} ({self.status_message})")


class IneligibleMethodError(HTTPError):
    """Redirect-class status received for a method that is not GET or HEAD."""


class LoopAbortError(RequestError):
    """
    Redirect chain grew past the configured maximum.

    Attributes:
        redirect_count: Number of redirects that were followed.
        redirect_urls: URLs visited, original request URL first.
    """

    def __init__(self, redirect_count: int, redirect_urls: List[str]) -> None:
        self.redirect_count = redirect_count
        self.redirect_urls = redirect_urls
        super().__init__(f"Redirected {redirect_count} times. Aborting.")
