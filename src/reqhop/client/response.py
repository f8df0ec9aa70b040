"""src/reqhop/client/response.py

HTTP Response handling module.

A Response is produced by the transport for every hop. The redirect driver
fills in the chain-related attributes on the one it returns to the caller.
"""

import json as std_json
from typing import Any, List, Optional, cast

from reqhop.exceptions import InvalidResponseError, status_message
from reqhop.http.headers import Headers

__all__ = ["Response"]


class Response:
    """
    Represents a fully read HTTP response.

    Attributes:
        status_code: HTTP status code as integer.
        reason: Reason phrase sent by the server.
        http_version: Protocol version from the status line.
        headers: Case-insensitive response headers.
        body: Response body as bytes.
        method: Method of the request that produced this response.
        url: URL of the hop that produced this response; after redirects,
            the last URL in the chain.
        request_url: URL originally requested by the caller.
        redirect_urls: URLs followed after the original one, in order.
        history: Redirect responses that were followed, oldest first.
    """

    # pylint: disable=too-many-instance-attributes
    __slots__ = (
        "status_code",
        "reason",
        "http_version",
        "headers",
        "body",
        "method",
        "url",
        "request_url",
        "redirect_urls",
        "history",
    )

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        status_code: int,
        headers: Optional[Headers] = None,
        body: bytes = b"",
        *,
        reason: str = "",
        http_version: str = "HTTP/1.1",
        method: str = "GET",
        url: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.http_version = http_version
        self.headers = headers if headers is not None else Headers()
        self.body = body
        self.method = method
        self.url = url
        self.request_url: Optional[str] = url
        self.redirect_urls: List[str] = []
        self.history: List["Response"] = []

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] {self.url}>"

    @property
    def status(self) -> int:
        """Alias for status_code for compatibility."""
        return self.status_code

    @property
    def status_message(self) -> str:
        """Standard reason phrase, falling back to the server's."""
        return status_message(self.status_code, self.reason)

    @property
    def status_line(self) -> str:
        """Reconstructed status line, e.g. ``HTTP/1.1 302 Found``."""
        return f"{self.http_version} {self.status_code} {self.reason}".rstrip()

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        """True for a redirect-class status carrying a Location header."""
        return 300 <= self.status_code < 400 and bool(
            self.headers.get("Location", "").strip()
        )

    def text(self, encoding: Optional[str] = None) -> str:
        """
        Return decoded text.
        """
        if encoding is None:
            content_type = cast(str, self.headers.get("Content-Type", ""))
            if "charset=" in content_type:
                encoding = content_type.split("charset=")[-1].split(";")[0].strip()
            else:
                encoding = "utf-8"

        try:
            return self.body.decode(encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """
        Returns JSON-decoded body.
        """
        try:
            return std_json.loads(self.text())
        except (std_json.JSONDecodeError, TypeError, ValueError) as exc:
            raise InvalidResponseError("Failed to decode JSON response") from exc
