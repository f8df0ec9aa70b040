"""src/reqhop/http/http11.py

HTTP/1.1 message framing: request heads out, response heads in.
"""

# pylint: disable=line-too-long

import asyncio
from typing import IO, List, Mapping, Optional, Tuple

from reqhop.exceptions import InvalidResponseError, ProtocolError
from reqhop.http.headers import Headers
from reqhop.utils.validators import validate_header
from reqhop.version import __version__

__all__ = [
    "HttpParser",
    "ResponseHead",
    "build_request_head",
    "body_framing",
    "is_reusable",
    "read_head",
    "async_read_head",
    "FRAMING_NONE",
    "FRAMING_CHUNKED",
    "FRAMING_LENGTH",
    "FRAMING_CLOSE",
]

USER_AGENT = f"reqhop/{__version__}"

FRAMING_NONE = "none"
FRAMING_CHUNKED = "chunked"
FRAMING_LENGTH = "length"
FRAMING_CLOSE = "close"

ResponseHead = Tuple[str, int, str, Headers]
"""(http_version, status_code, reason, headers)"""


class HttpParser:
    """
    HTTP/1.1 response head parser.

    Handles:
    - Status Line parsing.
    - Header parsing with duplicate handling.
    - Defensive sizing.

    Header octets are decoded as ISO-8859-1 so that every byte maps to
    exactly one character; callers can recover the raw bytes with
    ``value.encode("latin-1")``.
    """

    def __init__(self, max_header_size: int = 8192, max_field_count: int = 100):
        self.max_header_size = max_header_size
        self.max_field_count = max_field_count

    def parse_head(self, data: bytes) -> ResponseHead:
        """
        Parse a raw response head (status line and header lines).

        Raises:
            ProtocolError: If the head is too large or has too many fields.
            InvalidResponseError: If the status line is invalid.
        """
        if len(data) > self.max_header_size:
            raise ProtocolError(
                f"Headers exceed maximum size of {self.max_header_size} bytes"
            )

        # Bare LF line endings are accepted, as in read_head.
        lines = [line.rstrip("\r") for line in data.decode("iso-8859-1").split("\n")]
        lines = [line for line in lines if line]
        if not lines:
            raise InvalidResponseError("Empty response")

        version, status_code, reason = self._parse_status_line(lines[0])

        fields = lines[1:]
        if len(fields) > self.max_field_count:
            raise ProtocolError(f"Too many header fields: {len(fields)}")

        return version, status_code, reason, self._parse_headers(fields)

    @staticmethod
    def _parse_status_line(status_line: str) -> Tuple[str, int, str]:
        # HTTP/1.1 302 Found
        parts = status_line.split(" ", 2)
        if len(parts) < 2 or not parts[0].startswith("HTTP/"):
            raise InvalidResponseError(f"Invalid status line: {status_line}")
        try:
            status_code = int(parts[1])
        except ValueError as exc:
            raise InvalidResponseError(f"Invalid status line: {status_line}") from exc
        if not 100 <= status_code <= 999:
            raise InvalidResponseError(f"Invalid status code: {status_code}")
        reason = parts[2] if len(parts) > 2 else ""
        return parts[0], status_code, reason

    @staticmethod
    def _parse_headers(lines: List[str]) -> Headers:
        headers = Headers()
        for line in lines:
            if ":" not in line:
                # Tolerate garbage lines rather than failing the hop.
                continue
            name, value = line.split(":", 1)
            headers.add(name.strip(), value.strip())
        return headers


def build_request_head(
    method: str,
    target: str,
    host: str,
    headers: Mapping[str, str],
    *,
    content_length: Optional[int] = None,
    keep_alive: bool = False,
) -> bytes:
    """
    Build the request line and headers, ending with a blank line.

    Caller headers override the defaults (Host, Connection, User-Agent).
    """
    final_headers = {
        "Host": host,
        "Connection": "keep-alive" if keep_alive else "close",
        "User-Agent": USER_AGENT,
    }
    lowered = {k.lower(): k for k in final_headers}
    for name, value in headers.items():
        final_headers.pop(lowered.get(name.lower(), name), None)
        final_headers[name] = value
    if content_length is not None:
        final_headers["Content-Length"] = str(content_length)

    lines = [f"{method} {target} HTTP/1.1"]
    for name, value in final_headers.items():
        validate_header(name, value)
        lines.append(f"{name}: {value}")

    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def body_framing(method: str, status_code: int, headers: Headers) -> Tuple[str, int]:
    """
    Decide how the response body is delimited (RFC 9112 section 6.3).

    Returns:
        (framing, length) where length is only meaningful for FRAMING_LENGTH.
    """
    if method == "HEAD" or status_code < 200 or status_code in (204, 304):
        return FRAMING_NONE, 0

    if "chunked" in headers.get("Transfer-Encoding", "").lower():
        return FRAMING_CHUNKED, 0

    content_length = headers.get_all("Content-Length")
    if content_length:
        values = {v.strip() for v in ",".join(content_length).split(",")}
        if len(values) != 1:
            raise InvalidResponseError(f"Conflicting Content-Length: {content_length}")
        try:
            length = int(values.pop())
        except ValueError as exc:
            raise InvalidResponseError(
                f"Invalid Content-Length: {content_length}"
            ) from exc
        if length < 0:
            raise InvalidResponseError(f"Invalid Content-Length: {length}")
        return FRAMING_LENGTH, length

    return FRAMING_CLOSE, 0


def is_reusable(version: str, headers: Headers, framing: str) -> bool:
    """Whether the connection can carry another request after this response."""
    if framing == FRAMING_CLOSE:
        return False
    tokens = {t.strip().lower() for t in headers.get("Connection", "").split(",")}
    if "close" in tokens:
        return False
    if version == "HTTP/1.0":
        return "keep-alive" in tokens
    return True


def read_head(fp: IO[bytes], max_size: int = 8192) -> bytes:
    """Read a response head from a buffered socket file, up to the blank line."""
    data = b""
    while True:
        line = fp.readline(max_size + 1)
        if not line:
            if not data:
                raise InvalidResponseError("Server closed connection without response")
            raise InvalidResponseError("Incomplete response: headers delimiter not found")
        data += line
        if len(data) > max_size:
            raise ProtocolError(f"Headers exceed maximum size of {max_size} bytes")
        if line in (b"\r\n", b"\n"):
            return data


async def async_read_head(reader: asyncio.StreamReader, max_size: int = 8192) -> bytes:
    """Async counterpart of :func:`read_head`."""
    data = b""
    while True:
        line = await reader.readline()
        if not line:
            if not data:
                raise InvalidResponseError("Server closed connection without response")
            raise InvalidResponseError("Incomplete response: headers delimiter not found")
        data += line
        if len(data) > max_size:
            raise ProtocolError(f"Headers exceed maximum size of {max_size} bytes")
        if line in (b"\r\n", b"\n"):
            return data
