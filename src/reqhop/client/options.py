"""src/reqhop/client/options.py

Request descriptor: per-call configuration normalized into one immutable
object. The redirect driver derives a new descriptor for every hop.
"""

import dataclasses
import urllib.parse
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from reqhop.http.headers import strip_headers
from reqhop.http.url import URL
from reqhop.utils.timing import DEFAULT_TIMEOUT, Timeout

__all__ = [
    "RequestOptions",
    "DEFAULT_MAX_REDIRECTS",
    "CREDENTIAL_HEADERS",
]

DEFAULT_MAX_REDIRECTS = 10

# Removed from a redirect that leaves the original origin.
CREDENTIAL_HEADERS = ("Authorization", "Cookie", "Proxy-Authorization")

QueryType = Union[str, Mapping[str, Any], Iterable[Tuple[str, Any]]]
BodyType = Union[str, bytes, bytearray]


def _encode_query(query: QueryType) -> str:
    if isinstance(query, str):
        return query.lstrip("?")
    return urllib.parse.urlencode(query, doseq=True)


def _encode_body(body: Optional[BodyType]) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    raise TypeError(f"Unsupported body type: {type(body).__name__}")


def _normalize_method(method: str) -> str:
    normalized = method.strip().upper()
    if not normalized or any(c.isspace() or ord(c) < 0x21 for c in normalized):
        raise ValueError(f"Invalid HTTP method: {method!r}")
    return normalized


@dataclasses.dataclass(frozen=True)
class RequestOptions:
    """
    Immutable description of one request hop.

    Build it with :meth:`build`, which applies defaults and the
    ``query``/``hostname``/``port``/``path`` overrides once.

    Attributes:
        method: Uppercase HTTP method.
        url: Target URL of this hop.
        headers: Request headers (caller's names and casing).
        body: Encoded request body, or None.
        agent: Single agent, ``{"http": agent, "https": agent}`` mapping,
            or None for a one-shot connection per hop.
        follow_redirect: Follow redirect-class responses.
        max_redirects: Redirects allowed before the chain is aborted.
        reject_unauthorized: Verify TLS certificates and hostnames.
        timeout: Connect/read timeouts for each hop.
        max_header_size: Limit for a response head, in bytes.
        max_body_size: Limit for a response body, in bytes (None = unbounded).
    """

    # pylint: disable=too-many-instance-attributes
    method: str
    url: URL
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)
    body: Optional[bytes] = None
    agent: Any = None
    follow_redirect: bool = True
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    reject_unauthorized: bool = True
    timeout: Timeout = dataclasses.field(
        default_factory=lambda: Timeout.from_float(DEFAULT_TIMEOUT)
    )
    max_header_size: int = 8192
    max_body_size: Optional[int] = None

    @classmethod
    # pylint: disable=too-many-arguments,too-many-locals
    def build(
        cls,
        url: Union[str, URL],
        *,
        method: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[BodyType] = None,
        query: Optional[QueryType] = None,
        hostname: Optional[str] = None,
        port: Optional[int] = None,
        path: Optional[str] = None,
        agent: Any = None,
        follow_redirect: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        reject_unauthorized: bool = True,
        timeout: Union[float, Timeout, None] = DEFAULT_TIMEOUT,
        max_header_size: int = 8192,
        max_body_size: Optional[int] = None,
    ) -> "RequestOptions":
        """
        Normalize caller options into a descriptor for the first hop.

        A body without an explicit method makes the request a POST.

        Raises:
            ValueError: On an invalid URL, method or redirect limit.
        """
        target = url if isinstance(url, URL) else URL.parse(url)

        changes: Dict[str, Any] = {}
        if hostname is not None:
            changes["host"] = hostname.lower()
        if port is not None:
            changes["port"] = int(port)
        if path is not None:
            new_path, _, new_query = path.partition("?")
            changes["path"] = new_path or "/"
            changes["query"] = new_query
        if query is not None:
            changes["query"] = _encode_query(query)
        if changes:
            target = target.replace(**changes)

        encoded_body = _encode_body(body)
        if method is None:
            method = "POST" if encoded_body is not None else "GET"

        if max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {max_redirects}")

        return cls(
            method=_normalize_method(method),
            url=target,
            headers=dict(headers or {}),
            body=encoded_body,
            agent=agent,
            follow_redirect=follow_redirect,
            max_redirects=max_redirects,
            reject_unauthorized=reject_unauthorized,
            timeout=Timeout.coerce(timeout),
            max_header_size=max_header_size,
            max_body_size=max_body_size,
        )

    @property
    def has_body(self) -> bool:
        """Whether a body is sent with this hop."""
        return self.body is not None

    def redirect_to(
        self,
        url: URL,
        *,
        method: Optional[str] = None,
        drop_body: bool = False,
    ) -> "RequestOptions":
        """
        Derive the descriptor for the next hop.

        Credentials are dropped when ``url`` leaves the current origin;
        Content-* headers go with the body when it is dropped.
        """
        headers: Mapping[str, str] = self.headers
        if url.origin != self.url.origin:
            headers = strip_headers(headers, CREDENTIAL_HEADERS)
        if drop_body:
            headers = {
                k: v for k, v in headers.items() if not k.lower().startswith("content-")
            }
        return dataclasses.replace(
            self,
            url=url,
            method=method or self.method,
            headers=dict(headers),
            body=None if drop_body else self.body,
        )
