"""src/reqhop/http/url.py

URL builder and parser for Reqhop.
"""

import urllib.parse
from typing import Optional, Tuple

from reqhop.utils.validators import SUPPORTED_SCHEMES

__all__ = ["URL", "DEFAULT_PORTS"]

DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters left as-is when writing the request target; "%" keeps
# existing escapes intact so a target is never encoded twice.
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"


class URL:
    """
    Parsed absolute http(s) URL.

    Attributes:
        scheme: Lowercase scheme, ``http`` or ``https``.
        host: Lowercase hostname (IPv6 literals without brackets).
        port: Explicit port, or None when the URL did not carry one.
        path: Decoded path, always starting with ``/``.
        query: Raw query string without the leading ``?``.
    """

    __slots__ = ("scheme", "host", "port", "path", "query")

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        scheme: str,
        host: str,
        port: Optional[int] = None,
        path: str = "/",
        query: str = "",
    ) -> None:
        self.scheme = scheme
        self.host = host
        self.port = port
        self.path = path or "/"
        self.query = query

    @classmethod
    def parse(cls, url: str) -> "URL":
        """
        Parse an absolute URL string.

        Raises:
            ValueError: If the scheme is not http(s), the host is missing,
                or the port is not a valid number.
        """
        parsed = urllib.parse.urlsplit(url.strip())
        scheme = parsed.scheme.lower()
        if scheme not in SUPPORTED_SCHEMES:
            raise ValueError(f"Unsupported URL scheme: {url}")
        if not parsed.hostname:
            raise ValueError(f"Invalid URL: could not determine host: {url}")
        try:
            port = parsed.port
        except ValueError as exc:
            raise ValueError(f"Invalid port in URL: {url}") from exc
        return cls(scheme, parsed.hostname, port, parsed.path, parsed.query)

    @property
    def effective_port(self) -> int:
        """Port to connect to, falling back to the scheme default."""
        return self.port or DEFAULT_PORTS[self.scheme]

    @property
    def origin(self) -> Tuple[str, str, int]:
        """(scheme, host, port) triple used to compare hops."""
        return (self.scheme, self.host, self.effective_port)

    @property
    def netloc(self) -> str:
        """Host and explicit port as written in the URL."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is not None:
            return f"{host}:{self.port}"
        return host

    @property
    def host_header(self) -> str:
        """Value for the Host request header."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is not None and self.port != DEFAULT_PORTS[self.scheme]:
            return f"{host}:{self.port}"
        return host

    @property
    def request_target(self) -> str:
        """Percent-encoded path and query for the request line."""
        target = urllib.parse.quote(self.path, safe=_PATH_SAFE)
        if self.query:
            target += "?" + urllib.parse.quote(self.query, safe=_QUERY_SAFE)
        return target

    @property
    def href(self) -> str:
        """Full URL string, unencoded."""
        url = f"{self.scheme}://{self.netloc}{self.path}"
        if self.query:
            url += f"?{self.query}"
        return url

    def replace(self, **changes: object) -> "URL":
        """Return a copy with the given attributes replaced."""
        values = {name: getattr(self, name) for name in self.__slots__}
        values.update(changes)
        return URL(**values)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return self.href

    def __repr__(self) -> str:
        return f"URL({self.href!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URL):
            return NotImplemented
        return self.href == other.href

    def __hash__(self) -> int:
        return hash(self.href)
