"""src/reqhop/redirects/resolver.py

Location header resolution.
"""

import urllib.parse

__all__ = ["decode_location", "resolve"]


def decode_location(value: str) -> str:
    """
    Re-read a Location value as UTF-8.

    Header octets arrive decoded one byte per character (ISO-8859-1), so a
    UTF-8 location such as ``/utf8-url-áé`` shows up as mojibake. Values
    that are not a valid UTF-8 byte sequence are returned unchanged, which
    also covers values that were already decoded.
    """
    try:
        return value.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return value


def resolve(current_url: str, location: str) -> str:
    """
    Compute the next request URL from a Location header value.

    Absolute locations are used verbatim. Relative ones are resolved
    against ``current_url`` (RFC 3986 section 5.2); the current query string
    is not carried over to a location that has none.

    Example::

        >>> resolve("http://host:8080/finite?a=1", "/")
        'http://host:8080/'
    """
    location = decode_location(location.strip())
    if urllib.parse.urlsplit(location).scheme:
        return location
    return urllib.parse.urljoin(current_url, location)
