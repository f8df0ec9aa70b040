"""src/reqhop/client/request.py

Stateless request entry points.

Each call builds a fresh :class:`RequestOptions` and runs it through a
redirect driver; nothing is kept between calls.
"""

from typing import Any, Optional, Union

from reqhop.client.options import RequestOptions
from reqhop.client.response import Response
from reqhop.http.url import URL
from reqhop.redirects.driver import AsyncRedirectDriver, RedirectDriver
from reqhop.transport.exchange import AsyncHTTPTransport, HTTPTransport

__all__ = ["Request", "AsyncRequest"]


class Request:
    """
    Blocking HTTP requests with redirect handling.

    Options accepted by every method (see :meth:`RequestOptions.build`):
    ``headers``, ``body``, ``query``, ``hostname``, ``port``, ``path``,
    ``agent``, ``follow_redirect``, ``max_redirects``,
    ``reject_unauthorized``, ``timeout``, ``max_header_size``,
    ``max_body_size``.

    Example::

        response = Request.get("http://example.com/old")
        response.url, response.request_url, response.text()
    """

    @classmethod
    def send(
        cls,
        method: Optional[str],
        url: Union[str, URL],
        *,
        transport: Optional[HTTPTransport] = None,
        **options: Any,
    ) -> Response:
        """
        Send a request, following redirects as configured.

        ``method=None`` picks POST when a body is given and GET otherwise.
        """
        request = RequestOptions.build(url, method=method, **options)
        return RedirectDriver(transport).execute(request)

    @classmethod
    def get(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a GET request."""
        return cls.send("GET", url, **options)

    @classmethod
    def head(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a HEAD request."""
        return cls.send("HEAD", url, **options)

    @classmethod
    def post(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a POST request."""
        return cls.send("POST", url, **options)

    @classmethod
    def put(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a PUT request."""
        return cls.send("PUT", url, **options)

    @classmethod
    def patch(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a PATCH request."""
        return cls.send("PATCH", url, **options)

    @classmethod
    def delete(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send a DELETE request."""
        return cls.send("DELETE", url, **options)

    @classmethod
    def options(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an OPTIONS request."""
        return cls.send("OPTIONS", url, **options)


class AsyncRequest:
    """
    Asynchronous HTTP requests with redirect handling.
    """

    @classmethod
    async def send(
        cls,
        method: Optional[str],
        url: Union[str, URL],
        *,
        transport: Optional[AsyncHTTPTransport] = None,
        **options: Any,
    ) -> Response:
        """Async counterpart of :meth:`Request.send`."""
        request = RequestOptions.build(url, method=method, **options)
        return await AsyncRedirectDriver(transport).execute(request)

    @classmethod
    async def get(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async GET request."""
        return await cls.send("GET", url, **options)

    @classmethod
    async def head(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async HEAD request."""
        return await cls.send("HEAD", url, **options)

    @classmethod
    async def post(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async POST request."""
        return await cls.send("POST", url, **options)

    @classmethod
    async def put(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async PUT request."""
        return await cls.send("PUT", url, **options)

    @classmethod
    async def patch(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async PATCH request."""
        return await cls.send("PATCH", url, **options)

    @classmethod
    async def delete(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async DELETE request."""
        return await cls.send("DELETE", url, **options)

    @classmethod
    async def options(cls, url: Union[str, URL], **options: Any) -> Response:
        """Send an async OPTIONS request."""
        return await cls.send("OPTIONS", url, **options)
