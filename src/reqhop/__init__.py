"""src/reqhop/__init__.py

Reqhop - HTTP client built around careful redirect handling.

Reqhop follows redirects hop by hop: it resolves relative and UTF-8
``Location`` values, switches connection agents when a redirect crosses
between HTTP and HTTPS, refuses to replay non-GET/HEAD requests, and stops
after a bounded number of redirects. It is built on Python's standard
library only and offers synchronous and asynchronous interfaces.

Key Features:
    - Zero external dependencies
    - Sync and async APIs with the same redirect semantics
    - Per-scheme keep-alive agents
    - Final ``url``, original ``request_url`` and full redirect chain on
      every response
    - Full type hints (PEP 561)

Example:
    Sync usage::

        import reqhop

        response = reqhop.Request.get("http://example.com/old")
        print(response.url, response.request_url, response.text())

    Async usage with per-scheme agents::

        import asyncio
        from reqhop import AsyncAgent, AsyncRequest

        async def main():
            agents = {"http": AsyncAgent(), "https": AsyncAgent()}
            response = await AsyncRequest.get(
                "https://example.com/to-http", agent=agents
            )
            print(response.redirect_urls)

        asyncio.run(main())
"""

import logging

from reqhop.client.client import AsyncClient, Client
from reqhop.client.options import RequestOptions
from reqhop.client.request import AsyncRequest, Request
from reqhop.client.response import Response
from reqhop.exceptions import (
    HTTPError,
    IneligibleMethodError,
    LoopAbortError,
    ReqhopError,
    RequestError,
    TransportError,
)
from reqhop.transport.agent import Agent, AsyncAgent
from reqhop.utils.timing import Timeout
from reqhop.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Request",
    "AsyncRequest",
    "Client",
    "AsyncClient",
    "RequestOptions",
    "Response",
    "Agent",
    "AsyncAgent",
    "Timeout",
    "ReqhopError",
    "RequestError",
    "TransportError",
    "HTTPError",
    "IneligibleMethodError",
    "LoopAbortError",
    "__version__",
]
