"""src/reqhop/transport/exchange.py

Single request/response exchange over a connection.

The transports here implement ``send(request, agent) -> Response`` for one
hop: they never look at redirects. The agent, when given, supplies and
takes back the connection; otherwise a one-shot connection is used.
"""

import asyncio
import functools
import logging
import socket
import ssl
from typing import TYPE_CHECKING, Optional, Tuple

from reqhop.client.response import Response
from reqhop.exceptions import NetworkError, ReadTimeout
from reqhop.http.body import async_read_body, read_body
from reqhop.http.http11 import (
    HttpParser,
    async_read_head,
    body_framing,
    build_request_head,
    is_reusable,
    read_head,
)
from reqhop.transport.agent import Agent, AsyncAgent
from reqhop.transport.connection import AsyncConnection, Connection
from reqhop.transport.tls import create_ssl_context

if TYPE_CHECKING:  # pragma: no cover
    from reqhop.client.options import RequestOptions

__all__ = ["HTTPTransport", "AsyncHTTPTransport"]

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=2)
def _ssl_context(reject_unauthorized: bool) -> ssl.SSLContext:
    return create_ssl_context(reject_unauthorized)


def _prepare(
    request: "RequestOptions", keep_alive: bool
) -> Tuple[bytes, Optional[ssl.SSLContext]]:
    url = request.url
    head = build_request_head(
        request.method,
        url.request_target,
        url.host_header,
        request.headers,
        content_length=len(request.body) if request.body is not None else None,
        keep_alive=keep_alive,
    )
    context = _ssl_context(request.reject_unauthorized) if url.scheme == "https" else None
    logger.debug("%s %s", request.method, url.href)
    return head + (request.body or b""), context


def _build_response(
    request: "RequestOptions", raw_head: bytes
) -> Tuple[Response, str, int]:
    parser = HttpParser(max_header_size=request.max_header_size)
    version, status_code, reason, headers = parser.parse_head(raw_head)
    framing, length = body_framing(request.method, status_code, headers)
    response = Response(
        status_code,
        headers,
        reason=reason,
        http_version=version,
        method=request.method,
        url=request.url.href,
    )
    return response, framing, length


class HTTPTransport:
    """
    Blocking transport over plain sockets.
    """

    def send(
        self, request: "RequestOptions", agent: Optional[Agent] = None
    ) -> Response:
        """
        Send one request and read the whole response.

        Raises:
            TransportError: On connection, TLS, timeout or framing failures.
        """
        url = request.url
        keep_alive = agent is not None and agent.keep_alive
        data, context = _prepare(request, keep_alive)

        conn: Connection
        if agent is not None:
            conn = agent.get_connection(
                url.host,
                url.effective_port,
                context is not None,
                timeout=request.timeout,
                ssl_context=context,
            )
        else:
            conn = Connection(
                url.host,
                url.effective_port,
                use_ssl=context is not None,
                timeout=request.timeout,
                ssl_context=context,
            )

        reusable = False
        try:
            conn.sendall(data)
            response, reusable = self._read_response(conn, request)
            return response
        finally:
            # Any failure, including an interrupt, closes the connection.
            if agent is None:
                conn.close()
            elif reusable:
                agent.put_connection(conn)
            else:
                agent.discard_connection(conn)

    @staticmethod
    def _read_response(
        conn: Connection, request: "RequestOptions"
    ) -> Tuple[Response, bool]:
        fp = conn.fp
        if fp is None:
            raise NetworkError("Connection is not open")
        try:
            raw_head = read_head(fp, request.max_header_size)
            response, framing, length = _build_response(request, raw_head)
            response.body = read_body(fp, framing, length, request.max_body_size)
        except socket.timeout as exc:
            raise ReadTimeout(f"Read timed out: {exc}") from exc
        except OSError as exc:
            raise NetworkError(f"Network error during read: {exc}") from exc

        return response, is_reusable(response.http_version, response.headers, framing)


class AsyncHTTPTransport:
    """
    Asyncio transport over stream reader/writer pairs.
    """

    async def send(
        self, request: "RequestOptions", agent: Optional[AsyncAgent] = None
    ) -> Response:
        """
        Send one request and read the whole response.

        The read timeout bounds reading the complete response. If the task
        is cancelled, the connection is closed, never pooled.
        """
        url = request.url
        keep_alive = agent is not None and agent.keep_alive
        data, context = _prepare(request, keep_alive)

        conn: AsyncConnection
        if agent is not None:
            conn = await agent.get_connection(
                url.host,
                url.effective_port,
                context is not None,
                timeout=request.timeout,
                ssl_context=context,
            )
        else:
            conn = AsyncConnection(
                url.host,
                url.effective_port,
                use_ssl=context is not None,
                timeout=request.timeout,
                ssl_context=context,
            )

        reusable = False
        try:
            await conn.sendall(data)
            response, reusable = await self._read_response(conn, request)
            return response
        finally:
            if agent is None:
                await conn.close()
            elif reusable:
                await agent.put_connection(conn)
            else:
                await agent.discard_connection(conn)

    @staticmethod
    async def _read_response(
        conn: AsyncConnection, request: "RequestOptions"
    ) -> Tuple[Response, bool]:
        reader = conn.reader
        if reader is None:
            raise NetworkError("Failed to establish stream connection")

        async def _read() -> Tuple[Response, str]:
            raw_head = await async_read_head(reader, request.max_header_size)
            response, framing, length = _build_response(request, raw_head)
            response.body = await async_read_body(
                reader, framing, length, request.max_body_size
            )
            return response, framing

        try:
            response, framing = await asyncio.wait_for(
                _read(), timeout=request.timeout.read_timeout
            )
        except asyncio.TimeoutError as exc:
            raise ReadTimeout(f"Read timed out: {exc}") from exc
        except OSError as exc:
            raise NetworkError(f"Network error during read: {exc}") from exc

        return response, is_reusable(response.http_version, response.headers, framing)
