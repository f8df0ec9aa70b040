"""src/reqhop/transport/connection.py

TCP and TLS connection management module.

This module provides low-level connection handling with support for
TLS encryption and proper error handling for network operations.
"""

import asyncio
import contextlib
import logging
import select
import socket
import ssl
from typing import IO, Any, Optional, Union

from reqhop.exceptions import ConnectTimeout, NetworkError, TlsError
from reqhop.utils.timing import Timeout

__all__ = ["Connection", "AsyncConnection"]

logger = logging.getLogger(__name__)


class Connection:
    """
    Manages TCP and TLS connection creation and lifecycle.

    Attributes:
        host: The target hostname or IP address.
        port: The target port number.
        use_ssl: Whether to use TLS encryption.
        timeout: Connection timeout configuration.
        ssl_context: Context used to wrap the socket when use_ssl is set.
        sock: The underlying socket object.
        fp: Buffered reader over ``sock`` used to parse responses.
    """

    __slots__ = ("host", "port", "use_ssl", "timeout", "ssl_context", "sock", "fp")

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        host: str,
        port: int,
        use_ssl: bool = False,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.use_ssl = use_ssl
        self.timeout = Timeout.coerce(timeout)
        self.ssl_context = ssl_context
        self.sock: Optional[socket.socket] = None
        self.fp: Optional[IO[bytes]] = None

    def open(self) -> socket.socket:
        """
        Open TCP connection with optional TLS encryption.
        """
        try:
            raw_sock = socket.create_connection(
                (self.host, self.port), timeout=self.timeout.connect_timeout
            )
            if self.use_ssl:
                context = self.ssl_context or ssl.create_default_context()
                try:
                    self.sock = context.wrap_socket(raw_sock, server_hostname=self.host)
                except BaseException:
                    raw_sock.close()
                    raise
            else:
                self.sock = raw_sock

            # After connection is established, switch to the read timeout
            self.sock.settimeout(self.timeout.read_timeout)
            self.fp = self.sock.makefile("rb")
            logger.debug(
                "Opened %s connection to %s:%s",
                "TLS" if self.use_ssl else "TCP",
                self.host,
                self.port,
            )
            return self.sock

        except socket.timeout as e:
            raise ConnectTimeout(
                f"Timeout connecting to {self.host}:{self.port}"
            ) from e

        except ssl.SSLError as e:
            raise TlsError(f"TLS Verification Error: {e}") from e

        except OSError as e:
            raise NetworkError(
                f"Connection error to {self.host}:{self.port} - {e}"
            ) from e

    def sendall(self, data: bytes) -> None:
        """Write bytes to the socket, opening it first if needed."""
        sock = self.sock or self.open()
        try:
            sock.sendall(data)
        except OSError as e:
            raise NetworkError(f"Network error during write: {e}") from e

    def close(self) -> None:
        """
        Close the connection if it is open.
        """
        if self.fp:
            with contextlib.suppress(OSError):
                self.fp.close()
            self.fp = None
        if self.sock:
            with contextlib.suppress(OSError):
                self.sock.close()
            self.sock = None

    def __enter__(self) -> "Connection":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def is_usable(self) -> bool:
        """
        Check if the connection appears usable (not closed by peer).

        An idle pooled connection with readable data is either closed or
        holds stale bytes; both make it unusable.
        """
        if not self.sock:
            return False

        try:
            readable, _, _ = select.select([self.sock], [], [], 0)
            return not readable
        except (OSError, ValueError):
            return False


class AsyncConnection:
    """
    Manages asynchronous TCP and TLS connection creation and lifecycle.
    """

    __slots__ = ("host", "port", "use_ssl", "timeout", "ssl_context", "reader", "writer")

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        host: str,
        port: int,
        use_ssl: bool = False,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.use_ssl = use_ssl
        self.timeout = Timeout.coerce(timeout)
        self.ssl_context = ssl_context
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def open(self) -> None:
        """Async open."""
        context = None
        if self.use_ssl:
            context = self.ssl_context or ssl.create_default_context()

        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(
                    self.host,
                    self.port,
                    ssl=context,
                    server_hostname=self.host if context else None,
                ),
                timeout=self.timeout.connect_timeout,
            )
            logger.debug(
                "Opened async %s connection to %s:%s",
                "TLS" if self.use_ssl else "TCP",
                self.host,
                self.port,
            )

        except asyncio.TimeoutError as e:
            raise ConnectTimeout(
                f"Connection to {self.host}:{self.port} timed out"
            ) from e

        except ssl.SSLError as e:
            raise TlsError(f"TLS connection failed: {e}") from e

        except OSError as e:
            raise NetworkError(
                f"Failed to connect to {self.host}:{self.port}: {e}"
            ) from e

    async def sendall(self, data: bytes) -> None:
        """Write bytes and wait for the transport buffer to drain."""
        if self.writer is None:
            await self.open()
        if self.writer is None:
            raise NetworkError("Failed to establish stream connection")
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as e:
            raise NetworkError(f"Network error during write: {e}") from e

    def is_usable(self) -> bool:
        """Check if connection is usable."""
        if not self.writer or not self.reader:
            return False

        return not self.writer.is_closing() and not self.reader.at_eof()

    async def close(self) -> None:
        """Async close."""
        if self.writer:
            self.writer.close()
            with contextlib.suppress(Exception):
                await self.writer.wait_closed()

        self.reader = None
        self.writer = None
