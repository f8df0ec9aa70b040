"""src/reqhop/transport/agent.py

Connection agents.

An agent owns a pool of reusable TCP/TLS connections and is supplied by the
caller, either once for every scheme or per scheme. The redirect core only
chooses which agent a hop uses; pooling and keep-alive live here.
"""

import asyncio
import logging
import ssl
import threading
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple, Union

from reqhop.transport.connection import AsyncConnection, Connection
from reqhop.utils.timing import Timeout

__all__ = ["Agent", "AsyncAgent"]

logger = logging.getLogger(__name__)

PoolKey = Tuple[str, int, bool, bool]


def _verifies(context: Optional[ssl.SSLContext]) -> bool:
    return context is None or context.verify_mode != ssl.CERT_NONE


def _key(conn: Union[Connection, AsyncConnection]) -> PoolKey:
    # Verified and unverified TLS connections never share a slot.
    return (conn.host, conn.port, conn.use_ssl, _verifies(conn.ssl_context))


class Agent:
    """
    Thread-safe pool of reusable open connections.

    Connections are cached per (host, port, tls, verified) and handed out
    LIFO. At most ``max_sockets`` connections per key are in use or idle at
    any time; callers block until a slot frees up.

    Attributes:
        keep_alive: Keep connections open between requests.
        max_sockets: Connection limit per key.
        max_idle_time: Seconds an idle connection stays reusable.
        requests: Number of requests this agent has served.
    """

    __slots__ = (
        "_pool",
        "_lock",
        "_semaphores",
        "keep_alive",
        "max_sockets",
        "max_idle_time",
        "requests",
    )

    def __init__(
        self,
        keep_alive: bool = True,
        max_sockets: int = 10,
        max_idle_time: float = 30.0,
    ) -> None:
        self._pool: Dict[PoolKey, Deque[Tuple[Connection, float]]] = {}
        self._semaphores: Dict[PoolKey, threading.Semaphore] = {}
        self._lock = threading.Lock()
        self.keep_alive = keep_alive
        self.max_sockets = max_sockets
        self.max_idle_time = max_idle_time
        self.requests = 0

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} keep_alive={self.keep_alive} "
            f"requests={self.requests}>"
        )

    # pylint: disable=too-many-arguments
    def get_connection(
        self,
        host: str,
        port: int,
        use_ssl: bool,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> Connection:
        """
        Get an idle connection or open a new one, recording the request.
        Blocks if max_sockets is reached until a connection is available.
        """
        key = (host, port, use_ssl, _verifies(ssl_context))

        with self._lock:
            self.requests += 1
            if key not in self._semaphores:
                self._semaphores[key] = threading.Semaphore(self.max_sockets)

        self._semaphores[key].acquire()

        try:
            with self._lock:
                connections = self._pool.get(key)
                while connections:
                    conn, last_used = connections.pop()
                    if (
                        time.monotonic() - last_used < self.max_idle_time
                        and conn.is_usable()
                    ):
                        logger.debug("Reusing connection to %s:%s", host, port)
                        return conn
                    conn.close()

            conn = Connection(
                host, port, use_ssl, timeout=timeout, ssl_context=ssl_context
            )
            conn.open()
            return conn

        except BaseException:
            self._semaphores[key].release()
            raise

    def put_connection(self, conn: Connection) -> None:
        """
        Return a connection after a complete response.
        Closed, dead, or non-keep-alive connections are discarded.
        """
        if not self.keep_alive or not conn.sock or not conn.is_usable():
            self.discard_connection(conn)
            return

        key = _key(conn)
        with self._lock:
            queue = self._pool.setdefault(key, deque())
            if len(queue) >= self.max_sockets:
                oldest_conn, _ = queue.popleft()
                oldest_conn.close()
            queue.append((conn, time.monotonic()))

        self._release(key)

    def discard_connection(self, conn: Connection) -> None:
        """Close a connection and release its slot."""
        conn.close()
        self._release(_key(conn))

    def _release(self, key: PoolKey) -> None:
        semaphore = self._semaphores.get(key)
        if semaphore is not None:
            semaphore.release()

    def close(self) -> None:
        """
        Close all idle connections.
        """
        with self._lock:
            for connections in self._pool.values():
                for conn, _ in connections:
                    conn.close()
            self._pool.clear()


class AsyncAgent:
    """
    Pool of reusable asynchronous connections.

    Same contract as :class:`Agent`; safe for concurrent tasks on a single
    event loop.
    """

    __slots__ = (
        "_pool",
        "_semaphores",
        "keep_alive",
        "max_sockets",
        "max_idle_time",
        "requests",
    )

    def __init__(
        self,
        keep_alive: bool = True,
        max_sockets: int = 10,
        max_idle_time: float = 30.0,
    ) -> None:
        self._pool: Dict[PoolKey, List[Tuple[AsyncConnection, float]]] = {}
        self._semaphores: Dict[PoolKey, asyncio.Semaphore] = {}
        self.keep_alive = keep_alive
        self.max_sockets = max_sockets
        self.max_idle_time = max_idle_time
        self.requests = 0

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} keep_alive={self.keep_alive} "
            f"requests={self.requests}>"
        )

    # pylint: disable=too-many-arguments
    async def get_connection(
        self,
        host: str,
        port: int,
        use_ssl: bool,
        timeout: Union[float, Timeout, None] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> AsyncConnection:
        """
        Returns an idle connection or opens a new one, recording the request.
        """
        key = (host, port, use_ssl, _verifies(ssl_context))
        self.requests += 1

        if key not in self._semaphores:
            self._semaphores[key] = asyncio.Semaphore(self.max_sockets)

        await self._semaphores[key].acquire()

        try:
            connections = self._pool.get(key, [])
            while connections:
                conn, last_used = connections.pop()
                if time.monotonic() - last_used < self.max_idle_time and conn.is_usable():
                    logger.debug("Reusing async connection to %s:%s", host, port)
                    return conn
                await conn.close()

            conn = AsyncConnection(
                host, port, use_ssl, timeout=timeout, ssl_context=ssl_context
            )
            await conn.open()
            return conn

        except BaseException:
            self._semaphores[key].release()
            raise

    async def put_connection(self, conn: AsyncConnection) -> None:
        """
        Returns a connection to the pool for reuse.
        """
        if not self.keep_alive or not conn.is_usable():
            await self.discard_connection(conn)
            return

        key = _key(conn)
        connections = self._pool.setdefault(key, [])
        if len(connections) >= self.max_sockets:
            oldest_conn, _ = connections.pop(0)
            await oldest_conn.close()
        connections.append((conn, time.monotonic()))

        self._release(key)

    async def discard_connection(self, conn: AsyncConnection) -> None:
        """Discard async connection and release slot."""
        await conn.close()
        self._release(_key(conn))

    def _release(self, key: PoolKey) -> None:
        semaphore = self._semaphores.get(key)
        if semaphore is not None:
            semaphore.release()

    async def close(self) -> None:
        """
        Closes all idle connections.
        """
        for connections in self._pool.values():
            for conn, _ in connections:
                await conn.close()
        self._pool.clear()
