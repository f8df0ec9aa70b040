"""src/reqhop/transport/__init__.py

Transport layer module for Reqhop.

This module provides low-level connection management: TCP connections, TLS
contexts, keep-alive agents and the single-hop exchange used by the
redirect driver, for both synchronous and asynchronous operation.
"""

from .agent import Agent, AsyncAgent
from .connection import AsyncConnection, Connection
from .exchange import AsyncHTTPTransport, HTTPTransport
from .tls import create_ssl_context

__all__ = [
    "Agent",
    "AsyncAgent",
    "Connection",
    "AsyncConnection",
    "HTTPTransport",
    "AsyncHTTPTransport",
    "create_ssl_context",
]
