"""src/reqhop/client/__init__.py"""

from .client import AsyncClient, Client
from .options import RequestOptions
from .request import AsyncRequest, Request
from .response import Response

__all__ = [
    "Client",
    "AsyncClient",
    "Request",
    "AsyncRequest",
    "RequestOptions",
    "Response",
]
