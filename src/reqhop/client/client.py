"""src/reqhop/client/client.py

HTTP client with persistent defaults and keep-alive agents.

A client carries options shared by many calls (base URL, headers, agents,
redirect and TLS settings). Each call still runs its own redirect chain and
shares nothing with other calls except the agents.
"""

import urllib.parse
from typing import Any, Dict, Mapping, Optional, Union

from reqhop.client.options import DEFAULT_MAX_REDIRECTS, RequestOptions
from reqhop.client.response import Response
from reqhop.redirects.driver import AsyncRedirectDriver, RedirectDriver
from reqhop.transport.agent import Agent, AsyncAgent
from reqhop.transport.exchange import AsyncHTTPTransport, HTTPTransport
from reqhop.utils.timing import DEFAULT_TIMEOUT, Timeout
from reqhop.utils.validators import validate_url

__all__ = ["Client", "AsyncClient"]

# pylint: disable=too-many-instance-attributes,too-many-arguments


class _BaseClient:
    """Option merging shared by Client and AsyncClient."""

    __slots__ = ("base_url", "headers", "agent", "defaults", "_owned_agents")

    def __init__(
        self,
        *,
        base_url: Optional[str],
        headers: Optional[Mapping[str, str]],
        agent: Any,
        follow_redirect: bool,
        max_redirects: int,
        reject_unauthorized: bool,
        timeout: Union[float, Timeout, None],
    ) -> None:
        self.base_url = base_url
        self.headers: Dict[str, str] = dict(headers or {})
        self.agent = agent
        self.defaults: Dict[str, Any] = {
            "follow_redirect": follow_redirect,
            "max_redirects": max_redirects,
            "reject_unauthorized": reject_unauthorized,
            "timeout": timeout,
        }
        self._owned_agents: list = []

    def _resolve_url(self, url: str) -> str:
        """Resolve URL against base_url unless it is an absolute http(s) URL."""
        if self.base_url and not validate_url(url):
            return urllib.parse.urljoin(self.base_url, url)
        return url

    def _build(self, method: Optional[str], url: str, options: Dict[str, Any]) -> RequestOptions:
        merged = {**self.defaults, "agent": self.agent, **options}
        merged["headers"] = {**self.headers, **(options.get("headers") or {})}
        return RequestOptions.build(self._resolve_url(url), method=method, **merged)


class Client(_BaseClient):
    """
    Blocking HTTP client.

    Without an explicit ``agent`` the client creates one keep-alive
    :class:`Agent` per scheme and closes them in :meth:`close`. A caller
    supplied agent (single or ``{"http": ..., "https": ...}``) is left open.

    Example::

        with Client(base_url="http://localhost:8080") as client:
            response = client.get("/finite")
            response.url, response.request_url
    """

    __slots__ = ("_driver",)

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        agent: Any = None,
        follow_redirect: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        reject_unauthorized: bool = True,
        timeout: Union[float, Timeout, None] = DEFAULT_TIMEOUT,
        transport: Optional[HTTPTransport] = None,
    ) -> None:
        if agent is None:
            agent = {"http": Agent(), "https": Agent()}
            owned = list(agent.values())
        else:
            owned = []
        super().__init__(
            base_url=base_url,
            headers=headers,
            agent=agent,
            follow_redirect=follow_redirect,
            max_redirects=max_redirects,
            reject_unauthorized=reject_unauthorized,
            timeout=timeout,
        )
        self._owned_agents = owned
        self._driver = RedirectDriver(transport)

    def request(self, method: Optional[str], url: str, **options: Any) -> Response:
        """
        Send a request with the client's defaults under ``options``.

        Per-call headers are merged over the client's headers.
        """
        return self._driver.execute(self._build(method, url, options))

    def get(self, url: str, **options: Any) -> Response:
        """Send a GET request."""
        return self.request("GET", url, **options)

    def head(self, url: str, **options: Any) -> Response:
        """Send a HEAD request."""
        return self.request("HEAD", url, **options)

    def post(self, url: str, **options: Any) -> Response:
        """Send a POST request."""
        return self.request("POST", url, **options)

    def put(self, url: str, **options: Any) -> Response:
        """Send a PUT request."""
        return self.request("PUT", url, **options)

    def patch(self, url: str, **options: Any) -> Response:
        """Send a PATCH request."""
        return self.request("PATCH", url, **options)

    def delete(self, url: str, **options: Any) -> Response:
        """Send a DELETE request."""
        return self.request("DELETE", url, **options)

    def options(self, url: str, **options: Any) -> Response:
        """Send an OPTIONS request."""
        return self.request("OPTIONS", url, **options)

    def close(self) -> None:
        """
        Close the agents this client created.
        """
        for agent in self._owned_agents:
            agent.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncClient(_BaseClient):
    """
    Asynchronous HTTP client.

    Same behaviour as :class:`Client`, with :class:`AsyncAgent` instances.
    """

    __slots__ = ("_driver",)

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        agent: Any = None,
        follow_redirect: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        reject_unauthorized: bool = True,
        timeout: Union[float, Timeout, None] = DEFAULT_TIMEOUT,
        transport: Optional[AsyncHTTPTransport] = None,
    ) -> None:
        if agent is None:
            agent = {"http": AsyncAgent(), "https": AsyncAgent()}
            owned = list(agent.values())
        else:
            owned = []
        super().__init__(
            base_url=base_url,
            headers=headers,
            agent=agent,
            follow_redirect=follow_redirect,
            max_redirects=max_redirects,
            reject_unauthorized=reject_unauthorized,
            timeout=timeout,
        )
        self._owned_agents = owned
        self._driver = AsyncRedirectDriver(transport)

    async def request(
        self, method: Optional[str], url: str, **options: Any
    ) -> Response:
        """Async counterpart of :meth:`Client.request`."""
        return await self._driver.execute(self._build(method, url, options))

    async def get(self, url: str, **options: Any) -> Response:
        """Send an async GET request."""
        return await self.request("GET", url, **options)

    async def head(self, url: str, **options: Any) -> Response:
        """Send an async HEAD request."""
        return await self.request("HEAD", url, **options)

    async def post(self, url: str, **options: Any) -> Response:
        """Send an async POST request."""
        return await self.request("POST", url, **options)

    async def put(self, url: str, **options: Any) -> Response:
        """Send an async PUT request."""
        return await self.request("PUT", url, **options)

    async def patch(self, url: str, **options: Any) -> Response:
        """Send an async PATCH request."""
        return await self.request("PATCH", url, **options)

    async def delete(self, url: str, **options: Any) -> Response:
        """Send an async DELETE request."""
        return await self.request("DELETE", url, **options)

    async def options(self, url: str, **options: Any) -> Response:
        """Send an async OPTIONS request."""
        return await self.request("OPTIONS", url, **options)

    async def close(self) -> None:
        """Close the agents this client created."""
        for agent in self._owned_agents:
            await agent.close()

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
