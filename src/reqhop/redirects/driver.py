"""src/reqhop/redirects/driver.py

Redirect loop driver.

Runs one logical call as a sequence of hops: send, ask the policy, resolve
the Location, pick the agent for the next scheme, send again. The loop is an
explicit state machine bounded by ``max_redirects``; transport errors are
not part of it and propagate as they are.
"""

import enum
import logging
from typing import Any, List, Optional

from reqhop.client.options import RequestOptions
from reqhop.client.response import Response
from reqhop.exceptions import (
    IneligibleMethodError,
    LoopAbortError,
    RequestError,
    ReqhopError,
)
from reqhop.http.url import URL
from reqhop.redirects.agents import select_agent
from reqhop.redirects.policy import RedirectAction, RedirectPolicy
from reqhop.redirects.resolver import resolve
from reqhop.transport.exchange import AsyncHTTPTransport, HTTPTransport

__all__ = ["HopState", "RedirectDriver", "AsyncRedirectDriver"]

logger = logging.getLogger(__name__)


class HopState(enum.Enum):
    """States of a redirect chain."""

    ISSUING = "issuing"
    DONE = "done"
    FAILED = "failed"


class _Chain:
    """Mutable state of one call; never shared and never kept after it."""

    __slots__ = ("request", "policy", "urls", "history", "state", "error")

    def __init__(self, request: RequestOptions, policy: RedirectPolicy) -> None:
        self.request = request
        self.policy = policy
        self.urls: List[str] = [request.url.href]
        self.history: List[Response] = []
        self.state = HopState.ISSUING
        self.error: Optional[ReqhopError] = None

    def fail(self, error: ReqhopError) -> None:
        self.state = HopState.FAILED
        self.error = error


class _BaseRedirectDriver:
    """Hop-independent logic shared by the sync and async drivers."""

    def __init__(self, policy: Optional[RedirectPolicy] = None) -> None:
        self.policy = policy

    def _start(self, request: RequestOptions) -> _Chain:
        policy = self.policy or RedirectPolicy(request.follow_redirect)
        return _Chain(request, policy)

    @staticmethod
    def _agent_for(chain: _Chain) -> Any:
        # Re-evaluated on every hop so a scheme change switches agents.
        return select_agent(chain.request.agent, chain.request.url.scheme)

    @staticmethod
    def _advance(chain: _Chain, response: Response) -> None:
        """Apply the policy to a hop's response and move the state machine."""
        request = chain.request
        location: str = response.headers.get("Location", "")
        decision = chain.policy.decide(
            response.status_code, request.method, request.has_body, location
        )

        if decision.action is RedirectAction.STOP:
            chain.state = HopState.DONE
            return

        if decision.action is RedirectAction.REJECT:
            chain.fail(
                IneligibleMethodError(
                    response.status_code,
                    path=request.url.request_target,
                    method=request.method,
                    url=request.url.href,
                    headers=response.headers,
                    reason=response.reason,
                )
            )
            return

        if len(chain.urls) > request.max_redirects:
            chain.fail(LoopAbortError(request.max_redirects, list(chain.urls)))
            return

        try:
            next_url = URL.parse(resolve(request.url.href, location))
        except ValueError as exc:
            chain.fail(RequestError(f"Invalid redirect location {location!r}: {exc}"))
            return

        logger.debug(
            "Redirect %d (%d): %s -> %s",
            len(chain.urls),
            response.status_code,
            request.url.href,
            next_url.href,
        )
        chain.urls.append(next_url.href)
        chain.history.append(response)
        chain.request = request.redirect_to(
            next_url,
            method=decision.next_method,
            drop_body=decision.drop_body,
        )

    @staticmethod
    def _finish(chain: _Chain, response: Response) -> Response:
        if chain.error is not None:
            raise chain.error

        response.url = chain.urls[-1]
        response.request_url = chain.urls[0]
        response.redirect_urls = chain.urls[1:]
        response.history = list(chain.history)
        return response


class RedirectDriver(_BaseRedirectDriver):
    """
    Blocking redirect driver.

    Example::

        driver = RedirectDriver()
        response = driver.execute(RequestOptions.build("http://example.com/old"))
        response.url          # final URL
        response.request_url  # "http://example.com/old"
    """

    def __init__(
        self,
        transport: Optional[HTTPTransport] = None,
        policy: Optional[RedirectPolicy] = None,
    ) -> None:
        super().__init__(policy)
        self.transport = transport or HTTPTransport()

    def execute(self, request: RequestOptions) -> Response:
        """
        Run the redirect chain for ``request``.

        Raises:
            IneligibleMethodError: Redirect-class status for a non-GET/HEAD method.
            LoopAbortError: More than ``max_redirects`` redirects.
            TransportError: Any connection, TLS or parse failure.
        """
        chain = self._start(request)
        while True:
            response = self.transport.send(chain.request, self._agent_for(chain))
            self._advance(chain, response)
            if chain.state is not HopState.ISSUING:
                return self._finish(chain, response)


class AsyncRedirectDriver(_BaseRedirectDriver):
    """
    Asyncio redirect driver.

    Each ``send`` is a suspension point. Cancelling the task stops the
    chain: no further hop is issued and the in-flight connection is closed
    by the transport.
    """

    def __init__(
        self,
        transport: Optional[AsyncHTTPTransport] = None,
        policy: Optional[RedirectPolicy] = None,
    ) -> None:
        super().__init__(policy)
        self.transport = transport or AsyncHTTPTransport()

    async def execute(self, request: RequestOptions) -> Response:
        """Async counterpart of :meth:`RedirectDriver.execute`."""
        chain = self._start(request)
        while True:
            response = await self.transport.send(
                chain.request, self._agent_for(chain)
            )
            self._advance(chain, response)
            if chain.state is not HopState.ISSUING:
                return self._finish(chain, response)
