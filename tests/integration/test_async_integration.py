"""Integration tests for asynchronous redirect handling.

These tests use the local HTTP test server to validate the asyncio
transport end to end.
"""

import asyncio

import pytest

from reqhop import (
    AsyncAgent,
    AsyncClient,
    AsyncRequest,
    IneligibleMethodError,
    LoopAbortError,
)


class TestAsyncRedirectIntegration:
    """Asyncio requests against the local redirect server."""

    @pytest.mark.asyncio
    async def test_async_follows_redirect(self, server_url):
        response = await AsyncRequest.get(f"{server_url}/finite")

        assert response.body == b"reached"
        assert response.url == f"{server_url}/"
        assert response.request_url == f"{server_url}/finite"

    @pytest.mark.asyncio
    async def test_async_follow_redirect_disabled(self, server_url):
        response = await AsyncRequest.get(f"{server_url}/finite", follow_redirect=False)

        assert response.status_code == 302

    @pytest.mark.asyncio
    async def test_async_utf8_location(self, server_url):
        response = await AsyncRequest.get(f"{server_url}/redirect-with-utf8-binary")

        assert response.body == b"reached"
        assert response.url == f"{server_url}/utf8-url-áé"

    @pytest.mark.asyncio
    async def test_async_endless_redirect(self, server_url, redirect_server):
        with pytest.raises(LoopAbortError, match="Redirected 10 times. Aborting."):
            await AsyncRequest.get(f"{server_url}/endless")

        assert len(redirect_server.hits) == 11

    @pytest.mark.asyncio
    async def test_async_post_rejected(self, server_url):
        with pytest.raises(IneligibleMethodError) as exc_info:
            await AsyncRequest.send(None, f"{server_url}/relative", body="wow")

        assert exc_info.value.status_code == 302
        assert exc_info.value.path == "/relative"

    @pytest.mark.asyncio
    async def test_async_head(self, server_url):
        response = await AsyncRequest.head(f"{server_url}/relative")

        assert response.status_code == 200
        assert response.body == b""

    @pytest.mark.asyncio
    async def test_async_no_location(self, server_url):
        response = await AsyncRequest.get(f"{server_url}/no-location")

        assert response.status_code == 302
        assert response.body == b"moved"


class TestAsyncAgentIntegration:
    """AsyncAgent usage across redirect chains."""

    @pytest.mark.asyncio
    async def test_async_agent_counts_hops(self, server_url):
        agent = AsyncAgent()
        try:
            await AsyncRequest.get(f"{server_url}/finite", agent=agent)
        finally:
            await agent.close()

        assert agent.requests == 2

    @pytest.mark.asyncio
    async def test_async_https_to_http_uses_each_agent_once(
        self, server_url, https_server_url
    ):
        http_agent, https_agent = AsyncAgent(), AsyncAgent()
        try:
            response = await AsyncRequest.get(
                f"{https_server_url}/httpsToHttp",
                agent={"http": http_agent, "https": https_agent},
                reject_unauthorized=False,
            )
        finally:
            await http_agent.close()
            await https_agent.close()

        assert response.body == b"reached"
        assert response.url == f"{server_url}/"
        assert https_agent.requests == 1
        assert http_agent.requests == 1

    @pytest.mark.asyncio
    async def test_async_http_to_https_uses_each_agent_once(
        self, server_url, https_server_url
    ):
        http_agent, https_agent = AsyncAgent(), AsyncAgent()
        try:
            response = await AsyncRequest.get(
                f"{server_url}/httpToHttps",
                agent={"http": http_agent, "https": https_agent},
                reject_unauthorized=False,
            )
        finally:
            await http_agent.close()
            await https_agent.close()

        assert response.url == f"{https_server_url}/"
        assert http_agent.requests == 1
        assert https_agent.requests == 1

    @pytest.mark.asyncio
    async def test_async_concurrent_chains(self, server_url):
        agent = AsyncAgent(max_sockets=2)
        try:
            responses = await asyncio.gather(
                *(AsyncRequest.get(f"{server_url}/finite", agent=agent) for _ in range(5))
            )
        finally:
            await agent.close()

        assert [r.body for r in responses] == [b"reached"] * 5
        assert agent.requests == 10

    @pytest.mark.asyncio
    async def test_async_client(self, server_url):
        async with AsyncClient(base_url=server_url) as client:
            response = await client.get("/relative")
            with pytest.raises(IneligibleMethodError):
                await client.post("/relative", body="wow")

        assert response.url == f"{server_url}/"
        assert client.agent["http"].requests == 3
