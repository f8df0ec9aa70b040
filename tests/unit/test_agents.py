"""tests/unit/test_agents.py

Unit tests for per-hop agent selection (reqhop.redirects.agents).
"""

from reqhop.redirects.agents import select_agent
from reqhop.transport.agent import Agent, AsyncAgent


class TestSelectAgent:
    """Tests for select_agent."""

    def test_none(self):
        assert select_agent(None, "http") is None

    def test_mapping_by_scheme(self):
        http_agent, https_agent = Agent(), Agent()
        agents = {"http": http_agent, "https": https_agent}

        assert select_agent(agents, "http") is http_agent
        assert select_agent(agents, "https") is https_agent

    def test_scheme_case_insensitive(self):
        agent = Agent()

        assert select_agent({"https": agent}, "HTTPS") is agent

    def test_mapping_missing_scheme(self):
        assert select_agent({"https": Agent()}, "http") is None

    def test_single_agent_for_every_scheme(self):
        agent = AsyncAgent()

        assert select_agent(agent, "http") is agent
        assert select_agent(agent, "https") is agent
