"""src/reqhop/redirects/agents.py

Per-hop agent selection.
"""

from typing import Any, Mapping

__all__ = ["select_agent"]


def select_agent(agent_config: Any, scheme: str) -> Any:
    """
    Pick the agent for a hop to a URL with the given scheme.

    Args:
        agent_config: None, a single agent used for every scheme, or a
            mapping such as ``{"http": agent, "https": agent}``.
        scheme: Scheme of the hop's target URL.

    Returns:
        The selected agent, or None to let the transport open a one-shot
        connection.
    """
    if agent_config is None:
        return None
    if isinstance(agent_config, Mapping):
        return agent_config.get(scheme.lower())
    return agent_config
