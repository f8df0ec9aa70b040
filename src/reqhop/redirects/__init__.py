"""src/reqhop/redirects/__init__.py

Redirect handling core.

Leaf first: the resolver turns a Location header into the next URL, the
policy decides follow/stop/reject, the selector picks the agent for the
next hop's scheme, and the driver runs the chain.
"""

from .agents import select_agent
from .driver import AsyncRedirectDriver, HopState, RedirectDriver
from .policy import RedirectAction, RedirectDecision, RedirectPolicy
from .resolver import decode_location, resolve

__all__ = [
    "resolve",
    "decode_location",
    "RedirectPolicy",
    "RedirectDecision",
    "RedirectAction",
    "select_agent",
    "HopState",
    "RedirectDriver",
    "AsyncRedirectDriver",
]
