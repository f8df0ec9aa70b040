"""src/reqhop/redirects/policy.py

Redirect policy: whether a response is followed, returned, or rejected.
"""

import enum
from dataclasses import dataclass
from typing import Optional

__all__ = [
    "RedirectAction",
    "RedirectDecision",
    "RedirectPolicy",
    "REDIRECTABLE_METHODS",
    "is_redirect_status",
]

REDIRECTABLE_METHODS = frozenset({"GET", "HEAD"})


def is_redirect_status(status_code: int) -> bool:
    """True for redirect-class statuses (300-399)."""
    return 300 <= status_code < 400


class RedirectAction(enum.Enum):
    """Outcome of a redirect decision."""

    FOLLOW = "follow"
    STOP = "stop"
    REJECT = "reject"


@dataclass(frozen=True)
class RedirectDecision:
    """
    Result of :meth:`RedirectPolicy.decide`.

    Attributes:
        action: Follow, stop (return the response), or reject (fail the call).
        next_method: Method for the next hop; only meaningful on FOLLOW.
        drop_body: Whether the next hop goes out without the request body.
    """

    action: RedirectAction
    next_method: Optional[str] = None
    drop_body: bool = False

    @property
    def follow(self) -> bool:
        return self.action is RedirectAction.FOLLOW


class RedirectPolicy:
    """
    Decides what to do with each response in a redirect chain.

    Only GET and HEAD are followed. Any other method that receives a
    redirect-class status with a Location header is rejected, so a request
    body is never silently replayed or lost. Responses without a usable
    Location (304 Not Modified, for one) are returned as they are.
    """

    __slots__ = ("follow_redirect",)

    def __init__(self, follow_redirect: bool = True) -> None:
        self.follow_redirect = follow_redirect

    def decide(
        self,
        status_code: int,
        method: str,
        has_body: bool = False,
        location: Optional[str] = None,
    ) -> RedirectDecision:
        """
        Args:
            status_code: Status of the current hop's response.
            method: Method of the current hop, any case.
            has_body: Whether the current hop carried a body.
            location: Raw Location header value, if any.
        """
        if not self.follow_redirect or not is_redirect_status(status_code):
            return RedirectDecision(RedirectAction.STOP)

        if not location or not location.strip():
            return RedirectDecision(RedirectAction.STOP)

        method = method.upper()
        if method not in REDIRECTABLE_METHODS:
            return RedirectDecision(RedirectAction.REJECT)

        return RedirectDecision(
            RedirectAction.FOLLOW, next_method=method, drop_body=has_body
        )
