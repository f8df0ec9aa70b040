"""src/reqhop/utils/timing.py

Timeouts configuration.
"""

from dataclasses import dataclass
from typing import Optional, Union

__all__ = ["Timeout", "DEFAULT_TIMEOUT"]

DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class Timeout:
    """
    Timeout configuration for a single hop.

    Attributes:
        connect: Maximum time to wait for connection establishment (socket connect).
        read: Maximum time to wait for data to be received (socket recv).
        total: Fallback used when ``connect`` or ``read`` is not set.
    """

    connect: Optional[float] = None
    read: Optional[float] = None
    total: Optional[float] = None

    @classmethod
    def from_float(cls, timeout: Optional[float]) -> "Timeout":
        """Create a Timeout instance from a single float (total timeout fallback)."""
        if timeout is None:
            return cls()
        return cls(connect=timeout, read=timeout, total=timeout)

    @classmethod
    def coerce(cls, timeout: Union[float, "Timeout", None]) -> "Timeout":
        """Accept either a Timeout or a plain number of seconds."""
        if isinstance(timeout, Timeout):
            return timeout
        return cls.from_float(timeout)

    @property
    def connect_timeout(self) -> Optional[float]:
        """Seconds allowed for connect and TLS handshake."""
        return self.connect if self.connect is not None else self.total

    @property
    def read_timeout(self) -> Optional[float]:
        """Seconds allowed between received bytes."""
        return self.read if self.read is not None else self.total
