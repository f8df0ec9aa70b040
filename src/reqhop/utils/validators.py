"""src/reqhop/utils/validators.py

Validation utilities for Reqhop.
"""

__all__ = ["SUPPORTED_SCHEMES", "validate_url", "validate_header"]

SUPPORTED_SCHEMES = ("http", "https")


def validate_url(url: str) -> bool:
    """Simple URL validation."""
    return url.lower().startswith(tuple(f"{s}://" for s in SUPPORTED_SCHEMES))


def validate_header(name: str, value: str) -> None:
    """Reject header names or values that would break request framing."""
    if "\r" in name or "\n" in name or "\r" in value or "\n" in value:
        raise ValueError(f"Invalid character in header {name}: {value!r}")
    if "\x00" in name or "\x00" in value:
        raise ValueError(f"Null byte in header {name}: {value!r}")
