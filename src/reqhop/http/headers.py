"""src/reqhop/http/headers.py

Case-insensitive, multi-valued HTTP header container for Reqhop.
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

__all__ = ["Headers", "strip_headers"]


class Headers(Mapping[str, str]):
    """
    Case-insensitive mapping of response headers.

    Repeated headers are kept as separate values. Item access joins them
    with commas, except for Set-Cookie, which returns the first value.
    Use get_all() for the raw list.
    """

    __slots__ = ("_headers",)

    def __init__(
        self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None
    ) -> None:
        self._headers: Dict[str, List[str]] = {}
        if headers:
            for name, value in headers.items():
                if isinstance(value, list):
                    self._headers.setdefault(name.lower(), []).extend(value)
                else:
                    self.add(name, value)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "Headers":
        """Build from (name, value) pairs in wire order."""
        headers = cls()
        for name, value in pairs:
            headers.add(name, value)
        return headers

    def add(self, name: str, value: str) -> None:
        """Append a value, keeping earlier ones."""
        self._headers.setdefault(name.lower(), []).append(value)

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return str(value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(self._headers.get(key.lower()))

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get header value.

        Args:
            key: Header name (case-insensitive).
            default: Default value if header not found.

        Returns:
            Comma-joined string for multiple values (except Set-Cookie
            which returns first), or default if not found.
        """
        values = self._headers.get(key.lower())
        if not values:
            return default

        if key.lower() == "set-cookie":
            return values[0]

        return ", ".join(values)

    def get_all(self, key: str) -> List[str]:
        """Return every value received for a header, in order."""
        return list(self._headers.get(key.lower(), []))


def strip_headers(headers: Mapping[str, str], names: Iterable[str]) -> Dict[str, str]:
    """Return a copy of request headers without the given names (case-insensitive)."""
    drop = {name.lower() for name in names}
    return {k: v for k, v in headers.items() if k.lower() not in drop}
