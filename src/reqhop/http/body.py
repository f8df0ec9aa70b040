"""src/reqhop/http/body.py

HTTP body reading (chunked, fixed-length, read-until-close) for Reqhop.
"""

import asyncio
from typing import IO, List, Optional

from reqhop.exceptions import InvalidResponseError, ProtocolError
from reqhop.http.http11 import FRAMING_CHUNKED, FRAMING_LENGTH, FRAMING_NONE

__all__ = [
    "read_exact",
    "read_chunked",
    "read_body",
    "async_read_exact",
    "async_read_chunked",
    "async_read_body",
]


def _chunk_size(line: bytes) -> int:
    try:
        return int(line.split(b";")[0].strip(), 16)
    except ValueError as exc:
        raise InvalidResponseError(f"Invalid chunk size: {line!r}") from exc


def _check_size(size: int, max_body_size: Optional[int]) -> None:
    if max_body_size is not None and size > max_body_size:
        raise ProtocolError(f"Body exceeds maximum size of {max_body_size} bytes")


def read_exact(fp: IO[bytes], n: int) -> bytes:
    """Read exactly n bytes from a buffered socket file."""
    data = fp.read(n) if n else b""
    if len(data) < n:
        raise InvalidResponseError("Connection closed before body was complete")
    return data


def read_chunked(fp: IO[bytes], max_body_size: Optional[int] = None) -> bytes:
    """Read and decode a chunked transfer-encoded body."""
    parts: List[bytes] = []
    total = 0
    while True:
        line = fp.readline()
        if not line:
            raise InvalidResponseError("Connection closed during chunk header")
        size = _chunk_size(line)
        if size == 0:
            # Skip trailer fields up to the final blank line.
            while fp.readline() not in (b"\r\n", b"\n", b""):
                pass
            break
        total += size
        _check_size(total, max_body_size)
        parts.append(read_exact(fp, size))
        read_exact(fp, 2)
    return b"".join(parts)


def read_body(
    fp: IO[bytes], framing: str, length: int, max_body_size: Optional[int] = None
) -> bytes:
    """Read a whole response body according to its framing."""
    if framing == FRAMING_NONE:
        return b""
    if framing == FRAMING_CHUNKED:
        return read_chunked(fp, max_body_size)
    if framing == FRAMING_LENGTH:
        _check_size(length, max_body_size)
        return read_exact(fp, length)
    body = fp.read()
    _check_size(len(body), max_body_size)
    return body


async def async_read_exact(reader: asyncio.StreamReader, n: int) -> bytes:
    """Async counterpart of :func:`read_exact`."""
    try:
        return await reader.readexactly(n)
    except asyncio.IncompleteReadError as exc:
        raise InvalidResponseError(
            "Connection closed before body was complete"
        ) from exc


async def async_read_chunked(
    reader: asyncio.StreamReader, max_body_size: Optional[int] = None
) -> bytes:
    """Async counterpart of :func:`read_chunked`."""
    parts: List[bytes] = []
    total = 0
    while True:
        line = await reader.readline()
        if not line:
            raise InvalidResponseError("Connection closed during chunk header")
        size = _chunk_size(line)
        if size == 0:
            while await reader.readline() not in (b"\r\n", b"\n", b""):
                pass
            break
        total += size
        _check_size(total, max_body_size)
        parts.append(await async_read_exact(reader, size))
        await async_read_exact(reader, 2)
    return b"".join(parts)


async def async_read_body(
    reader: asyncio.StreamReader,
    framing: str,
    length: int,
    max_body_size: Optional[int] = None,
) -> bytes:
    """Async counterpart of :func:`read_body`."""
    if framing == FRAMING_NONE:
        return b""
    if framing == FRAMING_CHUNKED:
        return await async_read_chunked(reader, max_body_size)
    if framing == FRAMING_LENGTH:
        _check_size(length, max_body_size)
        return await async_read_exact(reader, length)
    body = await reader.read()
    _check_size(len(body), max_body_size)
    return body
