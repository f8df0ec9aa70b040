"""tests/unit/test_http_parser.py

Unit tests for reqhop.http.http11 module.

Test Coverage:
    - Response head parsing (status line, headers, limits)
    - Request head building (defaults, overrides, injection checks)
    - Body framing and connection reuse decisions
    - Reading a head from sync and async streams
"""

import asyncio
import io

import pytest

from reqhop.exceptions import InvalidResponseError, ProtocolError
from reqhop.http.headers import Headers
from reqhop.http.http11 import (
    FRAMING_CHUNKED,
    FRAMING_CLOSE,
    FRAMING_LENGTH,
    FRAMING_NONE,
    USER_AGENT,
    HttpParser,
    async_read_head,
    body_framing,
    build_request_head,
    is_reusable,
    read_head,
)


class TestHttpParser:
    """Tests for HttpParser.parse_head."""

    def test_parse_basic_head(self):
        data = b"HTTP/1.1 302 Found\r\nLocation: /\r\nContent-Length: 0\r\n\r\n"

        version, status, reason, headers = HttpParser().parse_head(data)

        assert version == "HTTP/1.1"
        assert status == 302
        assert reason == "Found"
        assert headers["location"] == "/"
        assert headers["Content-Length"] == "0"

    def test_parse_bare_lf_head(self):
        data = b"HTTP/1.1 302 Found\nLocation: /x\nContent-Length: 0\n\n"

        version, status, reason, headers = HttpParser().parse_head(data)

        assert version == "HTTP/1.1"
        assert status == 302
        assert reason == "Found"
        assert headers["Location"] == "/x"
        assert headers["Content-Length"] == "0"

    def test_parse_mixed_line_endings(self):
        data = b"HTTP/1.1 200 OK\nA: 1\r\nB: 2\n\r\n"

        _, _, reason, headers = HttpParser().parse_head(data)

        assert reason == "OK"
        assert headers["A"] == "1"
        assert headers["B"] == "2"

    def test_parse_without_reason(self):
        _, status, reason, _ = HttpParser().parse_head(b"HTTP/1.1 204\r\n\r\n")

        assert status == 204
        assert reason == ""

    def test_duplicate_headers_kept(self):
        data = b"HTTP/1.1 200 OK\r\nSet-Cookie: a=1\r\nSet-Cookie: b=2\r\n\r\n"

        _, _, _, headers = HttpParser().parse_head(data)

        assert headers.get_all("Set-Cookie") == ["a=1", "b=2"]

    def test_non_ascii_bytes_map_one_to_one(self):
        """Header bytes are decoded as ISO-8859-1, one char per byte."""
        raw = "/utf8-url-áé".encode("utf-8")
        data = b"HTTP/1.1 302 Found\r\nLocation: " + raw + b"\r\n\r\n"

        _, _, _, headers = HttpParser().parse_head(data)

        assert headers["Location"].encode("latin-1") == raw

    def test_garbage_lines_ignored(self):
        data = b"HTTP/1.1 200 OK\r\nnot a header\r\nX-Ok: yes\r\n\r\n"

        _, _, _, headers = HttpParser().parse_head(data)

        assert list(headers) == ["x-ok"]

    @pytest.mark.parametrize(
        "status_line",
        [b"FTP/1.1 200 OK", b"HTTP/1.1 abc OK", b"HTTP/1.1 42 Odd", b"garbage"],
    )
    def test_invalid_status_line(self, status_line):
        with pytest.raises(InvalidResponseError):
            HttpParser().parse_head(status_line + b"\r\n\r\n")

    def test_empty_response(self):
        with pytest.raises(InvalidResponseError, match="Empty response"):
            HttpParser().parse_head(b"\r\n\r\n")

    def test_head_too_large(self):
        parser = HttpParser(max_header_size=32)

        with pytest.raises(ProtocolError, match="maximum size"):
            parser.parse_head(b"HTTP/1.1 200 OK\r\nX-Long: " + b"a" * 64 + b"\r\n\r\n")

    def test_too_many_fields(self):
        parser = HttpParser(max_field_count=2)
        data = b"HTTP/1.1 200 OK\r\nA: 1\r\nB: 2\r\nC: 3\r\n\r\n"

        with pytest.raises(ProtocolError, match="Too many header fields"):
            parser.parse_head(data)


class TestBuildRequestHead:
    """Tests for build_request_head."""

    def test_default_headers(self):
        head = build_request_head("GET", "/finite", "example.com", {})

        assert head.startswith(b"GET /finite HTTP/1.1\r\n")
        assert b"Host: example.com\r\n" in head
        assert b"Connection: close\r\n" in head
        assert f"User-Agent: {USER_AGENT}\r\n".encode() in head
        assert head.endswith(b"\r\n\r\n")

    def test_keep_alive(self):
        head = build_request_head("GET", "/", "h", {}, keep_alive=True)

        assert b"Connection: keep-alive\r\n" in head

    def test_content_length(self):
        head = build_request_head("POST", "/", "h", {}, content_length=3)

        assert b"Content-Length: 3\r\n" in head

    def test_caller_headers_override_defaults_case_insensitively(self):
        head = build_request_head("GET", "/", "h", {"user-agent": "custom/1.0"})

        assert b"user-agent: custom/1.0\r\n" in head
        assert b"reqhop/" not in head

    def test_header_injection_rejected(self):
        with pytest.raises(ValueError):
            build_request_head("GET", "/", "h", {"X-Bad": "a\r\nInjected: 1"})

    def test_utf8_header_value(self):
        head = build_request_head("GET", "/", "h", {"X-Name": "José"})

        assert "X-Name: José".encode("utf-8") in head


class TestBodyFraming:
    """Tests for body_framing."""

    def test_head_has_no_body(self):
        headers = Headers({"Content-Length": "7"})

        assert body_framing("HEAD", 200, headers) == (FRAMING_NONE, 0)

    @pytest.mark.parametrize("status", [101, 204, 304])
    def test_bodiless_statuses(self, status):
        assert body_framing("GET", status, Headers({"Content-Length": "5"}))[0] == FRAMING_NONE

    def test_chunked(self):
        headers = Headers({"Transfer-Encoding": "gzip, chunked"})

        assert body_framing("GET", 200, headers) == (FRAMING_CHUNKED, 0)

    def test_content_length(self):
        assert body_framing("GET", 200, Headers({"Content-Length": "7"})) == (
            FRAMING_LENGTH,
            7,
        )

    def test_repeated_identical_content_length(self):
        headers = Headers({"Content-Length": ["7", "7"]})

        assert body_framing("GET", 200, headers) == (FRAMING_LENGTH, 7)

    def test_conflicting_content_length(self):
        headers = Headers({"Content-Length": ["7", "8"]})

        with pytest.raises(InvalidResponseError, match="Conflicting"):
            body_framing("GET", 200, headers)

    @pytest.mark.parametrize("value", ["abc", "-1"])
    def test_invalid_content_length(self, value):
        with pytest.raises(InvalidResponseError):
            body_framing("GET", 200, Headers({"Content-Length": value}))

    def test_read_until_close(self):
        assert body_framing("GET", 200, Headers()) == (FRAMING_CLOSE, 0)


class TestIsReusable:
    """Tests for is_reusable."""

    def test_http11_default_keep_alive(self):
        assert is_reusable("HTTP/1.1", Headers(), FRAMING_LENGTH)

    def test_connection_close(self):
        assert not is_reusable("HTTP/1.1", Headers({"Connection": "close"}), FRAMING_LENGTH)

    def test_read_until_close_never_reusable(self):
        assert not is_reusable("HTTP/1.1", Headers(), FRAMING_CLOSE)

    def test_http10_needs_keep_alive(self):
        assert not is_reusable("HTTP/1.0", Headers(), FRAMING_LENGTH)
        assert is_reusable(
            "HTTP/1.0", Headers({"Connection": "Keep-Alive"}), FRAMING_LENGTH
        )


class TestReadHead:
    """Tests for read_head and async_read_head."""

    def test_read_head_stops_at_blank_line(self):
        fp = io.BytesIO(b"HTTP/1.1 200 OK\r\nA: 1\r\n\r\nbody")

        assert read_head(fp) == b"HTTP/1.1 200 OK\r\nA: 1\r\n\r\n"
        assert fp.read() == b"body"

    def test_read_head_bare_lf_parses(self):
        fp = io.BytesIO(b"HTTP/1.1 302 Found\nLocation: /x\n\nbody")

        _, status, _, headers = HttpParser().parse_head(read_head(fp))

        assert status == 302
        assert headers["Location"] == "/x"
        assert fp.read() == b"body"

    def test_read_head_closed_without_response(self):
        with pytest.raises(InvalidResponseError, match="without response"):
            read_head(io.BytesIO(b""))

    def test_read_head_incomplete(self):
        with pytest.raises(InvalidResponseError, match="delimiter not found"):
            read_head(io.BytesIO(b"HTTP/1.1 200 OK\r\nA: 1\r\n"))

    def test_read_head_too_large(self):
        fp = io.BytesIO(b"HTTP/1.1 200 OK\r\n" + b"X: " + b"a" * 100 + b"\r\n\r\n")

        with pytest.raises(ProtocolError):
            read_head(fp, max_size=50)

    @pytest.mark.asyncio
    async def test_async_read_head(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"HTTP/1.1 204 No Content\r\n\r\nrest")
        reader.feed_eof()

        assert await async_read_head(reader) == b"HTTP/1.1 204 No Content\r\n\r\n"

    @pytest.mark.asyncio
    async def test_async_read_head_closed(self):
        reader = asyncio.StreamReader()
        reader.feed_eof()

        with pytest.raises(InvalidResponseError):
            await async_read_head(reader)
