"""tests/unit/test_utils.py"""

import pytest

from reqhop.utils.validators import validate_header, validate_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("http://example.com", True),
        ("HTTPS://example.com", True),
        ("ws://example.com", False),
        ("ftp://example.com", False),
        ("invalid", False),
        ("", False),
    ],
)
def test_validate_url(url, expected):
    """Test URL validation utility."""
    assert validate_url(url) is expected


def test_validate_header_accepts_plain_values():
    validate_header("X-Token", "abc def")


@pytest.mark.parametrize(
    "name, value",
    [
        ("X-Bad", "a\r\nb"),
        ("X-Bad", "a\nb"),
        ("X\rBad", "ok"),
        ("X-Null", "a\x00b"),
    ],
)
def test_validate_header_rejects_framing_characters(name, value):
    with pytest.raises(ValueError):
        validate_header(name, value)
