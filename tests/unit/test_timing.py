"""tests/unit/test_timing.py"""

from reqhop.utils.timing import DEFAULT_TIMEOUT, Timeout


class TestTimeout:
    """Tests for Timeout class."""

    def test_timeout_from_float_with_none(self):
        """Test Timeout.from_float() with None returns empty Timeout."""
        timeout = Timeout.from_float(None)

        assert timeout.connect is None
        assert timeout.read is None
        assert timeout.total is None

    def test_timeout_from_float_with_value(self):
        """Test Timeout.from_float() with float value."""
        timeout = Timeout.from_float(5.0)

        assert timeout.connect == 5.0
        assert timeout.read == 5.0
        assert timeout.total == 5.0

    def test_coerce_passes_timeout_through(self):
        timeout = Timeout(connect=1.0)

        assert Timeout.coerce(timeout) is timeout

    def test_coerce_float(self):
        assert Timeout.coerce(DEFAULT_TIMEOUT) == Timeout.from_float(DEFAULT_TIMEOUT)

    def test_total_is_fallback(self):
        """Test connect/read fall back to total when unset."""
        timeout = Timeout(connect=2.0, total=9.0)

        assert timeout.connect_timeout == 2.0
        assert timeout.read_timeout == 9.0

    def test_no_timeouts(self):
        timeout = Timeout()

        assert timeout.connect_timeout is None
        assert timeout.read_timeout is None
