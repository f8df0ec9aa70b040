"""Shared fixtures for the reqhop test suite."""

import _thread
import threading
from contextlib import contextmanager

import pytest


@pytest.fixture
def timeout_context():
    """Fail the test instead of hanging when a blocking call never returns."""

    @contextmanager
    def _timeout_context(seconds):
        timer = threading.Timer(seconds, _thread.interrupt_main)
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Test timed out after {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context
