"""Pytest configuration and fixtures."""
import sys
from pathlib import Path

import pytest

# Ensure backend root is on path when running pytest from repo root or backend
backend = Path(__file__).resolve().parent.parent
if str(backend) not in sys.path:
    sys.path.insert(0, str(backend))

from reqstats.monitoring import MetricsRecorder  # noqa: E402


class FakeClock:
    """Monotonic nanosecond clock advanced by hand."""

    def __init__(self, start_ns: int = 1_000_000_000):
        self.now_ns = start_ns

    def __call__(self) -> int:
        return self.now_ns

    def advance_ms(self, ms: int) -> None:
        self.now_ns += ms * 1_000_000


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder(clock):
    """Recorder whose window is not cleared during a test."""
    return MetricsRecorder(reset_interval=3600, clock=clock)
