"""Tests for TimingMixin."""

import logging

import pytest

from ncserial.core.timing import TimingMixin


class _Timed(TimingMixin):
    def __init__(self):
        self.logger = logging.getLogger("ncserial.test.timing")


class TestTimingMixin:
    def test_accumulates_by_category(self):
        timed = _Timed()
        with timed.time_limit("serialize U", "serialize"):
            pass
        with timed.time_limit("serialize V", "serialize"):
            pass
        assert list(timed.timings) == ["serialize"]
        assert timed.timings["serialize"] >= 0.0

    def test_defaults_to_task_name(self):
        timed = _Timed()
        with timed.time_limit("write DIMS"):
            pass
        assert "write DIMS" in timed.timings

    def test_records_on_error(self):
        timed = _Timed()
        with pytest.raises(ValueError):
            with timed.time_limit("failing", "serialize"):
                raise ValueError("boom")
        assert "serialize" in timed.timings
