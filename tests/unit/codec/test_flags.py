"""Tests for the record feature flag byte."""

import pytest

from ncserial.codec.flags import TIME_PRESENT_BIT, includes_time, pack_flags, unpack_flags


class TestPackFlags:
    def test_time_flag_sets_bit_seven(self):
        assert pack_flags(True) == 0x80

    def test_no_time_flag_is_zero(self):
        assert pack_flags(False) == 0x00


class TestUnpackFlags:
    def test_bit_isolation(self):
        flags = unpack_flags(pack_flags(True))
        assert flags[TIME_PRESENT_BIT] is True
        assert not any(flags[:TIME_PRESENT_BIT])

    def test_all_false(self):
        assert unpack_flags(pack_flags(False)) == [False] * 8

    @pytest.mark.parametrize("bit", range(8))
    def test_least_significant_bit_first(self, bit):
        flags = unpack_flags(1 << bit)
        assert flags.index(True) == bit
        assert sum(flags) == 1

    def test_includes_time(self):
        assert includes_time(0x80)
        assert includes_time(0xFF)
        assert not includes_time(0x7F)
