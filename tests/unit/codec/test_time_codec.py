"""Tests for time unit parsing and epoch-second conversion."""

from datetime import datetime, timedelta, timezone

import numpy as np
import pytest
import xarray as xr

from ncserial.codec.time_codec import (
    EPOCH,
    as_epoch_seconds,
    decode_units,
    from_epoch_seconds,
    read_file_times,
    to_epoch_seconds,
)
from ncserial.core.exceptions import InvalidFormatError, ProviderError
from ncserial.io.provider import XarrayDatasetProvider


class TestDecodeUnits:
    @pytest.mark.parametrize("keyword,seconds", [
        ("seconds", 1),
        ("minutes", 60),
        ("hours", 3600),
        ("days", 86400),
    ])
    def test_unit_multipliers(self, keyword, seconds):
        times = decode_units(f"{keyword} since 2000-01-01 00:00:00", [0, 2])
        assert times[0] == datetime(2000, 1, 1)
        assert times[1] - times[0] == timedelta(seconds=2 * seconds)

    def test_keyword_is_case_insensitive(self):
        times = decode_units("HOURS since 1970-01-01 00:00:00", [1])
        assert times == [datetime(1970, 1, 1, 1)]

    def test_fractional_reference_seconds(self):
        times = decode_units("minutes since 2023-01-01 00:00:00.0", [90])
        assert times == [datetime(2023, 1, 1, 1, 30)]

    def test_reference_time_of_day(self):
        times = decode_units("hours since 2023-06-15 12:30:00", [0, -1])
        assert times == [datetime(2023, 6, 15, 12, 30), datetime(2023, 6, 15, 11, 30)]

    def test_date_without_time_of_day(self):
        times = decode_units("days since 2000-01-01", [1])
        assert times == [datetime(2000, 1, 2)]

    def test_numpy_offsets(self):
        times = decode_units("hours since 1970-01-01 00:00:00", np.array([0, 3], dtype=np.int32))
        assert times == [EPOCH, datetime(1970, 1, 1, 3)]

    def test_whole_float_offsets_accepted(self):
        times = decode_units("hours since 1970-01-01 00:00:00", np.array([0.0, 6.0]))
        assert times[1] == datetime(1970, 1, 1, 6)

    def test_fractional_offsets_rejected(self):
        with pytest.raises(InvalidFormatError, match="whole numbers"):
            decode_units("hours since 1970-01-01 00:00:00", [0.5])

    def test_unknown_keyword(self):
        with pytest.raises(InvalidFormatError, match="Invalid time units 'weeks'"):
            decode_units("weeks since 1970-01-01 00:00:00", [0])

    def test_unparsable_reference(self):
        with pytest.raises(InvalidFormatError, match="Cannot parse reference time"):
            decode_units("hours since yesterday noon", [0])

    def test_missing_since(self):
        with pytest.raises(InvalidFormatError, match="Malformed"):
            decode_units("hours", [0])


class TestEpochSeconds:
    def test_epoch_is_zero(self):
        assert to_epoch_seconds(EPOCH) == 0

    def test_pre_epoch_is_negative(self):
        assert to_epoch_seconds(datetime(1969, 12, 31, 23, 0)) == -3600

    def test_sub_second_truncated(self):
        assert to_epoch_seconds(datetime(1970, 1, 1, 0, 0, 1, 999999)) == 1
        assert to_epoch_seconds(datetime(1969, 12, 31, 23, 59, 58, 500000)) == -1

    def test_timezone_aware_converted_to_utc(self):
        ts = datetime(1970, 1, 1, 2, tzinfo=timezone(timedelta(hours=2)))
        assert to_epoch_seconds(ts) == 0

    def test_datetime64(self):
        assert to_epoch_seconds(np.datetime64("2000-01-01T00:00:00")) == 946684800

    @pytest.mark.parametrize("seconds", [0, 1, -1, 946684800, -2208988800, 4102444800])
    def test_round_trip(self, seconds):
        assert to_epoch_seconds(from_epoch_seconds(seconds)) == seconds

    @pytest.mark.parametrize("keyword", ["seconds", "minutes", "hours", "days"])
    def test_decoded_times_round_trip(self, keyword):
        times = decode_units(f"{keyword} since 1990-05-17 06:00:00", [-40, 0, 7, 1234])
        assert [from_epoch_seconds(to_epoch_seconds(t)) for t in times] == times

    def test_as_epoch_seconds_accepts_integers_and_timestamps(self):
        np.testing.assert_array_equal(as_epoch_seconds([0, 3600]), [0, 3600])
        np.testing.assert_array_equal(
            as_epoch_seconds([EPOCH, datetime(1970, 1, 1, 1)]), [0, 3600]
        )

    def test_as_epoch_seconds_rejects_floats(self):
        with pytest.raises(InvalidFormatError):
            as_epoch_seconds([0.5, 1.5])


class TestReadFileTimes:
    def test_reads_units_attribute(self, met_dataset):
        times = read_file_times(XarrayDatasetProvider(met_dataset))
        base = to_epoch_seconds(datetime(2023, 1, 1))
        np.testing.assert_array_equal(times, [base, base + 3 * 3600, base + 6 * 3600])
        assert times.dtype == np.int64

    def test_decoded_time_axis(self):
        ds = xr.Dataset(coords={"time": np.array(["2000-01-01", "2000-01-02"], dtype="datetime64[ns]")})
        times = read_file_times(XarrayDatasetProvider(ds))
        np.testing.assert_array_equal(times, [946684800, 946771200])

    def test_missing_units(self):
        ds = xr.Dataset(coords={"time": ("time", np.arange(3))})
        with pytest.raises(ProviderError, match="units"):
            read_file_times(XarrayDatasetProvider(ds))
