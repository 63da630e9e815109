"""Tests for the xarray-backed dataset provider."""

import numpy as np
import pytest

from ncserial.core.exceptions import ProviderError
from ncserial.io.provider import DatasetProvider, XarrayDatasetProvider


class TestXarrayDatasetProvider:
    def test_satisfies_protocol(self, met_dataset):
        assert isinstance(XarrayDatasetProvider(met_dataset), DatasetProvider)

    def test_rank_and_dims(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        assert provider.rank("U") == 4
        assert provider.dims("U") == (3, 2, 4, 5)
        assert provider.rank("PS") == 3
        assert provider.dims("lat") == (4,)

    def test_get_array_is_contiguous(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        values = provider.get_array("U")
        assert values.flags["C_CONTIGUOUS"]
        np.testing.assert_array_equal(values, met_dataset["U"].values)

    def test_has_variable(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        assert provider.has_variable("T2M")
        assert not provider.has_variable("QV")

    def test_dimension_size(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        assert provider.dimension_size("lev") == 2
        assert provider.dimension_size("height") is None

    def test_missing_variable(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        with pytest.raises(ProviderError, match="Variable QV not found"):
            provider.get_array("QV")

    def test_missing_attribute(self, met_dataset):
        provider = XarrayDatasetProvider(met_dataset)
        with pytest.raises(ProviderError, match="no 'units' attribute"):
            provider.get_attribute("PS", "units")

    def test_file_keeps_raw_time_offsets(self, met_netcdf):
        with XarrayDatasetProvider(met_netcdf) as provider:
            times = provider.get_array("time")
            units = provider.get_attribute("time", "units")
        assert times.dtype.kind == "i"
        assert list(times) == [0, 3, 6]
        assert units == "hours since 2023-01-01 00:00:00"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProviderError, match="not found"):
            XarrayDatasetProvider(tmp_path / "missing.nc4")

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.nc4"
        path.write_bytes(b"not a netcdf file")
        with pytest.raises(ProviderError, match="Failed to open"):
            XarrayDatasetProvider(path)
