"""
Root conftest.py - fixtures shared across all tests.

Provides small synthetic NetCDF datasets laid out like GEOS-FP met fields:
a time axis stored as integer offsets plus a units attribute, optional
vertical levels, and a regular lat/lon grid.
"""

import numpy as np
import pytest
import xarray as xr

TIME_UNITS = "hours since 2023-01-01 00:00:00"


def make_met_dataset(n_times=3, n_levels=2, n_lat=4, n_lon=5):
    """Build an in-memory dataset with one rank-4 and two rank-3 variables."""
    rng = np.random.default_rng(42)
    shape_3d = (n_times, n_lat, n_lon)
    shape_4d = (n_times, n_levels, n_lat, n_lon)
    ds = xr.Dataset(
        {
            "U": (("time", "lev", "lat", "lon"), rng.standard_normal(shape_4d).astype(np.float32)),
            "V": (("time", "lev", "lat", "lon"), rng.standard_normal(shape_4d).astype(np.float32)),
            "PS": (("time", "lat", "lon"), (rng.random(shape_3d) * 1000 + 99000).astype(np.float32)),
            "T2M": (("time", "lat", "lon"), (rng.random(shape_3d) * 30 + 260).astype(np.float32)),
        },
        coords={
            "time": ("time", np.arange(n_times, dtype=np.int32) * 3, {"units": TIME_UNITS}),
            "lev": ("lev", np.arange(1, n_levels + 1, dtype=np.float64)),
            "lat": ("lat", np.linspace(-90.0, 90.0, n_lat)),
            "lon": ("lon", np.linspace(-180.0, 180.0, n_lon, endpoint=False)),
        },
    )
    return ds


@pytest.fixture
def met_dataset():
    """In-memory met dataset."""
    return make_met_dataset()


@pytest.fixture
def met_netcdf(tmp_path, met_dataset):
    """Write the met dataset to a NetCDF file and return its path."""
    path = tmp_path / "GEOSFP.20230101.A3dyn.05x0625.nc4"
    met_dataset.to_netcdf(path, engine="netcdf4")
    return path
