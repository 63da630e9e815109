"""Dataset access and batch serialization of NetCDF files."""

from .provider import DatasetProvider, XarrayDatasetProvider
from .serializer import NetcdfSerializer, SerializationSummary

__all__ = [
    "DatasetProvider",
    "XarrayDatasetProvider",
    "NetcdfSerializer",
    "SerializationSummary",
]
