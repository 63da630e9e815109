# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Dataset providers.

The codec never opens NetCDF files itself; it consumes arrays and metadata
through the small ``DatasetProvider`` contract defined here. The xarray
implementation opens files with ``decode_times=False`` so that the raw time
offsets and their units string reach the time codec untouched.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Tuple, Union, runtime_checkable

import numpy as np
import xarray as xr

from ncserial.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


@runtime_checkable
class DatasetProvider(Protocol):
    """Read-only access to the variables of one gridded dataset.

    Arrays returned by ``get_array`` must be row-major and match ``dims``.
    """

    def has_variable(self, name: str) -> bool: ...

    def rank(self, name: str) -> int: ...

    def dims(self, name: str) -> Tuple[int, ...]: ...

    def get_array(self, name: str) -> np.ndarray: ...

    def get_attribute(self, name: str, attribute: str) -> Any: ...


class XarrayDatasetProvider:
    """``DatasetProvider`` backed by an ``xarray.Dataset``.

    Args:
        source: Path to a NetCDF file, or an already open ``xr.Dataset``
        mask_and_scale: Apply CF masking and scaling when reading values
        engine: xarray backend used to open files
    """

    def __init__(
        self,
        source: Union[Path, str, xr.Dataset],
        mask_and_scale: bool = False,
        engine: Optional[str] = 'netcdf4',
    ) -> None:
        if isinstance(source, xr.Dataset):
            self.path = None
            self._ds = source
            self._owns_dataset = False
            return

        self.path = Path(source)
        if not self.path.is_file():
            raise ProviderError(f"NetCDF file not found: {self.path}")
        try:
            self._ds = xr.open_dataset(
                self.path,
                engine=engine,
                decode_times=False,
                mask_and_scale=mask_and_scale,
            )
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Failed to open {self.path}: {exc}") from exc
        self._owns_dataset = True
        logger.debug("Opened %s with variables %s", self.path, list(self._ds.variables))

    @property
    def dataset(self) -> xr.Dataset:
        return self._ds

    def _variable(self, name: str) -> xr.Variable:
        try:
            return self._ds.variables[name]
        except KeyError:
            where = self.path or 'dataset'
            raise ProviderError(f"Variable {name} not found in {where}") from None

    def has_variable(self, name: str) -> bool:
        return name in self._ds.variables

    def rank(self, name: str) -> int:
        return self._variable(name).ndim

    def dims(self, name: str) -> Tuple[int, ...]:
        return tuple(int(n) for n in self._variable(name).shape)

    def dimension_size(self, dimension: str) -> Optional[int]:
        """Length of a named dataset dimension, or None if it does not exist."""
        size = self._ds.sizes.get(dimension)
        return int(size) if size is not None else None

    def get_array(self, name: str) -> np.ndarray:
        try:
            return np.ascontiguousarray(self._variable(name).values)
        except ProviderError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Failed to read variable {name}: {exc}") from exc

    def get_attribute(self, name: str, attribute: str) -> Any:
        attrs = self._variable(name).attrs
        if attribute not in attrs:
            raise ProviderError(f"Variable {name} has no '{attribute}' attribute")
        return attrs[attribute]

    def close(self) -> None:
        if self._owns_dataset:
            self._ds.close()

    def __enter__(self) -> 'XarrayDatasetProvider':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
