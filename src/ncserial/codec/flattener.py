# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Array flattening onto the canonical ``(time, level, lat, lon)`` shape.

Every on-disk record stores a four-element shape regardless of the source
array's rank. Source arrays must be materialised in row-major order: the
payload is the source's logical C-order traversal, with the last dimension
varying fastest. Fortran-ordered numpy arrays are copied into C order by
logical index, which is the only reordering performed here; a provider
whose axes are in a different order must transpose before calling
:func:`flatten`.
"""

from typing import NamedTuple, Optional, Sequence

import numpy as np

from ncserial.core.exceptions import ShapeMismatchError, UnsupportedLayoutError, require

from .layout import INT32_MAX, VALUE_DTYPE


class CanonicalShape(NamedTuple):
    """Four-element dimension tuple used for every stored record."""

    time: int
    level: int
    lat: int
    lon: int

    @property
    def size(self) -> int:
        """Number of payload values described by this shape."""
        n = 1
        for d in self:
            n *= d
        return n

    @property
    def resolved_rank(self) -> int:
        """Count of dimensions longer than one.

        Lossy: a genuine dimension of length one cannot be told apart from
        an absent one.
        """
        return sum(1 for d in self if d > 1)

    @property
    def spatial_rank(self) -> int:
        """Count of level, lat and lon dimensions longer than one."""
        return sum(1 for d in self[1:] if d > 1)


def infer_shape(
    rank: int,
    source_dims: Sequence[int],
    time_count: Optional[int] = None,
) -> CanonicalShape:
    """Map a source array's rank and dimensions onto the canonical shape.

    Args:
        rank: Source array rank (1, 3 or 4)
        source_dims: Source dimension lengths, in order
        time_count: Length of the external time axis, if one is attached

    Raises:
        UnsupportedLayoutError: For any other rank, or a rank-1 array with a
            time axis
    """
    dims = [int(d) for d in source_dims]
    require(
        len(dims) >= rank,
        f"Rank {rank} array described by only {len(dims)} dimensions",
        UnsupportedLayoutError,
    )

    if rank == 4:
        return CanonicalShape(*dims[:4])
    if rank == 3:
        # The source's leading axis is replaced by the external time axis;
        # a rank-3 source never carries a level axis.
        return CanonicalShape(time_count or 1, 1, dims[1], dims[2])
    if rank == 1 and time_count is None:
        return CanonicalShape(1, 1, 1, dims[0])
    if rank == 1:
        raise UnsupportedLayoutError("Rank-1 arrays cannot carry a time axis")
    raise UnsupportedLayoutError(f"No flattening rule for rank {rank} arrays")


def flatten(source, shape: Sequence[int]) -> np.ndarray:
    """Copy ``source`` into a contiguous little-endian float32 buffer.

    Raises:
        UnsupportedLayoutError: If the source holds more than 2**31 - 1 values
        ShapeMismatchError: If the element count differs from ``prod(shape)``
    """
    values = np.asarray(source)
    if values.size > INT32_MAX:
        raise UnsupportedLayoutError(
            f"Arrays with more than {INT32_MAX} elements are not supported"
        )

    expected = CanonicalShape(*shape).size
    if values.size != expected:
        raise ShapeMismatchError(
            f"Array of {values.size} values does not match shape "
            f"{tuple(shape)} ({expected} values)"
        )

    return np.ascontiguousarray(values, dtype=VALUE_DTYPE).reshape(-1)
