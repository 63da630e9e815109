# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Variable record codec.

One record holds one variable as a single contiguous little-endian block::

    offset  size          field
    0       1             flags byte (bit 7: time axis present)
    1       24            name, 12 UTF-16 characters, space padded
    25      16            shape, 4 x int32 (time, level, lat, lon)
    41      n_times * 8   time axis, int64 seconds since 1970-01-01T00:00:00Z
    ...     n_values * 4  payload, float32, row-major

``n_times`` is ``shape[0]`` when the time flag is set and zero otherwise;
``n_values`` is the product of the shape. Records are written and read as a
whole; there is no partial access.
"""

import logging
import struct
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ncserial.core.exceptions import (
    RecordFormatError,
    ShapeMismatchError,
    TooLargeError,
    UnsupportedLayoutError,
)

from .blockio import read_block, write_block
from .flags import includes_time, pack_flags
from .flattener import CanonicalShape, flatten, infer_shape
from .layout import (
    FLAG_BYTES,
    HEADER_BYTES,
    MAX_BLOCK_VALUES,
    NAME_BYTES,
    SHAPE_FMT,
    TIME_DTYPE,
    VALUE_DTYPE,
    decode_fixed_text,
    encode_fixed_text,
)
from .time_codec import as_epoch_seconds, from_epoch_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableRecord:
    """A decoded variable record."""

    name: str
    flags: int
    shape: CanonicalShape
    data: np.ndarray
    epoch_times: Optional[np.ndarray] = None
    times: Optional[List[datetime]] = None

    @property
    def short_name(self) -> str:
        """Stored name without its space padding."""
        return self.name.rstrip(' ')

    @property
    def has_time(self) -> bool:
        return self.epoch_times is not None


def check_block_size(n_values: int) -> None:
    """Ensure a payload of ``n_values`` floats fits in a single block.

    Raises:
        TooLargeError: If ``n_values`` exceeds ``MAX_BLOCK_VALUES``
    """
    if n_values > MAX_BLOCK_VALUES:
        raise TooLargeError(
            f"Too many values ({n_values}) for single-block read/write "
            f"(limit {MAX_BLOCK_VALUES})"
        )


def pack_header(flags: int, name: str, shape: Sequence[int]) -> bytes:
    return (
        struct.pack('<B', flags)
        + encode_fixed_text(name)
        + struct.pack(SHAPE_FMT, *shape)
    )


def serialize_variable(
    name: str,
    source,
    rank: int,
    times: Optional[Sequence] = None,
) -> bytes:
    """Encode one variable as a record block.

    Args:
        name: Variable name; truncated or space padded to 12 characters
        source: Row-major array of the variable's values
        rank: Source rank (1, 3 or 4)
        times: Optional time axis, as epoch seconds (or timestamps); one
            entry per time step

    Returns:
        The complete record as bytes

    Raises:
        TooLargeError: If the array exceeds the single-block ceiling
        UnsupportedLayoutError: If the rank has no flattening rule
        ShapeMismatchError: If the array does not fit the canonical shape
    """
    values = np.asarray(source)
    check_block_size(values.size)

    epoch = as_epoch_seconds(times) if times is not None else None
    shape = infer_shape(rank, values.shape, len(epoch) if epoch is not None else None)
    if epoch is not None and len(epoch) != shape.time:
        raise ShapeMismatchError(
            f"Time axis of length {len(epoch)} does not match leading dimension {shape.time}"
        )
    payload = flatten(values, shape)

    parts = [pack_header(pack_flags(epoch is not None), name, shape)]
    if epoch is not None:
        parts.append(epoch.tobytes())
    parts.append(payload.tobytes())
    return b''.join(parts)


def write_variable(
    path: Path,
    name: str,
    source,
    rank: int,
    times: Optional[Sequence] = None,
) -> Path:
    """Serialize a variable and write it to ``path`` as one block.

    Raises:
        FileOperationError: If the file cannot be written
    """
    block = serialize_variable(name, source, rank, times)
    logger.debug("Serialized '%s' (rank %d) into %d bytes", name, rank, len(block))
    return write_block(path, block)


def read_shape_only(data: bytes) -> CanonicalShape:
    """Decode only the stored shape from a record's header.

    Raises:
        RecordFormatError: If fewer than the header's 41 bytes are available
    """
    return unpack_header(data)[2]


def unpack_header(data: bytes) -> Tuple[int, str, CanonicalShape]:
    if len(data) < HEADER_BYTES:
        raise RecordFormatError(
            f"Record header needs {HEADER_BYTES} bytes, got {len(data)}"
        )
    flags = data[0]
    name = decode_fixed_text(data[FLAG_BYTES:FLAG_BYTES + NAME_BYTES])
    shape = CanonicalShape(*struct.unpack_from(SHAPE_FMT, data, FLAG_BYTES + NAME_BYTES))
    if any(d < 0 for d in shape):
        raise RecordFormatError(f"Negative dimension in stored shape {tuple(shape)}")
    return flags, name, shape


def _output_shape(shape: CanonicalShape, rank: Optional[int]) -> Tuple[int, ...]:
    if rank is None:
        # The time axis may hold a single step, so only level, lat and lon count.
        spatial = shape.spatial_rank
        if spatial not in (2, 3):
            raise RecordFormatError(
                f"Shape {tuple(shape)} has {spatial} spatial dimensions longer "
                "than one, which has no reshape rule; pass the rank explicitly"
            )
        rank = spatial + 1
    if rank == 1:
        return (shape.size,)
    if rank == 3:
        if shape.level != 1:
            raise RecordFormatError(
                f"Shape {tuple(shape)} has {shape.level} levels and cannot be read as rank 3"
            )
        return (shape.time, shape.lat, shape.lon)
    if rank == 4:
        return tuple(shape)
    raise UnsupportedLayoutError(f"No reshape rule for rank {rank} arrays")


def deserialize_variable(data: bytes, rank: Optional[int] = None) -> VariableRecord:
    """Decode a record block.

    Args:
        data: The record bytes
        rank: Output rank (1, 3 or 4). When omitted it is inferred by
            counting the level, lat and lon dimensions longer than one (two
            gives rank 3, three gives rank 4), which cannot tell a genuine
            length-one dimension from an absent one.

    Raises:
        RecordFormatError: If the block is truncated or its shape has no
            reshape rule
    """
    flags, name, shape = unpack_header(data)
    n_values = shape.size
    n_times = shape.time if includes_time(flags) else 0

    needed = HEADER_BYTES + n_times * TIME_DTYPE.itemsize + n_values * VALUE_DTYPE.itemsize
    if len(data) < needed:
        raise RecordFormatError(
            f"Truncated record '{name.rstrip()}': expected {needed} bytes, got {len(data)}"
        )
    if len(data) > needed:
        logger.debug("Ignoring %d trailing bytes after record '%s'", len(data) - needed, name.rstrip())

    out_shape = _output_shape(shape, rank)

    epoch_times = None
    times = None
    if includes_time(flags):
        epoch_times = np.frombuffer(data, dtype=TIME_DTYPE, count=n_times, offset=HEADER_BYTES)
        epoch_times = epoch_times.astype(np.int64)
        times = from_epoch_array(epoch_times)

    offset = HEADER_BYTES + n_times * TIME_DTYPE.itemsize
    payload = np.frombuffer(data, dtype=VALUE_DTYPE, count=n_values, offset=offset)
    payload = payload.astype(np.float32).reshape(out_shape)

    return VariableRecord(
        name=name,
        flags=flags,
        shape=shape,
        data=payload,
        epoch_times=epoch_times,
        times=times,
    )


def read_variable(path: Path, rank: Optional[int] = None) -> VariableRecord:
    """Read and decode a variable record file."""
    return deserialize_variable(read_block(path), rank=rank)


def read_variable_shape(path: Path) -> CanonicalShape:
    """Read only the header of a record file and return its stored shape."""
    return read_shape_only(read_block(path, HEADER_BYTES))


def get_rank(path: Path) -> int:
    """Classify a record file by the number of stored dimensions longer than one."""
    return read_variable_shape(path).resolved_rank
