# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Dimension file codec.

A dimension file stores the coordinate axes shared by a set of variable
records as a flat sequence of tagged records, read until end of stream::

    tag      24 bytes, 12 UTF-16 characters, space padded
    count    int32
    values   count x element (int64 for TIME, int32 for LEVELS,
             float32 for LAT1D and LON1D)

Writers always emit all four records in the order TIME, LEVELS, LAT1D,
LON1D; an absent axis is written with ``count = 0`` and no values. The
LEVELS record holds the number of vertical levels as its single value.
"""

import logging
import struct
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ncserial.core.exceptions import RecordFormatError, TooLargeError, UnknownAxisTagError

from .blockio import read_block, write_block
from .layout import (
    AXIS_HEADER_BYTES,
    COORD_DTYPE,
    COUNT_FMT,
    INT32_MAX,
    LEVEL_DTYPE,
    NAME_BYTES,
    TIME_DTYPE,
    decode_fixed_text,
    encode_fixed_text,
)
from .time_codec import as_epoch_seconds, from_epoch_array

logger = logging.getLogger(__name__)

TIME_TAG = 'TIME'
LEVELS_TAG = 'LEVELS'
LAT_TAG = 'LAT1D'
LON_TAG = 'LON1D'

AXIS_TAGS: Tuple[str, ...] = (TIME_TAG, LEVELS_TAG, LAT_TAG, LON_TAG)

AXIS_DTYPES: Dict[str, np.dtype] = {
    TIME_TAG: TIME_DTYPE,
    LEVELS_TAG: LEVEL_DTYPE,
    LAT_TAG: COORD_DTYPE,
    LON_TAG: COORD_DTYPE,
}

_ENCODED_TAGS: Dict[bytes, str] = {encode_fixed_text(tag): tag for tag in AXIS_TAGS}


@dataclass(frozen=True)
class DimensionSet:
    """Decoded contents of a dimension file.

    ``presence`` holds one flag per axis, in ``AXIS_TAGS`` order, telling
    whether that axis's record was seen. A record with ``count = 0`` counts
    as seen; its values are empty.
    """

    times: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.int64))
    level_count: Optional[int] = None
    lats: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float32))
    lons: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.float32))
    presence: Tuple[bool, bool, bool, bool] = (False, False, False, False)

    @property
    def timestamps(self) -> List[datetime]:
        return from_epoch_array(self.times)

    def has_axis(self, tag: str) -> bool:
        return self.presence[AXIS_TAGS.index(tag)]


def _axis_record(tag: str, values: Optional[np.ndarray]) -> bytes:
    if values is None:
        values = np.empty(0, dtype=AXIS_DTYPES[tag])
    if len(values) > INT32_MAX:
        raise TooLargeError(f"Axis {tag} has too many values ({len(values)})")
    return (
        encode_fixed_text(tag)
        + struct.pack(COUNT_FMT, len(values))
        + np.ascontiguousarray(values, dtype=AXIS_DTYPES[tag]).tobytes()
    )


def serialize_dimensions(
    times: Optional[Sequence] = None,
    level_count: Optional[int] = None,
    lats: Optional[Sequence[float]] = None,
    lons: Optional[Sequence[float]] = None,
) -> bytes:
    """Encode the four shared axes as a dimension file block.

    Args:
        times: Time axis as epoch seconds (or timestamps)
        level_count: Number of vertical levels
        lats: Latitude values
        lons: Longitude values

    Returns:
        Four records, TIME, LEVELS, LAT1D, LON1D; ``None`` axes get ``count = 0``
    """
    axes = {
        TIME_TAG: as_epoch_seconds(times) if times is not None else None,
        LEVELS_TAG: np.array([level_count]) if level_count is not None else None,
        LAT_TAG: np.asarray(lats).ravel() if lats is not None else None,
        LON_TAG: np.asarray(lons).ravel() if lons is not None else None,
    }
    return b''.join(_axis_record(tag, axes[tag]) for tag in AXIS_TAGS)


def deserialize_dimensions(data: bytes) -> DimensionSet:
    """Decode a dimension file block.

    Raises:
        UnknownAxisTagError: If a record carries a tag other than the four
            known axes
        RecordFormatError: If the stream ends in the middle of a record
    """
    values: Dict[str, np.ndarray] = {}
    offset = 0
    while offset < len(data):
        if len(data) - offset < AXIS_HEADER_BYTES:
            raise RecordFormatError(
                f"Truncated axis record header at byte {offset}: "
                f"{len(data) - offset} of {AXIS_HEADER_BYTES} bytes"
            )
        raw_tag = bytes(data[offset:offset + NAME_BYTES])
        tag = _ENCODED_TAGS.get(raw_tag)
        if tag is None:
            raise UnknownAxisTagError(
                f"Unknown axis tag '{decode_fixed_text(raw_tag).rstrip()}' at byte {offset}"
            )
        (count,) = struct.unpack_from(COUNT_FMT, data, offset + NAME_BYTES)
        if count < 0:
            raise RecordFormatError(f"Negative value count {count} in axis record {tag}")

        offset += AXIS_HEADER_BYTES
        dtype = AXIS_DTYPES[tag]
        size = count * dtype.itemsize
        if len(data) - offset < size:
            raise RecordFormatError(
                f"Truncated axis record {tag}: expected {size} value bytes, "
                f"got {len(data) - offset}"
            )
        values[tag] = np.frombuffer(data, dtype=dtype, count=count, offset=offset).copy()
        offset += size

    level_count = None
    levels = values.get(LEVELS_TAG)
    if levels is not None and len(levels) > 1:
        raise RecordFormatError(f"LEVELS record must hold one value, got {len(levels)}")
    if levels is not None and len(levels) == 1:
        level_count = int(levels[0])

    result = DimensionSet(
        times=values.get(TIME_TAG, np.empty(0, dtype=TIME_DTYPE)).astype(np.int64),
        level_count=level_count,
        lats=values.get(LAT_TAG, np.empty(0, dtype=COORD_DTYPE)).astype(np.float32),
        lons=values.get(LON_TAG, np.empty(0, dtype=COORD_DTYPE)).astype(np.float32),
        presence=tuple(tag in values for tag in AXIS_TAGS),
    )
    logger.debug("Decoded dimension file with axes %s", [t for t in AXIS_TAGS if t in values])
    return result


def write_dimension_file(
    path: Path,
    times: Optional[Sequence] = None,
    level_count: Optional[int] = None,
    lats: Optional[Sequence[float]] = None,
    lons: Optional[Sequence[float]] = None,
) -> Path:
    """Serialize the shared axes and write them to ``path`` as one block."""
    return write_block(path, serialize_dimensions(times, level_count, lats, lons))


def read_dimension_file(path: Path) -> DimensionSet:
    return deserialize_dimensions(read_block(path))
