"""
Flat binary codec for gridded NetCDF variables.

Provides the variable record and dimension file formats together with the
flag, time and flattening helpers they are built from.
"""

from .dimension_file import (
    AXIS_TAGS,
    DimensionSet,
    deserialize_dimensions,
    read_dimension_file,
    serialize_dimensions,
    write_dimension_file,
)
from .flags import pack_flags, unpack_flags
from .flattener import CanonicalShape, flatten, infer_shape
from .layout import HEADER_BYTES, MAX_BLOCK_VALUES
from .time_codec import (
    decode_units,
    from_epoch_seconds,
    read_file_times,
    to_epoch_seconds,
)
from .variable_record import (
    VariableRecord,
    check_block_size,
    deserialize_variable,
    get_rank,
    read_shape_only,
    read_variable,
    read_variable_shape,
    serialize_variable,
    write_variable,
)

__all__ = [
    "AXIS_TAGS",
    "HEADER_BYTES",
    "MAX_BLOCK_VALUES",
    "CanonicalShape",
    "DimensionSet",
    "VariableRecord",
    "check_block_size",
    "decode_units",
    "deserialize_dimensions",
    "deserialize_variable",
    "flatten",
    "from_epoch_seconds",
    "get_rank",
    "infer_shape",
    "pack_flags",
    "read_dimension_file",
    "read_file_times",
    "read_shape_only",
    "read_variable",
    "read_variable_shape",
    "serialize_dimensions",
    "serialize_variable",
    "to_epoch_seconds",
    "unpack_flags",
    "write_dimension_file",
    "write_variable",
]
