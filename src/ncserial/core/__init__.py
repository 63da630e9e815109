"""Core infrastructure shared by the codec and the serialization workflow."""

from .config import DEFAULT_VARIABLE_SETS, FROZEN_CONFIG, SerializerConfig
from .exceptions import (
    CodecError,
    ConfigurationError,
    FileOperationError,
    InvalidFormatError,
    NCSerialError,
    ProviderError,
    RecordFormatError,
    ShapeMismatchError,
    TooLargeError,
    UnknownAxisTagError,
    UnsupportedLayoutError,
)
from .timing import TimingMixin

__all__ = [
    "DEFAULT_VARIABLE_SETS",
    "FROZEN_CONFIG",
    "SerializerConfig",
    "TimingMixin",
    "NCSerialError",
    "ConfigurationError",
    "CodecError",
    "InvalidFormatError",
    "TooLargeError",
    "UnsupportedLayoutError",
    "ShapeMismatchError",
    "RecordFormatError",
    "UnknownAxisTagError",
    "FileOperationError",
    "ProviderError",
]
