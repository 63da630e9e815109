# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Custom exception hierarchy for ncserial.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the different failure modes of the binary codec and the
dataset serialization workflow.
"""

import logging
from contextlib import contextmanager
from typing import Optional


class NCSerialError(Exception):
    """
    Base exception for all ncserial-specific errors.

    All custom exceptions in ncserial inherit from this class.
    This allows catching all ncserial errors with a single except clause.
    """
    pass


class ConfigurationError(NCSerialError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration file cannot be loaded or parsed
    - Configuration values are invalid
    - A requested variable category is not configured
    """
    pass


class CodecError(NCSerialError):
    """Base class for errors raised while encoding or decoding binary records."""
    pass


class InvalidFormatError(CodecError):
    """
    Unparsable textual input.

    Raised when:
    - A time units string cannot be parsed
    - The time unit keyword is not seconds, minutes, hours or days
    - Time offsets are not whole numbers
    """
    pass


class TooLargeError(CodecError):
    """Raised when an array exceeds the single-block size ceiling."""
    pass


class UnsupportedLayoutError(CodecError):
    """
    Array layout with no defined flattening or reshaping rule.

    Raised when:
    - The source array rank is not 1, 3 or 4
    - A rank-1 array is paired with a time axis
    - The source array has more than 2**31 - 1 elements
    """
    pass


class ShapeMismatchError(UnsupportedLayoutError):
    """Raised when an array's element count does not match its canonical shape."""
    pass


class RecordFormatError(CodecError):
    """
    Truncated or malformed binary record.

    Raised when:
    - Fewer bytes are available than the header declares
    - A stored shape holds negative dimensions
    - The stored shape resolves to a rank with no reshape rule
    """
    pass


class UnknownAxisTagError(InvalidFormatError, RecordFormatError):
    """Raised when a dimension file record carries an unrecognised tag."""
    pass


class FileOperationError(NCSerialError):
    """
    File I/O operation failures.

    Raised when:
    - A record file cannot be written or replaced
    - A record file cannot be opened or read
    """
    pass


class ProviderError(NCSerialError):
    """
    Dataset provider failures.

    Raised when:
    - The source dataset cannot be opened
    - A requested variable or attribute is missing
    """
    pass


# =============================================================================
# Validation Helpers
# =============================================================================


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: CodecError)

    Raises:
        CodecError (or specified error_type) if condition is False

    Example:
        >>> require(rank in (1, 3, 4), f"Unsupported rank {rank}", UnsupportedLayoutError)
    """
    if error_type is None:
        error_type = CodecError
    if not condition:
        raise error_type(message)


@contextmanager
def ncserial_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = NCSerialError
):
    """
    Context manager for standardized error handling.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        reraise: Whether to re-raise the exception after handling (default: True)
        error_type: ncserial exception type to convert generic exceptions to

    Raises:
        The original exception if it's already an NCSerialError, or the
        specified error_type if reraise=True

    Example:
        >>> with ncserial_error_handler("opening dataset", logger, error_type=ProviderError):
        ...     ds = xr.open_dataset(path)
    """
    try:
        yield
    except NCSerialError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


__all__ = [
    'NCSerialError',
    'ConfigurationError',
    'CodecError',
    'InvalidFormatError',
    'TooLargeError',
    'UnsupportedLayoutError',
    'ShapeMismatchError',
    'RecordFormatError',
    'UnknownAxisTagError',
    'FileOperationError',
    'ProviderError',
    'require',
    'ncserial_error_handler',
]
