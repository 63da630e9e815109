# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""
Time axis conversion.

Converts CF-style time offsets (integers plus a units string such as
``"hours since 1970-01-01 00:00:00"``) into calendar timestamps, and
timestamps to and from whole seconds since 1970-01-01T00:00:00Z, the
representation stored on disk.

Timestamps are naive ``datetime`` objects representing UTC. Timezone-aware
inputs are converted to UTC first.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Sequence, Union

import numpy as np
import pandas as pd

from ncserial.core.exceptions import InvalidFormatError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)

UNIT_SECONDS = {
    'seconds': 1,
    'minutes': 60,
    'hours': 3600,
    'days': 86400,
}

TimestampLike = Union[datetime, pd.Timestamp, np.datetime64]


def _unit_multiplier(units: str, keyword: str) -> int:
    try:
        return UNIT_SECONDS[keyword.lower()]
    except KeyError:
        raise InvalidFormatError(
            f"Invalid time units '{keyword}' in string '{units}'"
        ) from None


def _parse_reference(units: str, tokens: List[str]) -> datetime:
    """Parse the reference date (token 2) and time of day (token 3)."""
    text = " ".join(tokens[2:4])
    try:
        ref = pd.Timestamp(text)
    except (ValueError, OverflowError) as exc:
        raise InvalidFormatError(
            f"Cannot parse reference time '{text}' in units '{units}'"
        ) from exc
    if ref is pd.NaT:
        raise InvalidFormatError(f"Cannot parse reference time '{text}' in units '{units}'")
    return _as_naive_utc(ref.to_pydatetime(warn=False))


def _as_naive_utc(ts: datetime) -> datetime:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def _as_integer_offsets(deltas: Iterable) -> np.ndarray:
    values = np.asarray(deltas)
    if values.dtype.kind in 'iu':
        return values.astype(np.int64).ravel()
    if values.dtype.kind == 'f':
        if not np.all(np.isfinite(values)) or np.any(np.mod(values, 1) != 0):
            raise InvalidFormatError("Time offsets must be whole numbers")
        return values.astype(np.int64).ravel()
    try:
        return np.array([int(v) for v in values.ravel()], dtype=np.int64)
    except (TypeError, ValueError) as exc:
        raise InvalidFormatError(f"Time offsets must be integers: {exc}") from exc


def decode_units(units: str, deltas: Iterable) -> List[datetime]:
    """Convert integer offsets and a units string into timestamps.

    Args:
        units: CF units string, e.g. ``"minutes since 2023-01-01 00:00:00.0"``
        deltas: Integer offsets from the reference time

    Returns:
        One naive UTC datetime per offset

    Raises:
        InvalidFormatError: If the keyword is not seconds, minutes, hours or
            days, or the reference time cannot be parsed
    """
    tokens = str(units).split()
    if len(tokens) < 3 or tokens[1].lower() != 'since':
        raise InvalidFormatError(f"Malformed time units string '{units}'")

    multiplier = _unit_multiplier(units, tokens[0])
    ref = _parse_reference(units, tokens)

    try:
        return [
            ref + timedelta(seconds=int(delta) * multiplier)
            for delta in _as_integer_offsets(deltas)
        ]
    except OverflowError as exc:
        raise InvalidFormatError(f"Time offsets out of range for units '{units}'") from exc


def to_epoch_seconds(ts: TimestampLike) -> int:
    """Whole seconds elapsed since 1970-01-01T00:00:00Z (negative before it).

    Sub-second parts are truncated toward zero.
    """
    if isinstance(ts, np.datetime64):
        ts = pd.Timestamp(ts).to_pydatetime(warn=False)
    delta = _as_naive_utc(ts) - EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    seconds = abs(micros) // 1_000_000
    return seconds if micros >= 0 else -seconds


def from_epoch_seconds(seconds: int) -> datetime:
    """Inverse of :func:`to_epoch_seconds` at whole-second granularity."""
    return EPOCH + timedelta(seconds=int(seconds))


def to_epoch_array(timestamps: Iterable[TimestampLike]) -> np.ndarray:
    """Convert a sequence of timestamps into an int64 epoch-seconds array."""
    return np.array([to_epoch_seconds(ts) for ts in timestamps], dtype=np.int64)


def from_epoch_array(seconds: Sequence[int]) -> List[datetime]:
    return [from_epoch_seconds(s) for s in np.asarray(seconds, dtype=np.int64)]


def as_epoch_seconds(times: Iterable) -> np.ndarray:
    """Normalise a time axis to little-endian int64 epoch seconds.

    Integer input is taken to be epoch seconds already; datetimes and
    ``datetime64`` values are converted.

    Raises:
        InvalidFormatError: For any other element type
    """
    values = np.asarray(times)
    if values.dtype.kind in 'iu':
        return values.astype('<i8').ravel()
    if values.dtype.kind in 'MO':
        try:
            return to_epoch_array(values.ravel()).astype('<i8')
        except (TypeError, AttributeError) as exc:
            raise InvalidFormatError(f"Time axis holds non-timestamp values: {exc}") from exc
    raise InvalidFormatError(
        f"Time axis must hold integer epoch seconds or timestamps, got {values.dtype}"
    )


def read_file_times(provider, time_variable: str = 'time') -> np.ndarray:
    """Read a dataset's time axis as epoch seconds.

    Args:
        provider: Object satisfying the ``DatasetProvider`` contract
        time_variable: Name of the time coordinate variable

    Returns:
        int64 array of seconds since 1970-01-01T00:00:00Z
    """
    deltas = provider.get_array(time_variable)
    if np.asarray(deltas).dtype.kind == 'M':
        # Already decoded by the provider
        return as_epoch_seconds(deltas).astype(np.int64)
    units = provider.get_attribute(time_variable, 'units')
    times = to_epoch_array(decode_units(units, deltas))
    logger.debug("Read %d file times from '%s' (%s)", len(times), time_variable, units)
    return times
