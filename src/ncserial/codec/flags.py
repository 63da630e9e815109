"""
Feature flag byte for variable records.

Bits are numbered from the least significant (index 0). Only bit 7 is
defined: a time axis follows the header.
"""

from typing import List

FLAG_COUNT = 8
TIME_PRESENT_BIT = 7


def pack_flags(includes_time: bool) -> int:
    """Pack the record feature flags into a single byte value."""
    flags = [False] * FLAG_COUNT
    flags[TIME_PRESENT_BIT] = bool(includes_time)
    byte = 0
    for i, flag in enumerate(flags):
        if flag:
            byte |= 1 << i
    return byte


def unpack_flags(byte: int) -> List[bool]:
    """Unpack a flag byte into eight booleans, index 0 = least significant bit."""
    return [(byte & (1 << i)) != 0 for i in range(FLAG_COUNT)]


def includes_time(byte: int) -> bool:
    return unpack_flags(byte)[TIME_PRESENT_BIT]
