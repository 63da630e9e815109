# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 ncserial developers

"""Byte layout constants and fixed-width text helpers shared by the codecs."""

import struct

import numpy as np

# ── Text fields ─────────────────────────────────────────────────────────────

NAME_LENGTH = 12                    # characters
TEXT_ENCODING = "utf-16-le"         # 2 bytes per character
NAME_BYTES = 2 * NAME_LENGTH

# ── Variable record header (little-endian) ──────────────────────────────────
#
#   flags(u8)  name[24]  shape(4 x i32)
#   [times (n_times x i64)]  payload (n_values x f32)

FLAG_BYTES = 1
SHAPE_FMT = "<4i"
SHAPE_BYTES = struct.calcsize(SHAPE_FMT)
HEADER_BYTES = FLAG_BYTES + NAME_BYTES + SHAPE_BYTES

TIME_DTYPE = np.dtype("<i8")
VALUE_DTYPE = np.dtype("<f4")

# ── Dimension file records ─────────────────────────────────────────────────
#
#   tag[24]  count(i32)  values (count x element)

COUNT_FMT = "<i"
COUNT_BYTES = struct.calcsize(COUNT_FMT)
AXIS_HEADER_BYTES = NAME_BYTES + COUNT_BYTES

LEVEL_DTYPE = np.dtype("<i4")
COORD_DTYPE = np.dtype("<f4")

# ── Size limits ─────────────────────────────────────────────────────────────

INT32_MAX = 2**31 - 1
# Largest payload that fits a single block with 500 bytes of header headroom
MAX_BLOCK_VALUES = (INT32_MAX - 500) // VALUE_DTYPE.itemsize


def encode_fixed_text(text: str, length: int = NAME_LENGTH) -> bytes:
    """Encode *text* as exactly ``length`` UTF-16 code units.

    Longer text is truncated, shorter text is padded with spaces. Characters
    outside the Basic Multilingual Plane take two code units; if one would be
    split by the cut it is dropped and replaced by padding.
    """
    chars = text[:length]
    raw = chars.encode(TEXT_ENCODING)
    size = 2 * length
    while len(raw) > size:
        chars = chars[:-1]
        raw = chars.encode(TEXT_ENCODING)
    return raw + " ".encode(TEXT_ENCODING) * ((size - len(raw)) // 2)


def decode_fixed_text(raw: bytes) -> str:
    """Decode a fixed-width UTF-16 text field, keeping its padding."""
    return bytes(raw).decode(TEXT_ENCODING, errors="replace")
