"""Fixed-capacity 16-bit text fields used throughout PAC metadata.

The container stores names as arrays of little-endian 16-bit code units.
Legacy tools only ever kept the low byte of each unit, and the file names they
wrote to disk depend on that, so the lossy decoding is kept as is.
"""
from __future__ import annotations
import os
from typing import Sequence

__all__ = ['decode_text_field', 'text_field_str', 'text_field_path']


def decode_text_field(units: Sequence[int]) -> bytes:
    """Low byte of each unit up to (not including) the first zero unit.

    Stops at ``len(units)`` when no terminator is present, so the result is
    never longer than the field capacity.
    """
    out = bytearray()
    for unit in units:
        if unit == 0:
            break
        out.append(unit & 0xFF)
    return bytes(out)


def text_field_str(units: Sequence[int]) -> str:
    # one character per byte, no decoding errors possible
    return decode_text_field(units).decode('latin-1')


def text_field_path(units: Sequence[int]) -> str:
    """Decoded field as a filesystem name (raw bytes preserved on POSIX)."""
    return os.fsdecode(decode_text_field(units))
