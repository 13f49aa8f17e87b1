"""Partition table walk.

Descriptors are variable-size: each starts with its own total length, and the
next descriptor begins right after it. Only the known leading fields are
decoded; anything past them up to ``length`` is skipped.
"""
from __future__ import annotations
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, Tuple

from pac.errors import FormatError
from pac.text_field import text_field_path, text_field_str

__all__ = [
    'DESCRIPTOR_FMT', 'DESCRIPTOR_SIZE', 'LENGTH_FMT', 'LENGTH_SIZE',
    'PartitionDescriptor', 'parse_descriptor', 'iter_partition_table', 'walk_partition_table',
]

logger = logging.getLogger(__name__)

LENGTH_FMT = '<I'
LENGTH_SIZE = struct.calcsize(LENGTH_FMT)
# length I, partitionName 256H, fileName 512H, partitionSize I, reserved 2I,
# partitionAddrInPac I, reserved 3I
DESCRIPTOR_FMT = '<I256H512HI2II3I'
DESCRIPTOR_SIZE = struct.calcsize(DESCRIPTOR_FMT)  # 1568


@dataclass(frozen=True)
class PartitionDescriptor:
    offset: int
    length: int
    partition_name_units: Tuple[int, ...]
    file_name_units: Tuple[int, ...]
    partition_size: int
    reserved0: Tuple[int, ...]
    addr_in_container: int
    reserved1: Tuple[int, ...]

    @property
    def partition_name(self) -> str:
        return text_field_str(self.partition_name_units)

    @property
    def file_name(self) -> str:
        return text_field_str(self.file_name_units)

    @property
    def file_name_path(self) -> str:
        return text_field_path(self.file_name_units)

    @property
    def next_offset(self) -> int:
        return self.offset + self.length


def parse_descriptor(data: bytes, offset: int = 0) -> PartitionDescriptor:
    """Decode the known fields at the start of ``data``; trailing bytes are ignored.

    ``offset`` is where the record was found in the container (informational).
    """
    if len(data) < DESCRIPTOR_SIZE:
        raise FormatError(f"descriptor at 0x{offset:X} needs {DESCRIPTOR_SIZE} bytes, got {len(data)}",
                          operation='read partition descriptor')
    v = struct.unpack_from(DESCRIPTOR_FMT, data)
    return PartitionDescriptor(
        offset=offset,
        length=v[0],
        partition_name_units=v[1:257],
        file_name_units=v[257:769],
        partition_size=v[769],
        reserved0=v[770:772],
        addr_in_container=v[772],
        reserved1=v[773:776],
    )


def _source_size(source: BinaryIO, path: Optional[str]) -> int:
    try:
        return source.seek(0, os.SEEK_END)
    except (OSError, ValueError) as e:
        raise FormatError(f"cannot size container: {e}", path=path, operation='read partition table') from e


def _read_exact(source: BinaryIO, offset: int, size: int, what: str, path: Optional[str], limit: int) -> bytes:
    # checked up front so a corrupt length never turns into a huge read
    if offset + size > limit:
        raise FormatError(f"{what} at 0x{offset:X} runs past end of file ({size} bytes, file is {limit})",
                          path=path, operation='read partition table')
    try:
        source.seek(offset)
        data = source.read(size)
    except (OSError, ValueError, OverflowError) as e:
        raise FormatError(f"{what} at 0x{offset:X}: {e}", path=path, operation='read partition table') from e
    if len(data) != size:
        raise FormatError(f"truncated {what} at 0x{offset:X} ({len(data)} of {size} bytes)",
                          path=path, operation='read partition table')
    return data


def iter_partition_table(source: BinaryIO, start: int, count: int, path: Optional[str] = None) -> Iterator[PartitionDescriptor]:
    """Yield ``count`` descriptors chained from ``start`` by their own length field."""
    if count < 0:
        raise FormatError(f"negative partition count {count}", path=path, operation='read partition table')
    if count and start < 0:
        raise FormatError(f"negative partition table offset {start}", path=path, operation='read partition table')
    limit = _source_size(source, path)
    cursor = start
    for index in range(count):
        (length,) = struct.unpack(LENGTH_FMT, _read_exact(source, cursor, LENGTH_SIZE, 'descriptor length', path, limit))
        # a record declared shorter than the known fields still has them read in full
        record = _read_exact(source, cursor, max(length, DESCRIPTOR_SIZE), 'partition descriptor', path, limit)
        desc = parse_descriptor(record, offset=cursor)
        logger.debug("descriptor %d @0x%X length=%d size=%d addr=0x%X",
                     index, cursor, length, desc.partition_size, desc.addr_in_container)
        yield desc
        cursor += length


def walk_partition_table(source: BinaryIO, start: int, count: int, path: Optional[str] = None) -> List[PartitionDescriptor]:
    """Eager form of :func:`iter_partition_table`: the whole table or an error."""
    return list(iter_partition_table(source, start, count, path))
