"""PAC container header (fixed 1220-byte record at offset 0)."""
from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

from pac.errors import FormatError
from pac.text_field import text_field_str

__all__ = ['HEADER_FMT', 'HEADER_SIZE', 'FirmwareHeader', 'parse_header', 'read_header']

# reserved 24H, reserved I, productName 256H, firmwareName 256H,
# partitionCount i, partitionsListStart i, reserved 5I, productName2 50H,
# reserved 6H, reserved 2H
HEADER_FMT = '<24HI256H256Hii5I50H6H2H'
HEADER_SIZE = struct.calcsize(HEADER_FMT)  # 1220


@dataclass(frozen=True)
class FirmwareHeader:
    reserved0: Tuple[int, ...]
    reserved1: int
    product_name_units: Tuple[int, ...]
    firmware_name_units: Tuple[int, ...]
    partition_count: int
    partitions_list_start: int
    reserved2: Tuple[int, ...]
    product_name2_units: Tuple[int, ...]
    reserved3: Tuple[int, ...]
    reserved4: Tuple[int, ...]

    @property
    def product_name(self) -> str:
        return text_field_str(self.product_name_units)

    @property
    def firmware_name(self) -> str:
        return text_field_str(self.firmware_name_units)

    @property
    def product_name2(self) -> str:
        return text_field_str(self.product_name2_units)


def parse_header(data: bytes) -> FirmwareHeader:
    if len(data) < HEADER_SIZE:
        raise FormatError(f"header needs {HEADER_SIZE} bytes, got {len(data)}", operation='read header')
    v = struct.unpack_from(HEADER_FMT, data)
    # slice the flat tuple back into fields
    return FirmwareHeader(
        reserved0=v[0:24],
        reserved1=v[24],
        product_name_units=v[25:281],
        firmware_name_units=v[281:537],
        partition_count=v[537],
        partitions_list_start=v[538],
        reserved2=v[539:544],
        product_name2_units=v[544:594],
        reserved3=v[594:600],
        reserved4=v[600:602],
    )


def read_header(source: BinaryIO, path: Optional[str] = None) -> FirmwareHeader:
    """Read and decode the header from ``source`` (positioned at offset 0)."""
    try:
        data = source.read(HEADER_SIZE)
    except OSError as e:
        raise FormatError(f"read failed: {e}", path=path, operation='read header') from e
    if len(data) != HEADER_SIZE:
        raise FormatError(f"truncated header ({len(data)} of {HEADER_SIZE} bytes)", path=path, operation='read header')
    return parse_header(data)
