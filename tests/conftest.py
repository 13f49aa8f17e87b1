import struct
import pytest

HEADER_LEN = 1220
DESC_LEN = 1568


def units(text, capacity):
    raw = text.encode('latin-1')[:capacity]
    return list(raw) + [0] * (capacity - len(raw))


def header_bytes(count, start, firmware_name='TEST_FW', product_name='PRODUCT', product_name2='ALIAS'):
    return (struct.pack('<24H', *[0x11] * 24) + struct.pack('<I', 0x22)
            + struct.pack('<256H', *units(product_name, 256))
            + struct.pack('<256H', *units(firmware_name, 256))
            + struct.pack('<ii', count, start)
            + struct.pack('<5I', *[0x33] * 5)
            + struct.pack('<50H', *units(product_name2, 50))
            + struct.pack('<6H', *[0x44] * 6) + struct.pack('<2H', 0x55, 0x66))


def descriptor_bytes(file_name, size, addr, partition_name=None, length=None, trailing=b''):
    if partition_name is None:
        partition_name = file_name.split('.')[0]
    body = (struct.pack('<256H', *units(partition_name, 256))
            + struct.pack('<512H', *units(file_name, 512))
            + struct.pack('<I', size) + struct.pack('<2I', 7, 8)
            + struct.pack('<I', addr) + struct.pack('<3I', 9, 10, 11)
            + trailing)
    if length is None:
        length = 4 + len(body)
    return struct.pack('<I', length) + body


class PacBuilder:
    """Sparse byte image: blobs dropped at absolute offsets, zero filled in between."""
    def __init__(self):
        self.data = bytearray()

    def put(self, offset, blob):
        end = offset + len(blob)
        if len(self.data) < end:
            self.data.extend(b'\x00' * (end - len(self.data)))
        self.data[offset:end] = blob
        return self

    def write(self, path):
        path.write_bytes(bytes(self.data))
        return path


def payload(size, seed=1):
    return bytes((i * 31 + seed) & 0xFF for i in range(size))


@pytest.fixture
def make_pac(tmp_path):
    """Build a well-formed container: header, contiguous table, then partition data.

    ``partitions`` is a list of (file_name, data) pairs; empty data means a
    zero-size descriptor.
    """
    def _make(partitions, name='fw.pac', table_start=HEADER_LEN, trailing=0):
        b = PacBuilder()
        b.put(0, header_bytes(len(partitions), table_start))
        data_off = table_start + len(partitions) * (DESC_LEN + trailing)
        cursor = table_start
        for file_name, data in partitions:
            addr = data_off if data else 0
            b.put(cursor, descriptor_bytes(file_name, len(data), addr, trailing=b'\xAA' * trailing))
            cursor += DESC_LEN + trailing
            if data:
                b.put(addr, data)
                data_off += len(data)
        return b.write(tmp_path / name)
    return _make


def with_file_name_unit(record, index, unit):
    """Overwrite one raw 16-bit unit of a descriptor's fileName field."""
    pos = 4 + 512 + 2 * index
    return record[:pos] + struct.pack('<H', unit) + record[pos + 2:]
