import io
import os
import pytest

from pac.errors import FilesystemError, FormatError, PacIOError
from pac.extractor import BUFFER_SIZE, destination_path, extract_partition
from pac.partition_table import parse_descriptor
from conftest import descriptor_bytes, payload


def _desc(file_name, size, addr):
    return parse_descriptor(descriptor_bytes(file_name, size, addr))


def test_copies_exact_slice_in_chunks(tmp_path):
    size = 2 * BUFFER_SIZE + 123
    blob = b'\xff' * 777 + payload(size) + b'\xee' * 50
    fractions = []
    lines = []
    out = extract_partition(io.BytesIO(blob), _desc('super.img', size, 777), str(tmp_path),
                            progress_cb=fractions.append, log_func=lines.append)
    assert out == os.path.join(str(tmp_path), 'super.img')
    assert (tmp_path / 'super.img').read_bytes() == blob[777:777 + size]
    assert len(fractions) == 3
    assert fractions == sorted(fractions)
    assert all(0 < f <= 1 for f in fractions)
    assert fractions[-1] == 1.0
    assert lines == [f"Extracting to {out}"]


def test_empty_partition_creates_nothing(tmp_path):
    called = []
    assert extract_partition(io.BytesIO(b''), _desc('system.img', 0, 0), str(tmp_path), progress_cb=called.append) is None
    assert not (tmp_path / 'system.img').exists()
    assert called == []


def test_overwrites_existing_file(tmp_path):
    (tmp_path / 'boot.img').write_bytes(b'old' * 1000)
    data = payload(100)
    extract_partition(io.BytesIO(data), _desc('boot.img', 100, 0), str(tmp_path))
    assert (tmp_path / 'boot.img').read_bytes() == data


def test_source_too_short(tmp_path):
    with pytest.raises(PacIOError):
        extract_partition(io.BytesIO(payload(1000)), _desc('boot.img', 600, 500), str(tmp_path))


def test_offset_past_end(tmp_path):
    with pytest.raises(PacIOError):
        extract_partition(io.BytesIO(payload(10)), _desc('boot.img', 4, 4096), str(tmp_path))


def test_existing_directory_cannot_be_removed(tmp_path):
    blocker = tmp_path / 'boot.img'
    blocker.mkdir()
    (blocker / 'keep').write_bytes(b'x')
    with pytest.raises(FilesystemError):
        extract_partition(io.BytesIO(payload(10)), _desc('boot.img', 10, 0), str(tmp_path))
    assert (blocker / 'keep').exists()


def test_missing_output_dir(tmp_path):
    with pytest.raises(FilesystemError):
        extract_partition(io.BytesIO(payload(10)), _desc('boot.img', 10, 0), str(tmp_path / 'nope'))


@pytest.mark.parametrize('name', ['', '../evil.img', '/etc/evil.img', 'a/../../evil.img', '.'])
def test_rejects_names_outside_output_dir(tmp_path, name):
    with pytest.raises(FormatError):
        destination_path(_desc(name, 1, 0), str(tmp_path))
    with pytest.raises(FormatError):
        extract_partition(io.BytesIO(b'x'), _desc(name, 1, 0), str(tmp_path / 'out'))
    assert not (tmp_path / 'evil.img').exists()


def test_destination_path():
    assert destination_path(_desc('modem.bin', 1, 0), 'out') == os.path.join('out', 'modem.bin')


def test_nul_low_byte_in_file_name_is_rejected(tmp_path):
    from conftest import with_file_name_unit
    # 0x0100 is not a terminator, so its zero low byte ends up inside the name
    rec = with_file_name_unit(descriptor_bytes('xboot.img', 4, 0), 0, 0x0100)
    desc = parse_descriptor(rec)
    assert '\x00' in desc.file_name_path
    with pytest.raises(FormatError):
        destination_path(desc, str(tmp_path))
    with pytest.raises(FormatError):
        extract_partition(io.BytesIO(payload(4)), desc, str(tmp_path))
    assert os.listdir(tmp_path) == []
