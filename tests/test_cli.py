import pytest

import pacextractor
from pac import __version__
from conftest import payload


def test_positional_form(make_pac, tmp_path, capsys):
    fw = make_pac([('boot.img', payload(1000)), ('system.img', b'')])
    out = tmp_path / 'out'
    assert pacextractor.main([str(fw), str(out)]) == 0
    assert (out / 'boot.img').read_bytes() == payload(1000)
    assert not (out / 'system.img').exists()
    stdout = capsys.readouterr().out
    assert 'Firmware name: TEST_FW' in stdout
    assert 'with file name: system.img' in stdout
    assert '100.00%' in stdout


def test_option_form_quiet(make_pac, tmp_path, capsys):
    fw = make_pac([('boot.img', payload(1000))])
    out = tmp_path / 'out'
    assert pacextractor.main(['-q', '-e', str(fw), '-o', str(out)]) == 0
    assert (out / 'boot.img').exists()
    assert '%' not in capsys.readouterr().out


def test_list_only(make_pac, tmp_path, capsys):
    fw = make_pac([('boot.img', payload(10))])
    assert pacextractor.main(['-l', str(fw)]) == 0
    assert 'Partition name: boot' in capsys.readouterr().out
    assert not (tmp_path / 'boot.img').exists()


def test_version(capsys):
    with pytest.raises(SystemExit) as ei:
        pacextractor.main(['-v'])
    assert ei.value.code == 0
    assert f'pacextractor version {__version__}' in capsys.readouterr().out


def test_missing_arguments(capsys):
    assert pacextractor.main([]) == 2
    assert 'usage' in capsys.readouterr().err


def test_failure_reports_on_stderr(tmp_path, capsys):
    fw = tmp_path / 'tiny.pac'
    fw.write_bytes(b'PAC')
    assert pacextractor.main([str(fw), str(tmp_path / 'out')]) == 1
    err = capsys.readouterr().err
    assert err.startswith('Error: ')
    assert str(fw) in err


def test_nul_in_file_name_reports_error(tmp_path, capsys):
    from conftest import PacBuilder, descriptor_bytes, header_bytes, with_file_name_unit
    b = PacBuilder()
    b.put(0, header_bytes(1, 1220))
    b.put(1220, with_file_name_unit(descriptor_bytes('xboot.img', 16, 4096), 0, 0x0100))
    b.put(4096, payload(16))
    fw = b.write(tmp_path / 'nul.pac')
    assert pacextractor.main(['-q', str(fw), str(tmp_path / 'out')]) == 1
    err = capsys.readouterr().err
    assert err.startswith('Error: ')
    assert 'unusable output file name' in err


def test_aborted_copy_ends_progress_line(tmp_path, capsys):
    from conftest import PacBuilder, descriptor_bytes, header_bytes
    from pac.extractor import BUFFER_SIZE
    b = PacBuilder()
    b.put(0, header_bytes(1, 1220))
    b.put(1220, descriptor_bytes('big.img', 2 * BUFFER_SIZE, 4096))
    b.put(4096, payload(BUFFER_SIZE + 1000))
    fw = b.write(tmp_path / 'cut.pac')
    assert pacextractor.main([str(fw), str(tmp_path / 'out')]) == 1
    captured = capsys.readouterr()
    assert '50.00%' in captured.out
    assert captured.out.endswith('\n')
    assert captured.err.startswith('Error: ')
