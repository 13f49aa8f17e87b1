"""Streaming extraction of one partition image out of a PAC container.

The destination is rebuilt from scratch on every extraction: a previous
entry is removed, then the data is copied in fixed-size chunks. A failed
write can leave a truncated destination behind; nothing is rolled back.
"""
from __future__ import annotations
import logging
import os
from typing import BinaryIO, Callable, Optional

from pac.errors import FilesystemError, FormatError, PacIOError
from pac.partition_table import PartitionDescriptor
from pac.progress import ProgressFunc

__all__ = ['BUFFER_SIZE', 'MAX_PARTITION_SIZE', 'destination_path', 'extract_partition']

logger = logging.getLogger(__name__)

BUFFER_SIZE = 256 * 1024
MAX_PARTITION_SIZE = 0xFFFFFFFF  # partitionSize is a u32 in the descriptor

LogFunc = Callable[[str], None]


def destination_path(descriptor: PartitionDescriptor, output_dir: str) -> str:
    """Output path for ``descriptor``; refuses names that leave ``output_dir``."""
    name = descriptor.file_name_path
    norm = os.path.normpath(name) if name else ''
    if not norm or norm == '.' or '\x00' in name or os.path.isabs(norm) or norm == os.pardir or norm.startswith(os.pardir + os.sep):
        raise FormatError(f"unusable output file name {descriptor.file_name!r} for partition "
                          f"{descriptor.partition_name!r}", operation='create output file')
    return os.path.join(output_dir, name)


def _remove_existing(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except (OSError, ValueError) as e:
        raise FilesystemError(getattr(e, 'strerror', None) or str(e), path=path, operation='remove existing output file') from e
    logger.debug("removed existing %s", path)


def extract_partition(source: BinaryIO, descriptor: PartitionDescriptor, output_dir: str,
                      progress_cb: Optional[ProgressFunc] = None, log_func: Optional[LogFunc] = None,
                      source_path: Optional[str] = None) -> Optional[str]:
    """Copy ``descriptor.partition_size`` bytes from ``addr_in_container`` to its own file.

    Returns the destination path, or ``None`` for an empty partition (no file
    is created in that case). ``progress_cb`` receives the copied fraction
    after every chunk.
    """
    total = descriptor.partition_size
    if total == 0:
        logger.debug("skip empty partition %s", descriptor.partition_name)
        return None

    out_path = destination_path(descriptor, output_dir)

    try:
        source.seek(descriptor.addr_in_container)
    except (OSError, ValueError, OverflowError) as e:
        raise PacIOError(f"seek to 0x{descriptor.addr_in_container:X} failed: {e}",
                         path=source_path, operation='seek partition data') from e

    _remove_existing(out_path)
    try:
        dst = open(out_path, 'wb')
    except (OSError, ValueError) as e:
        raise FilesystemError(getattr(e, 'strerror', None) or str(e), path=out_path, operation='create output file') from e

    if log_func:
        log_func(f"Extracting to {out_path}")

    buffer = bytearray(BUFFER_SIZE)
    view = memoryview(buffer)
    copied = 0
    try:
        with dst:
            while copied < total:
                n = min(BUFFER_SIZE, total - copied)
                chunk = view[:n]
                try:
                    got = source.readinto(chunk)
                except OSError as e:
                    raise PacIOError(f"read failed at 0x{descriptor.addr_in_container + copied:X}: {e}",
                                     path=source_path, operation='read partition data') from e
                if got != n:
                    raise PacIOError(f"short read at 0x{descriptor.addr_in_container + copied:X} "
                                     f"({got or 0} of {n} bytes)", path=source_path, operation='read partition data')
                written = dst.write(chunk)
                if written != n:
                    raise PacIOError(f"short write ({written or 0} of {n} bytes)", path=out_path,
                                     operation='write partition data')
                copied += n
                if progress_cb:
                    progress_cb(copied / total)
    except OSError as e:
        # write errors, including the final flush on close
        raise PacIOError(e.strerror or str(e), path=out_path, operation='write partition data') from e
    logger.info("extracted %s (%d bytes) -> %s", descriptor.partition_name, copied, out_path)
    return out_path
