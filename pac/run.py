"""Two-phase PAC extraction run.

Phase 1 reads the header and walks the whole partition table; phase 2
extracts every descriptor in the order it was found. Nothing is written
until phase 1 has succeeded, so a broken table never leaves partial output.
"""
from __future__ import annotations
import enum
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Callable, List, Optional, Tuple

from pac.errors import FilesystemError, FormatError, PacError
from pac.extractor import destination_path, extract_partition
from pac.header import HEADER_SIZE, FirmwareHeader, read_header
from pac.partition_table import PartitionDescriptor, iter_partition_table
from pac.progress import ProgressFunc

__all__ = ['RunState', 'ExtractionResult', 'ExtractionRun', 'describe_partition', 'ensure_output_dir', 'extract_pac', 'list_partitions']

logger = logging.getLogger(__name__)

LogFunc = Callable[[str], None]
ProgressFactory = Callable[[PartitionDescriptor], Optional[ProgressFunc]]


class RunState(enum.Enum):
    INIT = 'init'
    HEADER_READ = 'header_read'
    TABLE_DISCOVERED = 'table_discovered'
    EXTRACTING = 'extracting'
    DONE = 'done'
    FAILED = 'failed'


@dataclass(frozen=True)
class ExtractionResult:
    descriptor: PartitionDescriptor
    path: Optional[str]
    size: int

    @property
    def skipped(self) -> bool:
        return self.path is None


def ensure_output_dir(path: str, log_func: Optional[LogFunc] = None) -> None:
    if os.path.isdir(path):
        return
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FilesystemError(e.strerror or str(e), path=path, operation='create output directory') from e
    if log_func:
        log_func(f"Created output directory: {path}")


def describe_partition(desc: PartitionDescriptor) -> str:
    return f"Partition name: {desc.partition_name}\n\twith file name: {desc.file_name}\n\twith size {desc.partition_size}"


class ExtractionRun:
    """One pass over one container: ``discover()`` then (optionally) ``run()``."""

    def __init__(self, firmware_path: str, output_dir: Optional[str] = None, log_func: LogFunc = print,
                 progress_factory: Optional[ProgressFactory] = None):
        self.firmware_path = firmware_path
        self.output_dir = output_dir
        self.log = log_func
        self.progress_factory = progress_factory
        self.state = RunState.INIT
        self.header: Optional[FirmwareHeader] = None
        self.descriptors: List[PartitionDescriptor] = []
        self.results: List[ExtractionResult] = []

    def _open(self) -> BinaryIO:
        try:
            return open(self.firmware_path, 'rb')
        except OSError as e:
            raise FilesystemError(e.strerror or str(e), path=self.firmware_path, operation='open firmware') from e

    def _discover(self, src: BinaryIO) -> Tuple[FirmwareHeader, List[PartitionDescriptor]]:
        size = os.fstat(src.fileno()).st_size
        if size < HEADER_SIZE:
            raise FormatError(f"not a valid firmware ({size} bytes, header alone is {HEADER_SIZE})",
                              path=self.firmware_path, operation='check firmware size')
        self.header = read_header(src, path=self.firmware_path)
        self.state = RunState.HEADER_READ
        self.log(f"Firmware name: {self.header.firmware_name}")
        logger.info("%s: %d partitions, table @0x%X", self.firmware_path,
                    self.header.partition_count, self.header.partitions_list_start)

        descriptors = []
        for desc in iter_partition_table(src, self.header.partitions_list_start,
                                         self.header.partition_count, path=self.firmware_path):
            descriptors.append(desc)
            self.log(describe_partition(desc))
        # output names are part of the table: all of them must be usable before any write
        for desc in descriptors:
            if desc.partition_size:
                destination_path(desc, self.output_dir or '')
        self.descriptors = descriptors
        self.state = RunState.TABLE_DISCOVERED
        return self.header, descriptors

    def _extract_all(self, src: BinaryIO) -> List[ExtractionResult]:
        if self.output_dir is None:
            raise FilesystemError("no output directory given", operation='create output directory')
        ensure_output_dir(self.output_dir, self.log)
        self.state = RunState.EXTRACTING
        for index, desc in enumerate(self.descriptors):
            progress_cb = self.progress_factory(desc) if self.progress_factory else None
            path = extract_partition(src, desc, self.output_dir, progress_cb=progress_cb,
                                     log_func=self.log, source_path=self.firmware_path)
            self.results.append(ExtractionResult(desc, path, desc.partition_size if path else 0))
            logger.debug("partition %d/%d done", index + 1, len(self.descriptors))
        self.state = RunState.DONE
        return self.results

    def discover(self) -> Tuple[FirmwareHeader, List[PartitionDescriptor]]:
        """Read the header and the whole partition table without writing anything."""
        try:
            with self._open() as src:
                return self._discover(src)
        except PacError:
            self.state = RunState.FAILED
            raise

    def run(self) -> List[ExtractionResult]:
        """Discover, then extract every partition; the first error aborts the rest."""
        try:
            with self._open() as src:
                self._discover(src)
                return self._extract_all(src)
        except PacError as e:
            self.state = RunState.FAILED
            logger.info("extraction aborted: %s", e)
            raise


def extract_pac(firmware_path: str, output_dir: str, log_func: LogFunc = print,
                progress_factory: Optional[ProgressFactory] = None) -> List[ExtractionResult]:
    return ExtractionRun(firmware_path, output_dir, log_func, progress_factory).run()


def list_partitions(firmware_path: str, log_func: LogFunc = print) -> Tuple[FirmwareHeader, List[PartitionDescriptor]]:
    return ExtractionRun(firmware_path, log_func=log_func).discover()
