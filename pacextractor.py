#!/usr/bin/env python3
"""pacextractor - unpack every partition image from a PAC firmware container.

Usage:
    pacextractor firmware.pac output_dir
    pacextractor -e firmware.pac -o output_dir
    pacextractor -l firmware.pac
"""
from __future__ import annotations
import argparse, logging, sys
from typing import List, Optional

from pac import __version__
from pac.errors import PacError
from pac.logging_utils import configure_logging
from pac.progress import ConsoleProgress
from pac.run import ExtractionRun

PROG = 'pacextractor'


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=PROG, description='Extract partition images from a PAC firmware file.')
    p.add_argument('firmware', nargs='?', help='<firmware name>.pac')
    p.add_argument('output', nargs='?', help='output directory (created if missing)')
    p.add_argument('-e', '--extract', dest='firmware_opt', metavar='FIRMWARE', help='firmware file to extract')
    p.add_argument('-o', '--output', dest='output_opt', metavar='DIR', help='output directory')
    p.add_argument('-v', '--version', action='version', version=f'{PROG} version {__version__}')
    p.add_argument('-l', '--list', action='store_true', help='only list the partition table')
    p.add_argument('-q', '--quiet', action='store_true', help='no progress bar')
    p.add_argument('--log-level', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    p.add_argument('--log-dir', help='also write a log file there (default: $PAC_LOG_DIR)')
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    firmware = args.firmware_opt or args.firmware
    output = args.output_opt or (args.output if args.firmware_opt is None else args.firmware)
    if not firmware or (not output and not args.list):
        parser.print_usage(sys.stderr)
        print(f"{PROG}: error: a firmware file and an output directory are required", file=sys.stderr)
        return 2

    configure_logging(getattr(logging, args.log_level), args.log_dir)

    bars: List[ConsoleProgress] = []

    def progress_factory(desc):
        bars.append(ConsoleProgress(sys.stdout))
        return bars[-1]

    run = ExtractionRun(firmware, output, log_func=print,
                        progress_factory=None if args.quiet else progress_factory)
    try:
        if args.list:
            run.discover()
        else:
            run.run()
    except PacError as e:
        if bars:
            bars[-1].finish()
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        if bars:
            bars[-1].finish()
        print("Interrupted", file=sys.stderr)
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
