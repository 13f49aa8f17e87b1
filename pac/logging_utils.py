"""Logging utilities to centralize logging configuration."""
from __future__ import annotations
import logging, os, pathlib, sys
from typing import Callable, Optional, Union

LOG_DIR_ENV = 'PAC_LOG_DIR'
LOG_FILE_NAME = 'pacextractor.log'

FMT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
DATEFMT = '%Y-%m-%dT%H:%M:%S'


def log_file_path(log_dir: Union[str, os.PathLike, None] = None) -> Optional[pathlib.Path]:
    log_dir = log_dir or os.environ.get(LOG_DIR_ENV)
    if not log_dir:
        return None
    return pathlib.Path(log_dir) / LOG_FILE_NAME


def configure_logging(level: int = logging.WARNING, log_dir: Union[str, os.PathLike, None] = None) -> None:
    if logging.getLogger().handlers:
        return
    handlers = [logging.StreamHandler(sys.stderr)]
    log_file = log_file_path(log_dir)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(level=level, format=FMT, datefmt=DATEFMT, handlers=handlers)


class GuiLogger:
    """Adapter that writes to a QTextEdit-like append(str) object plus std logging."""
    def __init__(self, widget_append: Callable[[str], None], name: str = 'pac.gui'):
        self._append = widget_append
        self._logger = logging.getLogger(name)
    def __call__(self, msg: str):
        self._logger.info(msg)
        self._append(msg)
