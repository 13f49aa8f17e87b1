"""Error taxonomy for PAC decoding & extraction.

Every error names the operation that failed and the path involved so the
command line and the GUI can print a single useful diagnostic line.
"""
from __future__ import annotations
from typing import Optional

__all__ = ['PacError', 'FormatError', 'PacIOError', 'FilesystemError']


class PacError(Exception):
    """Base class; never raised directly."""

    def __init__(self, message: str, path: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        parts = []
        if self.operation:
            parts.append(self.operation)
        if self.path:
            parts.append(str(self.path))
        prefix = ' '.join(parts)
        if not prefix:
            return self.message
        return f"{prefix}: {self.message}"


class FormatError(PacError):
    """Container metadata is truncated or inconsistent."""


class PacIOError(PacError):
    """Seek/read/write against the container or a destination failed or was short."""


class FilesystemError(PacError):
    """Output directory or destination entry could not be created/removed."""
