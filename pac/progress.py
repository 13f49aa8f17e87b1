"""Text progress bar for partition extraction."""
from __future__ import annotations
import sys
from typing import Callable, Optional, TextIO

ProgressFunc = Callable[[float], None]

BAR_WIDTH = 50


def format_progress_bar(fraction: float, width: int = BAR_WIDTH) -> str:
    fraction = max(0.0, min(1.0, fraction))
    pos = int(width * fraction)
    cells = []
    for i in range(width):
        if i < pos:
            cells.append('=')
        elif i == pos:
            cells.append('>')
        else:
            cells.append(' ')
    return f"[{''.join(cells)}] {fraction * 100:.2f}%"


class ConsoleProgress:
    """Progress callback redrawing one bar line in place."""

    def __init__(self, stream: Optional[TextIO] = None, width: int = BAR_WIDTH):
        self.stream = stream or sys.stdout
        self.width = width
        self.last = 0.0
        self.line_open = False

    def __call__(self, fraction: float) -> None:
        self.last = fraction
        self.stream.write('\r' + format_progress_bar(fraction, self.width))
        self.line_open = True
        if fraction >= 1.0:
            self.finish()
        self.stream.flush()

    def finish(self) -> None:
        """End a bar line left open (copy aborted before 100%)."""
        if self.line_open:
            self.stream.write('\n')
            self.stream.flush()
            self.line_open = False


__all__ = ['ProgressFunc', 'BAR_WIDTH', 'format_progress_bar', 'ConsoleProgress']
