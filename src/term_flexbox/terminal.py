"""
Terminal collaborator built on the Blessed library.

Wraps a blessed.Terminal with the handful of operations the renderer and the
application loop need: size query with a fixed fallback, raw writes, 1-based
cursor moves, blocking key reads, resize subscription and a scoped session
that always restores the terminal.
"""

import logging
import signal
import sys
from contextlib import ExitStack, contextmanager
from typing import Callable, Optional, Tuple

from blessed import Terminal

from .buffer import RESET

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (24, 80)


class TerminalIO:
    """Thin I/O layer over a Blessed Terminal.

    Attributes:
        term: Blessed Terminal instance
        stream: Output stream (defaults to the terminal's stream)
        default_size: (rows, cols) used when the size cannot be queried
    """

    def __init__(self, term: Optional[Terminal] = None, stream=None,
                 default_size: Tuple[int, int] = DEFAULT_SIZE):
        self.term = term or Terminal()
        self.stream = stream or getattr(self.term, 'stream', None) or sys.stdout
        self.default_size = default_size

    def size(self) -> Tuple[int, int]:
        """Return (rows, cols), falling back to ``default_size``.

        The fallback is used when output is not a tty, the query fails, or the
        reported size is not positive.
        """
        try:
            if not self.term.is_a_tty:
                return self.default_size
            rows, cols = int(self.term.height), int(self.term.width)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Terminal size query failed (%s), using %dx%d",
                           exc, self.default_size[1], self.default_size[0])
            return self.default_size
        if rows <= 0 or cols <= 0:
            return self.default_size
        return rows, cols

    def write(self, data: str):
        self.stream.write(data)
        self.stream.flush()

    def move(self, row: int, col: int) -> str:
        """Sequence that moves the cursor to 1-based (row, col)."""
        return self.term.move_yx(row - 1, col - 1)

    def move_cursor(self, row: int, col: int):
        self.write(self.move(row, col))

    def clear(self):
        """Clear the screen and home the cursor."""
        self.write(self.term.home + self.term.clear)

    def read_key(self, timeout: Optional[float] = None):
        """Read one keypress; blocks when ``timeout`` is None.

        Returns:
            A Blessed Keystroke, empty if the timeout expired
        """
        return self.term.inkey(timeout=timeout)

    def subscribe_resize(self, callback: Callable[[], None]):
        """Call ``callback`` on SIGWINCH.

        The callback runs in signal context and should only set a flag.
        """
        signal.signal(signal.SIGWINCH, lambda signum, frame: callback())

    @contextmanager
    def session(self):
        """Fullscreen, raw input and hidden cursor for the duration of the block.

        Restoration runs on every exit path. Each step is attempted even if an
        earlier one fails; failures are logged, then the first one is raised
        once the rest have run.
        """
        with ExitStack() as stack:
            stack.enter_context(_logged(self.term.fullscreen(), 'fullscreen'))
            stack.enter_context(_logged(self.term.raw(), 'raw mode'))
            stack.enter_context(_logged(self.term.hidden_cursor(), 'hidden cursor'))
            stack.callback(self._reset_attributes)
            yield self

    def _reset_attributes(self):
        try:
            self.write(RESET)
        except OSError:
            logger.error("Failed to reset terminal attributes", exc_info=True)
            raise


@contextmanager
def _logged(manager, what: str):
    """Enter ``manager`` and log (then re-raise) a failure while leaving it."""
    body_error = None
    try:
        with manager:
            try:
                yield
            except BaseException as exc:
                body_error = exc
                raise
    except Exception as exc:
        if exc is not body_error:
            logger.error("Failed to restore terminal %s", what, exc_info=True)
        raise
