"""
Application main loop.

Owns the tree, the cell buffer and the terminal for the lifetime of a run.
Each frame re-lays out the tree if needed, draws it into the back buffer and
flushes the diff. Terminal resizes arrive as SIGWINCH; the handler only sets a
flag that the loop picks up before the next frame.
"""

import logging
from typing import Optional

from .buffer import CellBuffer
from .config import AppConfig
from .layout import LayoutEngine
from .node import NodeTree
from .renderer import Renderer
from .terminal import TerminalIO

logger = logging.getLogger(__name__)


class Application:
    """Runs a node tree full-screen until a quit key arrives.

    Subclasses override :meth:`handle_key` to react to input, mutating the
    tree as needed; the next frame picks up the changes.

    Attributes:
        tree: The NodeTree being displayed
        config: AppConfig with loop settings
        terminal: TerminalIO used for all terminal access
        engine: LayoutEngine used for every layout pass
        renderer: Renderer drawing the tree into the buffer
        buffer: CellBuffer sized to the terminal
        running: True while the main loop is active
        last_key: Most recent keystroke
    """

    def __init__(
        self,
        tree: NodeTree,
        *,
        terminal: Optional[TerminalIO] = None,
        config: Optional[AppConfig] = None,
        engine: Optional[LayoutEngine] = None,
        renderer: Optional[Renderer] = None,
    ):
        self.tree = tree
        self.config = config or AppConfig()
        self.terminal = terminal or TerminalIO(default_size=self.config.default_size)
        self.engine = engine or LayoutEngine(self.config.distribute_remainder)
        self.renderer = renderer or Renderer()
        rows, cols = self.terminal.size()
        self.buffer = CellBuffer(cols, rows)
        self.running = False
        self.last_key = None
        self._resize_pending = False
        self._layout_dirty = True
        self._layout_revision = None
        if self.config.register_resize_handler:
            self.terminal.subscribe_resize(self._handle_sigwinch)

    def _handle_sigwinch(self):
        """Note the resize; the main loop handles it before the next frame."""
        self._resize_pending = True

    def invalidate(self):
        """Force a layout pass on the next frame."""
        self._layout_dirty = True

    def request_quit(self):
        self.running = False

    def handle_key(self, key):
        """Handle one keystroke.

        Args:
            key: Blessed Keystroke

        The default quits on any of ``config.quit_keys``.
        """
        if str(key) in self.config.quit_keys:
            self.request_quit()

    def frame(self) -> int:
        """Produce one frame: resize, layout if stale, draw, diff-flush.

        Returns:
            Number of cells written to the terminal
        """
        if self._resize_pending:
            self._process_resize()
        if self._layout_dirty or self._layout_revision != self.tree.revision:
            self.engine.calculate(self.tree, self.buffer.width, self.buffer.height)
            self._layout_dirty = False
            self._layout_revision = self.tree.revision
        self.buffer.clear()
        self.renderer.draw(self.tree, self.buffer)
        return self.buffer.render(self.terminal)

    def _process_resize(self):
        """Resize the buffers to the new terminal size and repaint from scratch."""
        self._resize_pending = False
        rows, cols = self.terminal.size()
        logger.debug("Terminal resized to %dx%d", cols, rows)
        self.buffer.resize(cols, rows)
        self.buffer.invalidate()
        self.terminal.clear()
        self._layout_dirty = True

    def run(self):
        """Enter the main event loop; returns once a quit condition is seen."""
        self.running = True
        with self.terminal.session():
            self.terminal.clear()
            self.buffer.invalidate()
            try:
                self.frame()
                while self.running:
                    key = self.terminal.read_key(self.config.inkey_timeout)
                    if key:
                        self.last_key = key
                        self.handle_key(key)
                        if not self.running:
                            break
                    self.frame()
            except KeyboardInterrupt:
                logger.debug("Interrupted, leaving main loop")
            finally:
                self.running = False
