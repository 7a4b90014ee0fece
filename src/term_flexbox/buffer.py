"""
Double-buffered terminal cell grid.

Drawing goes into the back buffer. render() compares it cell by cell with the
front buffer (what the terminal currently shows), writes only the cells that
changed, and then swaps the two buffers.
"""

import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .style import COLORS, BorderStyle, emphasis_names

logger = logging.getLogger(__name__)

RESET = '\x1b[0m'

_EMPHASIS_CODES = {
    'bold': 1,
    'dim': 2,
    'italic': 3,
    'underline': 4,
    'blink': 5,
    'reverse': 7,
    'hidden': 8,
    'strikethrough': 9,
}

_FG_BASE = 30
_BG_BASE = 40
_BRIGHT_OFFSET = 60


@dataclass(frozen=True)
class Cell:
    """One terminal column: a character and its attributes."""
    char: str = ' '
    fg: Optional[str] = None
    bg: Optional[str] = None
    emphasis: Tuple[str, ...] = ()


BLANK = Cell()

# Placed in the front buffer when the screen contents are unknown; it never
# compares equal to a drawable cell, so the next render repaints everything.
_UNKNOWN = Cell(char='')

BorderGlyphs = namedtuple(
    'BorderGlyphs',
    'top_left top top_right left right bottom_left bottom bottom_right',
)

GLYPHS = {
    BorderStyle.SINGLE: BorderGlyphs('┌', '─', '┐', '│', '│', '└', '─', '┘'),
    BorderStyle.DOUBLE: BorderGlyphs('╔', '═', '╗', '║', '║', '╚', '═', '╝'),
    BorderStyle.THICK: BorderGlyphs('▛', '▀', '▜', '▌', '▐', '▙', '▄', '▟'),
    BorderStyle.ROUNDED: BorderGlyphs('╭', '─', '╮', '│', '│', '╰', '─', '╯'),
}


def color_code(name: Optional[str], background: bool = False) -> Optional[int]:
    """Map a color name ('red', 'bright_red') to its SGR code, or None."""
    if not name:
        return None
    base = _BG_BASE if background else _FG_BASE
    if name.startswith('bright_'):
        base += _BRIGHT_OFFSET
        name = name[len('bright_'):]
    if name not in COLORS:
        return None
    return base + COLORS.index(name)


def sgr_sequence(cell: Cell) -> str:
    """Build the single escape sequence that sets all of a cell's attributes.

    The sequence always starts from a reset so no attribute of a previously
    written cell carries over.
    """
    codes = []
    fg = color_code(cell.fg)
    if fg is not None:
        codes.append(fg)
    bg = color_code(cell.bg, background=True)
    if bg is not None:
        codes.append(bg)
    codes.extend(_EMPHASIS_CODES[name] for name in cell.emphasis if name in _EMPHASIS_CODES)
    if not codes:
        return RESET
    return '\x1b[0;' + ';'.join(str(code) for code in codes) + 'm'


def border_glyphs(border_style: Union[BorderStyle, str] = BorderStyle.SINGLE,
                  border_radius: bool = False, border_thickness: int = 1) -> BorderGlyphs:
    """Pick the glyph set for a border variant."""
    if border_thickness >= 2:
        return GLYPHS[BorderStyle.THICK]
    try:
        variant = BorderStyle(border_style)
    except ValueError:
        logger.warning("Unknown border style %r, using single", border_style)
        variant = BorderStyle.SINGLE
    if variant is BorderStyle.SINGLE and border_radius:
        variant = BorderStyle.ROUNDED
    return GLYPHS[variant]


def _grid(width: int, height: int, cell: Cell = BLANK) -> List[List[Cell]]:
    return [[cell] * width for _ in range(height)]


class CellBuffer:
    """A width x height grid of cells with a front and a back buffer.

    Attributes:
        width: Number of columns
        height: Number of rows
        front: What the terminal currently shows
        back: The frame being composed
    """

    def __init__(self, width: int, height: int):
        self.width = max(int(width), 0)
        self.height = max(int(height), 0)
        self.front = _grid(self.width, self.height)
        self.back = _grid(self.width, self.height)

    def clear(self):
        """Reset every back-buffer cell to blank."""
        self.back = _grid(self.width, self.height)

    def get(self, x: int, y: int) -> Optional[Cell]:
        """Return the back-buffer cell at (x, y), or None when out of bounds."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.back[y][x]
        return None

    def row_text(self, y: int) -> str:
        """Characters of one back-buffer row, mostly useful for inspection."""
        return ''.join(cell.char for cell in self.back[y])

    def draw_text(self, x: int, y: int, text: str, fg: Optional[str] = None,
                  bg: Optional[str] = None, emphasis: Union[str, Iterable[str], None] = ()):
        """Write one cell per character starting at (x, y).

        Characters that fall outside the buffer are dropped.
        """
        if y < 0 or y >= self.height:
            return
        emphasis = emphasis_names(emphasis)
        row = self.back[y]
        for i, char in enumerate(text):
            col = x + i
            if 0 <= col < self.width:
                row[col] = Cell(char, fg, bg, emphasis)

    def draw_hline(self, x: int, y: int, length: int, char: str = '─', **attrs):
        self.draw_text(x, y, char * max(length, 0), **attrs)

    def draw_vline(self, x: int, y: int, length: int, char: str = '│', **attrs):
        for i in range(max(length, 0)):
            self.draw_text(x, y + i, char, **attrs)

    def draw_rect(self, x: int, y: int, width: int, height: int, fill: bool = False,
                  fg: Optional[str] = None, bg: Optional[str] = None,
                  emphasis: Union[str, Iterable[str], None] = (),
                  border_style: Union[BorderStyle, str] = BorderStyle.SINGLE,
                  border_radius: bool = False, border_thickness: int = 1):
        """Fill a rectangle, or draw its 1-cell outline.

        Args:
            x, y: Top-left corner
            width, height: Size of the rectangle
            fill: Set every cell to a space with the given attributes instead
                of drawing an outline
            fg, bg, emphasis: Cell attributes
            border_style: Glyph set for the outline
            border_radius: Use rounded corners for a single border
            border_thickness: 2 selects the thick glyph set
        """
        if width <= 0 or height <= 0:
            return
        attrs = dict(fg=fg, bg=bg, emphasis=emphasis)
        if fill:
            for row in range(y, y + height):
                self.draw_text(x, row, ' ' * width, **attrs)
            return

        g = border_glyphs(border_style, border_radius, border_thickness)
        right = x + width - 1
        bottom = y + height - 1
        self.draw_text(x, y, g.top_left + g.top * (width - 2) + (g.top_right if width > 1 else ''), **attrs)
        if height > 1:
            self.draw_text(x, bottom, g.bottom_left + g.bottom * (width - 2)
                           + (g.bottom_right if width > 1 else ''), **attrs)
        for row in range(y + 1, bottom):
            self.draw_text(x, row, g.left, **attrs)
            if width > 1:
                self.draw_text(right, row, g.right, **attrs)

    def resize(self, width: int, height: int):
        """Reallocate both buffers, keeping the overlapping top-left region."""
        width = max(int(width), 0)
        height = max(int(height), 0)
        new_front = _grid(width, height)
        new_back = _grid(width, height)
        keep_w = min(width, self.width)
        for y in range(min(height, self.height)):
            new_front[y][:keep_w] = self.front[y][:keep_w]
            new_back[y][:keep_w] = self.back[y][:keep_w]
        self.width, self.height = width, height
        self.front, self.back = new_front, new_back
        logger.debug("Cell buffer resized to %dx%d", width, height)

    def invalidate(self):
        """Forget what the terminal shows so the next render repaints every cell."""
        self.front = _grid(self.width, self.height, _UNKNOWN)

    def render(self, terminal) -> int:
        """Write changed cells to ``terminal`` and swap the buffers.

        Args:
            terminal: Object with ``move(row, col) -> str`` (1-based) and
                ``write(data)``, such as TerminalIO

        Returns:
            Number of cells written
        """
        out = []
        written = 0
        for y in range(self.height):
            back_row = self.back[y]
            front_row = self.front[y]
            for x in range(self.width):
                cell = back_row[x]
                if cell == front_row[x]:
                    continue
                out.append(terminal.move(y + 1, x + 1))
                out.append(sgr_sequence(cell))
                out.append(cell.char)
                front_row[x] = cell
                written += 1
        if out:
            out.append(RESET)
            terminal.write(''.join(out))
        self.front, self.back = self.back, self.front
        logger.debug("Rendered %d changed cells", written)
        return written
