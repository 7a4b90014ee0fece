"""
Tree renderer.

Walks a laid-out NodeTree and paints every node into a CellBuffer's back
buffer: background first, then border and header, then text. Parents are
painted before their children so children end up on top.
"""

from typing import Optional

from .buffer import CellBuffer
from .node import Node, NodeTree

ELLIPSIS = '…'


def header_label(header: str, width: int) -> str:
    """Return the decorated header text for a bordered box ``width`` cells wide.

    The label is padded with one space on each side. If that does not fit
    between the corners it is cut to ``width - 5`` characters plus an ellipsis.
    """
    label = f' {header} '
    if len(label) > width - 2:
        label = f' {header[:max(width - 5, 0)]}{ELLIPSIS} '
    return label


class Renderer:
    """Draws a laid-out tree into a cell buffer."""

    def draw(self, tree: NodeTree, buffer: CellBuffer):
        """Paint every node of ``tree`` into ``buffer.back``.

        Layout must have run first; nodes without a computed style (never
        laid out) and zero-sized nodes are skipped.
        """
        for node in tree.walk():
            if node.computed_style is None:
                continue
            rect = node.layout
            if rect.width <= 0 or rect.height <= 0:
                continue
            self.draw_node(node, buffer)

    def draw_node(self, node: Node, buffer: CellBuffer):
        style = node.computed_style
        rect = node.layout

        if style.bg:
            buffer.draw_rect(rect.x, rect.y, rect.width, rect.height, fill=True, bg=style.bg)

        if style.border:
            buffer.draw_rect(
                rect.x, rect.y, rect.width, rect.height,
                fg=style.border_color or style.fg,
                bg=style.bg,
                border_style=style.border_style,
                border_radius=style.border_radius,
                border_thickness=style.border_thickness,
            )
            if node.header and rect.width >= 5:
                buffer.draw_text(rect.x + 1, rect.y, header_label(node.header, rect.width),
                                 fg=style.fg, bg=style.bg, emphasis=style.emphasis)

        if node.is_leaf and node.text:
            self._draw_text(node, buffer)

    @staticmethod
    def _draw_text(node: Node, buffer: CellBuffer):
        style = node.computed_style
        rect = node.layout
        inset = 1 if style.border else 0
        pad = style.padding
        content_width = rect.width - 2 * inset - pad.horizontal
        content_height = rect.height - 2 * inset - pad.vertical
        if content_width <= 0 or content_height <= 0:
            return
        buffer.draw_text(
            rect.x + inset + pad.left, rect.y + inset + pad.top,
            node.text[:content_width],
            fg=style.fg, bg=style.bg, emphasis=style.emphasis,
        )


def render(tree: NodeTree, buffer: CellBuffer, terminal, renderer: Optional[Renderer] = None) -> int:
    """Compose one frame from an already laid-out tree and flush it.

    Clears the back buffer, draws the tree, then diff-renders to ``terminal``.

    Returns:
        Number of cells written to the terminal
    """
    buffer.clear()
    (renderer or Renderer()).draw(tree, buffer)
    return buffer.render(terminal)
