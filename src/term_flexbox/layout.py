"""
Flexbox-style layout engine.

Computes an absolute rectangle for every node of a NodeTree against a viewport.
Flex containers use a two-pass algorithm: each child is first measured with an
unbounded main axis, then leftover space is handed out by flex-grow (or taken
back by flex-shrink) and the children are placed with justify-content and
align-items applied. Block containers stack their children vertically.

The engine never raises on odd input; sizes are clamped instead.
"""

import logging
import math
from typing import List, Tuple

from .node import Node, NodeId, NodeTree, Rect
from .style import AUTO, DEFAULT_STYLE, AlignItems, Display, FlexDirection, JustifyContent, merge, resolve_length

logger = logging.getLogger(__name__)

# (leading numerator, gap numerator, denominator) applied to the leftover space;
# the extra offset of child i is (lead + i * gap) * leftover // denominator.
_JUSTIFY_RATIOS = {
    JustifyContent.FLEX_START: lambda n: (0, 0, 1),
    JustifyContent.FLEX_END: lambda n: (1, 0, 1),
    JustifyContent.CENTER: lambda n: (1, 0, 2),
    JustifyContent.SPACE_BETWEEN: lambda n: (0, 1, n - 1) if n > 1 else (0, 0, 1),
    JustifyContent.SPACE_AROUND: lambda n: (1, 2, 2 * n),
    JustifyContent.SPACE_EVENLY: lambda n: (1, 1, n + 1),
}


def _shrink(value, amount):
    """Subtract ``amount`` from a possibly unbounded size, flooring at 0."""
    if math.isinf(value):
        return value
    return max(value - amount, 0)


def _clamp(size, minimum, maximum, available) -> int:
    if maximum is not None:
        size = min(size, maximum)
    size = max(size, minimum)
    return int(max(0, min(size, available)))


class LayoutEngine:
    """Computes layout rectangles for a node tree.

    Attributes:
        distribute_remainder: When True, the cells lost to flooring the
            flex-grow shares go to the last child with flex-grow > 0, so grown
            children fill the container exactly. When False they are left
            unassigned and the container may end up a cell or two short.
    """

    def __init__(self, distribute_remainder: bool = True):
        self.distribute_remainder = distribute_remainder

    def calculate(self, tree: NodeTree, width: int, height: int):
        """Lay out every node attached to ``tree.root``.

        Args:
            tree: The tree to lay out; node.computed_style and node.layout are
                rewritten for every reachable node
            width: Viewport width in cells
            height: Viewport height in cells
        """
        width = max(int(width), 0)
        height = max(int(height), 0)
        self._cascade(tree)
        self._layout_node(tree, tree.root, 0, 0, width, height, fill_width=True, fill_height=True)
        # The root always covers the viewport, whatever its content sums to.
        tree[tree.root].layout = Rect(0, 0, width, height)
        logger.debug("Layout pass %dx%d over %d nodes", width, height, len(tree))

    @staticmethod
    def _cascade(tree: NodeTree):
        for node in tree.walk():
            parent = DEFAULT_STYLE if node.parent is None else tree[node.parent].computed_style
            node.computed_style = merge(parent, node.style)

    def _layout_node(self, tree: NodeTree, node_id: NodeId, x: int, y: int,
                     avail_width, avail_height, fill_width=False, fill_height=False):
        """Lay out one node and its subtree inside the given available box.

        ``avail_width``/``avail_height`` may be math.inf while measuring.
        ``fill_*`` forces the node to the full available size on that axis.
        """
        node = tree[node_id]
        style = node.computed_style
        inset = 1 if style.border else 0
        pad = style.padding

        explicit_width = resolve_length(style.width, avail_width)
        explicit_height = resolve_length(style.height, avail_height)
        box_width = self._box_size(explicit_width, fill_width, avail_width,
                                   style.min_width, style.max_width)
        box_height = self._box_size(explicit_height, fill_height, avail_height,
                                    style.min_height, style.max_height)

        content_x = x + inset + pad.left
        content_y = y + inset + pad.top
        content_width = _shrink(box_width, 2 * inset + pad.horizontal)
        content_height = _shrink(box_height, 2 * inset + pad.vertical)

        if node.is_leaf:
            used_width, used_height = len(node.text), 1
        elif not node.children:
            used_width, used_height = 0, 0
        elif style.display is Display.FLEX:
            used_width, used_height = self._layout_flex(
                tree, node, content_x, content_y, content_width, content_height)
        else:
            used_width, used_height = self._layout_block(
                tree, node, content_x, content_y, content_width, content_height)

        width = used_width + 2 * inset + pad.horizontal
        height = used_height + 2 * inset + pad.vertical
        if explicit_width is not None:
            width = explicit_width
        if explicit_height is not None:
            height = explicit_height
        if fill_width and not math.isinf(avail_width):
            width = avail_width
        if fill_height and not math.isinf(avail_height):
            height = avail_height

        node.layout = Rect(
            x, y,
            _clamp(width, style.min_width, style.max_width, avail_width),
            _clamp(height, style.min_height, style.max_height, avail_height),
        )

    @staticmethod
    def _box_size(explicit, fill, available, minimum, maximum):
        """Outer size used to derive the content box handed to children."""
        if fill and not math.isinf(available):
            size = available
        elif explicit is not None:
            size = explicit
        else:
            size = available
        if math.isinf(size):
            return size
        return _clamp(size, minimum, maximum, available)

    def _layout_flex(self, tree: NodeTree, node: Node, content_x: int, content_y: int,
                     content_width, content_height) -> Tuple[int, int]:
        style = node.computed_style
        row = style.flex_direction is FlexDirection.ROW
        avail_main, avail_cross = (content_width, content_height) if row else (content_height, content_width)
        children = [tree[child_id] for child_id in node.children]

        # Measure pass: preferred main size of every child, margins included.
        preferred = []
        total_grow = 0.0
        for child in children:
            cs = child.computed_style
            main_margin, cross_margin, _ = self._margins(cs.margin, row)
            # Relative main sizes resolve against this container, not the unbounded measure box.
            fixed = resolve_length(cs.width if row else cs.height, _shrink(avail_main, main_margin))
            if cs.flex_basis != AUTO:
                size = cs.flex_basis
            elif fixed is not None:
                minimum, maximum = (cs.min_width, cs.max_width) if row else (cs.min_height, cs.max_height)
                size = _clamp(fixed, minimum, maximum, math.inf)
            else:
                cross_bound = _shrink(avail_cross, cross_margin)
                if row:
                    self._layout_node(tree, child.id, content_x, content_y, math.inf, cross_bound)
                    size = child.layout.width
                else:
                    self._layout_node(tree, child.id, content_x, content_y, cross_bound, math.inf)
                    size = child.layout.height
            preferred.append(size + main_margin)
            if cs.flex_grow > 0:
                total_grow += cs.flex_grow

        sizes = self._distribute(children, preferred, total_grow, avail_main, row)

        leftover = 0
        if not math.isinf(avail_main):
            leftover = max(avail_main - sum(sizes), 0)
        offsets = self._justify_offsets(style.justify_content, sizes, leftover)

        # Place pass.
        stretch = style.align_items is AlignItems.STRETCH
        used_main = 0
        used_cross = 0
        for child, size, offset in zip(children, sizes, offsets):
            cs = child.computed_style
            main_margin, cross_margin, (lead_main, lead_cross) = self._margins(cs.margin, row)
            child_main = max(size - main_margin, 0)
            cross_bound = _shrink(avail_cross, cross_margin)
            if row:
                self._layout_node(tree, child.id, content_x + offset + lead_main, content_y + lead_cross,
                                  child_main, cross_bound, fill_width=True, fill_height=stretch)
                child_cross = child.layout.height
            else:
                self._layout_node(tree, child.id, content_x + lead_cross, content_y + offset + lead_main,
                                  cross_bound, child_main, fill_width=stretch, fill_height=True)
                child_cross = child.layout.width

            shift = self._cross_offset(style.align_items, cross_bound, child_cross)
            if shift and row:
                self._translate(tree, child.id, 0, shift)
            elif shift:
                self._translate(tree, child.id, shift, 0)

            used_main = max(used_main, offset + size)
            used_cross = max(used_cross, child_cross + cross_margin)

        return (used_main, used_cross) if row else (used_cross, used_main)

    def _distribute(self, children: List[Node], preferred: List[int], total_grow: float,
                    avail_main, row: bool) -> List[int]:
        """Final main-axis sizes: preferred size plus grow share, or minus shrink share.

        Each size is then held to the child's min/max so that space a child
        cannot take stays free for justify-content.
        """
        sizes = list(preferred)
        if math.isinf(avail_main):
            return sizes

        total_preferred = sum(preferred)
        extra = max(avail_main - total_preferred, 0)
        if extra > 0 and total_grow > 0:
            given = 0
            last_grower = None
            for i, child in enumerate(children):
                grow = child.computed_style.flex_grow
                if grow > 0:
                    share = math.floor(extra * grow / total_grow)
                    sizes[i] += share
                    given += share
                    last_grower = i
            if self.distribute_remainder and last_grower is not None:
                sizes[last_grower] += extra - given
        elif total_preferred > avail_main:
            sizes = self._shrink_sizes(children, preferred, total_preferred - avail_main)

        for i, child in enumerate(children):
            cs = child.computed_style
            main_margin = self._margins(cs.margin, row)[0]
            minimum, maximum = (cs.min_width, cs.max_width) if row else (cs.min_height, cs.max_height)
            sizes[i] = _clamp(sizes[i] - main_margin, minimum, maximum, math.inf) + main_margin

        # The running cursor never passes the end of the container.
        cursor = 0
        for i, size in enumerate(sizes):
            size = max(min(size, avail_main - cursor), 0)
            sizes[i] = int(size)
            cursor += sizes[i]
        return sizes

    @staticmethod
    def _shrink_sizes(children: List[Node], preferred: List[int], overflow: int) -> List[int]:
        weights = [child.computed_style.flex_shrink * pref for child, pref in zip(children, preferred)]
        total_weight = sum(weights)
        if total_weight <= 0:
            return list(preferred)
        return [max(pref - math.floor(overflow * weight / total_weight), 0)
                for pref, weight in zip(preferred, weights)]

    @staticmethod
    def _justify_offsets(justify: JustifyContent, sizes: List[int], leftover: int) -> List[int]:
        """Main-axis offset of each child relative to the content start."""
        n = len(sizes)
        lead, gap, denominator = _JUSTIFY_RATIOS[justify](n) if n else (0, 0, 1)
        offsets = []
        cursor = 0
        for i, size in enumerate(sizes):
            offsets.append(cursor + (lead + i * gap) * leftover // denominator)
            cursor += size
        return offsets

    @staticmethod
    def _cross_offset(align: AlignItems, bound, size: int) -> int:
        if math.isinf(bound) or size >= bound:
            return 0
        match align:
            case AlignItems.FLEX_END:
                return int(bound - size)
            case AlignItems.CENTER:
                return int(bound - size) // 2
            case _:
                return 0

    @staticmethod
    def _margins(margin, row: bool):
        """Return (main total, cross total, (main leading, cross leading))."""
        if row:
            return margin.horizontal, margin.vertical, (margin.left, margin.top)
        return margin.vertical, margin.horizontal, (margin.top, margin.left)

    def _layout_block(self, tree: NodeTree, node: Node, content_x: int, content_y: int,
                      content_width, content_height) -> Tuple[int, int]:
        cursor = 0
        used_width = 0
        for child_id in node.children:
            child = tree[child_id]
            margin = child.computed_style.margin
            # Auto-width children span the container; explicit widths are kept.
            self._layout_node(
                tree, child_id,
                content_x + margin.left, content_y + cursor + margin.top,
                _shrink(content_width, margin.horizontal),
                _shrink(content_height, cursor + margin.vertical),
                fill_width=child.computed_style.width is None,
            )
            cursor += child.layout.height + margin.vertical
            used_width = max(used_width, child.layout.width + margin.horizontal)
        if not math.isinf(content_height):
            cursor = min(cursor, content_height)
        return used_width, cursor

    @staticmethod
    def _translate(tree: NodeTree, node_id: NodeId, dx: int, dy: int):
        """Move a laid-out subtree by (dx, dy)."""
        for node in tree.walk(node_id):
            node.layout.x += dx
            node.layout.y += dy


def calculate_layout(tree: NodeTree, width: int, height: int, distribute_remainder: bool = True):
    """Compute layout rectangles for every node of ``tree`` in a width x height viewport."""
    LayoutEngine(distribute_remainder).calculate(tree, width, height)
