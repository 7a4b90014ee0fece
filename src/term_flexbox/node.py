"""
Styled node tree.

Nodes live in an arena (NodeTree) and refer to each other by integer handles.
A node owns the ordered list of its children's handles and keeps its parent's
handle for lookup only.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .style import Display, FlexDirection, Style


NodeId = int


class TreeError(ValueError):
    """Raised on invalid tree mutations (unknown handle, second parent, cycle)."""


@dataclass
class Rect:
    """Layout rectangle in absolute terminal cells."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class Node:
    """One element of the tree.

    Attributes:
        id: Handle of this node in its tree
        style: The node's own style
        text: Text content; a node with text is a leaf
        header: Label drawn on the top border, if bordered
        parent: Parent handle, or None for the root and detached nodes
        children: Ordered child handles
        computed_style: Style cascaded from the parent, set by layout
        layout: Rectangle written by the layout engine
    """
    id: NodeId
    style: Style = field(default_factory=Style)
    text: Optional[str] = None
    header: Optional[str] = None
    parent: Optional[NodeId] = None
    children: List[NodeId] = field(default_factory=list)
    computed_style: Optional[Style] = None
    layout: Rect = field(default_factory=Rect)

    @property
    def is_leaf(self) -> bool:
        return self.text is not None


class NodeTree:
    """Arena of nodes addressed by handle.

    The root node is created with the tree. Other nodes are created detached
    and attached with add_child(). Every mutation bumps ``revision`` so callers
    can tell when a new layout pass is needed.
    """

    def __init__(self, style: Optional[Style] = None):
        self._nodes: Dict[NodeId, Node] = {}
        self._next_id = 0
        self.revision = 0
        self.root = self.create(style)

    def __getitem__(self, node_id: NodeId) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise TreeError(f"Unknown node {node_id!r}") from None

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def create(self, style: Optional[Style] = None, text: Optional[str] = None,
               header: Optional[str] = None) -> NodeId:
        """Create a detached node and return its handle."""
        node_id = self._next_id
        self._next_id += 1
        self._nodes[node_id] = Node(node_id, style or Style(), text, header)
        self.revision += 1
        return node_id

    def add_child(self, parent: NodeId, child: NodeId) -> NodeId:
        """Append ``child`` to ``parent``'s children.

        Raises:
            TreeError: If either handle is unknown, the child already has a
                parent, the parent is a text leaf, or the child is the parent
                itself or one of its ancestors.
        """
        parent_node = self[parent]
        child_node = self[child]
        if child_node.parent is not None:
            raise TreeError(f"Node {child} already has parent {child_node.parent}")
        if child == self.root:
            raise TreeError("The root node cannot be a child")
        if parent_node.is_leaf:
            raise TreeError(f"Text node {parent} cannot have children")
        if child == parent or child in self.ancestors(parent):
            raise TreeError(f"Adding {child} under {parent} would create a cycle")
        child_node.parent = parent
        parent_node.children.append(child)
        self.revision += 1
        return child

    def remove_child(self, parent: NodeId, child: NodeId) -> Optional[NodeId]:
        """Detach ``child`` from ``parent``.

        Returns:
            The child handle, or None if it was not a child of ``parent``.
        """
        parent_node = self[parent]
        if child not in parent_node.children:
            return None
        parent_node.children.remove(child)
        self[child].parent = None
        self.revision += 1
        return child

    def set_style(self, node_id: NodeId, style: Style):
        self[node_id].style = style
        self.revision += 1

    def set_text(self, node_id: NodeId, text: str):
        node = self[node_id]
        if node.children and text is not None:
            raise TreeError(f"Node {node_id} has children and cannot hold text")
        node.text = text
        self.revision += 1

    def set_header(self, node_id: NodeId, header: Optional[str]):
        self[node_id].header = header
        self.revision += 1

    def parent(self, node_id: NodeId) -> Optional[NodeId]:
        return self[node_id].parent

    def children(self, node_id: NodeId) -> List[NodeId]:
        return list(self[node_id].children)

    def ancestors(self, node_id: NodeId) -> Iterator[NodeId]:
        """Yield parent, grandparent, ... up to the root."""
        current = self[node_id].parent
        while current is not None:
            yield current
            current = self._nodes[current].parent

    def walk(self, node_id: Optional[NodeId] = None) -> Iterator[Node]:
        """Yield nodes of a subtree in pre-order (parents before children)."""
        stack = [self.root if node_id is None else node_id]
        while stack:
            node = self[stack.pop()]
            yield node
            stack.extend(reversed(node.children))


class TreeBuilder:
    """Builds a tree with nested ``with`` blocks.

    The builder keeps its own stack of in-progress parents, so several
    builders can work on different trees without shared state::

        builder = TreeBuilder(tree)
        with builder.row(Style(border=True), header="Status"):
            builder.text("left", Style(flex_grow=1))
            builder.text("right")
    """

    def __init__(self, tree: NodeTree, parent: Optional[NodeId] = None):
        self.tree = tree
        self._stack: List[NodeId] = [tree.root if parent is None else parent]

    @property
    def current(self) -> NodeId:
        """Handle new nodes are attached to."""
        return self._stack[-1]

    @contextmanager
    def box(self, style: Optional[Style] = None, header: Optional[str] = None):
        node_id = self.tree.add_child(self.current, self.tree.create(style, header=header))
        self._stack.append(node_id)
        try:
            yield node_id
        finally:
            self._stack.pop()

    def row(self, style: Optional[Style] = None, header: Optional[str] = None):
        """Flex container laid out horizontally."""
        style = (style or Style()).with_(display=Display.FLEX, flex_direction=FlexDirection.ROW)
        return self.box(style, header)

    def column(self, style: Optional[Style] = None, header: Optional[str] = None):
        """Flex container laid out vertically."""
        style = (style or Style()).with_(display=Display.FLEX, flex_direction=FlexDirection.COLUMN)
        return self.box(style, header)

    def text(self, content: str, style: Optional[Style] = None) -> NodeId:
        return self.tree.add_child(self.current, self.tree.create(style, text=content))
