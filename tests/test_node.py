"""Tests for NodeTree and TreeBuilder."""

import pytest
from term_flexbox import Display, FlexDirection, NodeTree, Rect, Style, TreeBuilder, TreeError


class TestNodeTree:
    """Tests for the node arena."""

    def test_root_created_with_tree(self):
        """Test that a new tree has a parentless root."""
        tree = NodeTree(Style(bg='blue'))
        root = tree[tree.root]
        assert root.parent is None
        assert root.children == []
        assert root.style.bg == 'blue'
        assert root.layout == Rect()
        assert len(tree) == 1

    def test_create_is_detached(self):
        """Test that created nodes have no parent until added."""
        tree = NodeTree()
        node = tree.create(text='hi')
        assert tree.parent(node) is None
        assert tree[node].is_leaf
        assert node in tree

    def test_add_child_keeps_order(self):
        """Test that children keep insertion order and know their parent."""
        tree = NodeTree()
        a = tree.add_child(tree.root, tree.create())
        b = tree.add_child(tree.root, tree.create())
        c = tree.add_child(tree.root, tree.create())
        assert tree.children(tree.root) == [a, b, c]
        assert tree.parent(b) == tree.root

    def test_children_returns_copy(self):
        """Test that callers cannot mutate the child list through children()."""
        tree = NodeTree()
        tree.add_child(tree.root, tree.create())
        tree.children(tree.root).clear()
        assert len(tree.children(tree.root)) == 1

    def test_revision_bumps_on_mutation(self):
        """Test that every mutation changes the revision."""
        tree = NodeTree()
        node = tree.create()
        before = tree.revision
        tree.add_child(tree.root, node)
        assert tree.revision > before
        before = tree.revision
        tree.set_style(node, Style(fg='red'))
        assert tree.revision > before
        before = tree.revision
        tree.remove_child(tree.root, node)
        assert tree.revision > before

    def test_second_parent_rejected(self):
        """Test that a node can only appear in one child list."""
        tree = NodeTree()
        a = tree.add_child(tree.root, tree.create())
        b = tree.add_child(tree.root, tree.create())
        with pytest.raises(TreeError):
            tree.add_child(a, b)

    def test_cycle_rejected(self):
        """Test that a node cannot become its own ancestor."""
        tree = NodeTree()
        a = tree.create()
        b = tree.create()
        tree.add_child(tree.root, a)
        tree.add_child(a, b)
        tree.remove_child(tree.root, a)
        with pytest.raises(TreeError):
            tree.add_child(b, a)
        with pytest.raises(TreeError):
            tree.add_child(a, a)

    def test_root_cannot_be_child(self):
        """Test that the root cannot be attached under another node."""
        tree = NodeTree()
        other = tree.create()
        with pytest.raises(TreeError):
            tree.add_child(other, tree.root)

    def test_text_leaf_cannot_have_children(self):
        """Test that text nodes stay leaves."""
        tree = NodeTree()
        label = tree.add_child(tree.root, tree.create(text='label'))
        with pytest.raises(TreeError):
            tree.add_child(label, tree.create())

    def test_set_text_on_container_rejected(self):
        """Test that a node with children cannot become a text leaf."""
        tree = NodeTree()
        tree.add_child(tree.root, tree.create())
        with pytest.raises(TreeError):
            tree.set_text(tree.root, 'oops')

    def test_unknown_handle(self):
        """Test that unknown handles raise TreeError."""
        tree = NodeTree()
        with pytest.raises(TreeError):
            tree[99]
        with pytest.raises(TreeError):
            tree.add_child(tree.root, 42)

    def test_remove_child(self):
        """Test detaching a child."""
        tree = NodeTree()
        child = tree.add_child(tree.root, tree.create())
        assert tree.remove_child(tree.root, child) == child
        assert tree.parent(child) is None
        assert tree.children(tree.root) == []

    def test_remove_missing_child_returns_none(self):
        """Test that removing a non-child returns None."""
        tree = NodeTree()
        stray = tree.create()
        assert tree.remove_child(tree.root, stray) is None

    def test_removed_child_can_be_reattached(self):
        """Test that a detached node can move to another parent."""
        tree = NodeTree()
        a = tree.add_child(tree.root, tree.create())
        b = tree.add_child(tree.root, tree.create())
        tree.remove_child(tree.root, b)
        tree.add_child(a, b)
        assert tree.parent(b) == a

    def test_walk_is_pre_order(self):
        """Test that walk visits parents before children, in order."""
        tree = NodeTree()
        a = tree.add_child(tree.root, tree.create())
        a1 = tree.add_child(a, tree.create())
        b = tree.add_child(tree.root, tree.create())
        assert [node.id for node in tree.walk()] == [tree.root, a, a1, b]
        assert [node.id for node in tree.walk(a)] == [a, a1]

    def test_ancestors(self):
        """Test that ancestors run from the parent up to the root."""
        tree = NodeTree()
        a = tree.add_child(tree.root, tree.create())
        a1 = tree.add_child(a, tree.create())
        assert list(tree.ancestors(a1)) == [a, tree.root]


class TestTreeBuilder:
    """Tests for the explicit builder."""

    def test_nested_blocks(self):
        """Test that nodes attach to the innermost open box."""
        tree = NodeTree()
        builder = TreeBuilder(tree)
        with builder.box(Style(border=True), header='Outer') as outer:
            assert builder.current == outer
            inner_text = builder.text('inside')
        after = builder.text('after')

        assert tree.children(tree.root) == [outer, after]
        assert tree.children(outer) == [inner_text]
        assert tree[outer].header == 'Outer'
        assert builder.current == tree.root

    def test_row_and_column_set_flex(self):
        """Test the row/column shortcuts."""
        tree = NodeTree()
        builder = TreeBuilder(tree)
        with builder.row(Style(fg='red')) as row:
            with builder.column() as column:
                pass
        assert tree[row].style.display is Display.FLEX
        assert tree[row].style.flex_direction is FlexDirection.ROW
        assert tree[row].style.fg == 'red'
        assert tree[column].style.flex_direction is FlexDirection.COLUMN

    def test_stack_restored_after_error(self):
        """Test that an exception inside a block pops the parent."""
        tree = NodeTree()
        builder = TreeBuilder(tree)
        with pytest.raises(RuntimeError):
            with builder.box():
                raise RuntimeError('boom')
        assert builder.current == tree.root

    def test_builders_are_independent(self):
        """Test that two builders do not share a current parent."""
        first = NodeTree()
        second = NodeTree()
        b1 = TreeBuilder(first)
        b2 = TreeBuilder(second)
        with b1.box():
            node = b2.text('other tree')
        assert second.parent(node) == second.root
