"""Arena-backed s-expression tree.

Every node lives in one ``Tree`` and is addressed by an integer handle.
Parent and child links are handles too, so a cursor held by the parser is
never invalidated by appending children, and there is no reference cycle
between a node and its parent.
"""

from __future__ import annotations

from typing import Union

from piklisp.errors import StructureError

NodeId = int

# Plain-data view of a subtree: a leaf is its token, an interior node a list.
TreeData = Union[str, list["TreeData"]]


class Tree:
    """Mutable s-expression tree with parent/child navigation.

    A node is either a leaf (content, no children) or interior (no content,
    zero or more children). Nodes are only ever added; a node's parent is
    fixed when it is created.
    """

    def __init__(self) -> None:
        self._content: list[str | None] = []
        self._parent: list[NodeId | None] = []
        self._children: list[list[NodeId]] = []
        self.root: NodeId = self._new_node(None, None)

    def __len__(self) -> int:
        return len(self._content)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tree):
            return NotImplemented
        return self.to_data() == other.to_data()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Tree({self.to_data()!r})"

    def _new_node(self, parent: NodeId | None, content: str | None) -> NodeId:
        node = len(self._content)
        self._content.append(content)
        self._parent.append(parent)
        self._children.append([])
        if parent is not None:
            self._children[parent].append(node)
        return node

    def _check(self, node: NodeId) -> None:
        if not 0 <= node < len(self._content):
            raise StructureError(f"no such node: {node}")

    # ── Construction ─────────────────────────────────────────────

    def make_child(self, node: NodeId) -> NodeId:
        """Append a new content-less child to ``node`` and return it."""
        self._check(node)
        if self._content[node] is not None:
            raise StructureError(f"cannot add a child to leaf {self._content[node]!r}")
        return self._new_node(node, None)

    def add_token(self, node: NodeId, text: str) -> None:
        """Append a leaf holding ``text`` as the last child of ``node``."""
        self._check(node)
        if self._content[node] is not None:
            raise StructureError(f"cannot add a token to leaf {self._content[node]!r}")
        self._new_node(node, text)

    def collapse(self) -> NodeId:
        """Strip single-child wrapping from the root.

        While the root has no content and exactly one child, that child
        becomes the root. Returns the new root.
        """
        while self._content[self.root] is None and len(self._children[self.root]) == 1:
            self.root = self._children[self.root][0]
        return self.root

    # ── Traversal ────────────────────────────────────────────────

    def parent(self, node: NodeId) -> NodeId:
        self._check(node)
        parent = self._parent[node]
        if node == self.root or parent is None:
            raise StructureError("the root node has no parent")
        return parent

    def is_root(self, node: NodeId) -> bool:
        return node == self.root

    def content(self, node: NodeId) -> str | None:
        self._check(node)
        return self._content[node]

    def is_leaf(self, node: NodeId) -> bool:
        return self.content(node) is not None

    def children(self, node: NodeId) -> tuple[NodeId, ...]:
        self._check(node)
        return tuple(self._children[node])

    def first_child(self, node: NodeId) -> NodeId | None:
        self._check(node)
        kids = self._children[node]
        return kids[0] if kids else None

    def last_child(self, node: NodeId) -> NodeId | None:
        self._check(node)
        kids = self._children[node]
        return kids[-1] if kids else None

    def forms(self) -> tuple[NodeId, ...]:
        """Top-level forms of a collapsed tree.

        A root that survived collapsing is the bare wrapper around several
        forms (or around nothing); any other root is itself the single form.
        """
        if self._parent[self.root] is None and self._content[self.root] is None:
            return tuple(self._children[self.root])
        return (self.root,)

    def depth(self, node: NodeId) -> int:
        """Number of parent steps from ``node`` up to the root."""
        steps = 0
        while node != self.root:
            node = self.parent(node)
            steps += 1
        return steps

    def to_data(self, node: NodeId | None = None) -> TreeData:
        """Convert a subtree to nested lists of token strings."""
        if node is None:
            node = self.root
        content = self.content(node)
        if content is not None:
            return content
        return [self.to_data(child) for child in self._children[node]]
