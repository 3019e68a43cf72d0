"""Text renderings of a syntax tree."""

from __future__ import annotations

from piklisp.tree import NodeId, Tree


def to_classic(tree: Tree, node: NodeId | None = None) -> str:
    """Render a subtree in fully parenthesized classic syntax."""
    if node is None:
        node = tree.root
    content = tree.content(node)
    if content is not None:
        return content
    return "(" + " ".join(to_classic(tree, child) for child in tree.children(node)) + ")"


def dump(tree: Tree, node: NodeId | None = None, depth: int = 0) -> list[str]:
    """Readable one-line-per-node listing of a subtree."""
    if node is None:
        node = tree.root
    pad = "  " * depth
    content = tree.content(node)
    if content is not None:
        return [f"{pad}{content}"]
    kids = tree.children(node)
    lines = [f"{pad}list ({len(kids)})"]
    for child in kids:
        lines.extend(dump(tree, child, depth + 1))
    return lines
