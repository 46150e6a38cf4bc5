"""Depth-first traversal over zikojsx syntax trees.

Mirrors ``ast.NodeVisitor`` / ``ast.NodeTransformer``: ``visit_<ClassName>``
methods override the default recursion for their node kind, and
``generic_visit`` walks the ``_fields`` slots in declaration order. Both
classes keep ``ancestors``, the root-to-parent chain of the node currently
being visited.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional

from zikojsx.compiler.ast_nodes import Node, iter_fields


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in slot order."""
    for _, value in iter_fields(node):
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and every descendant, depth first, in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


class NodeVisitor:
    """Read-only traversal with ancestor tracking."""

    def __init__(self) -> None:
        self.ancestors: List[Node] = []

    def visit(self, node: Node) -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node) -> Any:
        self.ancestors.append(node)
        try:
            for child in iter_child_nodes(node):
                self.visit(child)
        finally:
            self.ancestors.pop()
        return node


class NodeTransformer(NodeVisitor):
    """Traversal that replaces each child with the return value of its visit.

    Returning ``None`` for a node held in a list slot removes it; returning
    ``None`` for a single slot clears that slot.
    """

    def generic_visit(self, node: Node) -> Any:
        self.ancestors.append(node)
        try:
            for name, value in iter_fields(node):
                if isinstance(value, list):
                    self._visit_list(node, value)
                elif isinstance(value, Node):
                    new_node = self.visit(value)
                    if new_node is not value:
                        setattr(node, name, new_node)
                        _sync_named_slot(node, value, new_node)
        finally:
            self.ancestors.pop()
        return node

    def _visit_list(self, parent: Node, items: List[Any]) -> None:
        new_items: List[Any] = []
        for item in items:
            if not isinstance(item, Node):
                new_items.append(item)
                continue
            new_item = self.visit(item)
            if new_item is not item:
                _sync_named_slot(parent, item, new_item)
            if new_item is not None:
                new_items.append(new_item)
        # Keep list identity, other references may hold it.
        items[:] = new_items


def _sync_named_slot(parent: Node, old: Node, new: Optional[Node]) -> None:
    # SourceNode keeps a lookup of its named slots beside the children list.
    fields = getattr(parent, "fields", None)
    if not isinstance(fields, dict):
        return
    for key, child in list(fields.items()):
        if child is old:
            if new is None:
                del fields[key]
            else:
                fields[key] = new
