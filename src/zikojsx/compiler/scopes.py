"""Per-scope collection of intrinsic tag usage."""

from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from zikojsx.compiler.ast_nodes import Node, ScopeKind, scope_kind


def find_scope(ancestors: Sequence[Node]) -> Node:
    """
    Return the scope that owns a node with the given ancestor chain.

    The chain runs from the root to the node's parent. The innermost
    function-like ancestor wins; without one the root program owns the node.
    """
    for ancestor in reversed(ancestors):
        kind = scope_kind(ancestor)
        if kind is not None and kind is not ScopeKind.PROGRAM:
            return ancestor
    for ancestor in ancestors:
        if scope_kind(ancestor) is ScopeKind.PROGRAM:
            return ancestor
    raise ValueError("Ancestor chain has no program root")


class TagUsage:
    """Scope -> distinct tag names, in first-seen order for both."""

    def __init__(self) -> None:
        self._scopes: Dict[Node, Dict[str, None]] = {}

    def record(self, scope: Node, tag: str) -> None:
        self._scopes.setdefault(scope, {})[tag] = None

    def tags_for(self, scope: Node) -> List[str]:
        return list(self._scopes.get(scope, ()))

    def items(self) -> Iterator[Tuple[Node, List[str]]]:
        for scope, tags in self._scopes.items():
            yield scope, list(tags)

    def __bool__(self) -> bool:
        return any(self._scopes.values())

    def __len__(self) -> int:
        return len(self._scopes)

    def __contains__(self, scope: object) -> bool:
        return scope in self._scopes
