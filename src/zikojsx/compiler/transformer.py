"""The markup lowering pass."""

from __future__ import annotations

import logging
from typing import Optional

from zikojsx.compiler.ast_nodes import MarkupElement, Node, Program
from zikojsx.compiler.injector import inject_declarations
from zikojsx.compiler.lowering import is_intrinsic, lower_element, resolve_tag
from zikojsx.compiler.scopes import TagUsage, find_scope
from zikojsx.compiler.visitor import NodeTransformer
from zikojsx.config import CompilerOptions

log = logging.getLogger(__name__)


class MarkupTransformer(NodeTransformer):
    """
    Lowers every markup element and records intrinsic tag usage per scope.

    Usage is recorded when an element is entered, so tags appear in document
    order. Children are lowered before their parent; by the time an element
    is turned into a call its nested elements are calls already.
    """

    def __init__(self) -> None:
        super().__init__()
        self.usage = TagUsage()

    def visit_MarkupElement(self, node: MarkupElement) -> Node:
        tag = resolve_tag(node.open_tag.name)
        if is_intrinsic(tag.name):
            self.usage.record(find_scope(self.ancestors), tag.name)

        self.generic_visit(node)
        return lower_element(node)


def transform(program: Program, options: Optional[CompilerOptions] = None) -> Program:
    """Lower all markup in ``program`` in place and return it."""
    options = options or CompilerOptions()

    transformer = MarkupTransformer()
    transformer.visit(program)
    log.debug("Collected tag usage in %d scope(s)", len(transformer.usage))

    inject_declarations(program, transformer.usage, options)
    return program
