"""Syntax tree node definitions for zikojsx.

The tree is a closed set of node classes. Every class lists its structural
child slots in ``_fields`` (the same convention as the standard library
``ast`` module), which is all the traversal engine and the code generator
need to know about a node kind.

Host-language constructs the compiler does not rewrite are kept as
``SourceNode`` instances: a grammar kind, the ordered named children and the
byte span they came from. Everything the transform synthesizes is a dedicated
class without a source representation of its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Span:
    """Byte range of a node in the original source."""

    start: int
    end: int
    line: int = 0
    column: int = 0


@dataclass(eq=False)
class Node:
    """Base class for every node in the tree. Nodes hash by identity."""

    _fields: ClassVar[Tuple[str, ...]] = ()

    span: Optional[Span] = field(default=None, kw_only=True, repr=False)

    @property
    def line(self) -> int:
        return self.span.line if self.span else 0

    @property
    def column(self) -> int:
        return self.span.column if self.span else 0


# === Host language ===


@dataclass(eq=False)
class SourceNode(Node):
    """A host-language construct reproduced from source when printed."""

    _fields: ClassVar[Tuple[str, ...]] = ("children",)

    kind: str
    children: List[Node] = field(default_factory=list)
    fields: Dict[str, Node] = field(default_factory=dict)
    text: Optional[str] = None

    def get_field(self, name: str) -> Optional[Node]:
        return self.fields.get(name)

    def set_field(self, name: str, node: Node) -> None:
        """Replace the child stored in a named slot, keeping its position."""
        old = self.fields.get(name)
        if old is None:
            raise KeyError(name)
        for index, child in enumerate(self.children):
            if child is old:
                self.children[index] = node
                break
        self.fields[name] = node


@dataclass(eq=False)
class Program(SourceNode):
    """Root of a parsed module; keeps the source it was parsed from."""

    kind: str = "program"
    source: bytes = field(default=b"", repr=False)


# === Markup ===


class NameKind(Enum):
    IDENTIFIER = "identifier"
    MEMBER = "member"
    NAMESPACED = "namespaced"


@dataclass(eq=False)
class MarkupName(Node):
    kind: NameKind
    text: str


@dataclass(eq=False)
class OpeningTag(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("name", "attributes")

    name: MarkupName
    attributes: List[Node] = field(default_factory=list)
    self_closing: bool = False


@dataclass(eq=False)
class ClosingTag(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("name",)

    name: MarkupName


@dataclass(eq=False)
class MarkupElement(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("open_tag", "children", "close_tag")

    open_tag: OpeningTag
    children: List[Node] = field(default_factory=list)
    close_tag: Optional[ClosingTag] = None


@dataclass(eq=False)
class MarkupAttribute(Node):
    """``name`` or ``name=value``. A missing value is the boolean shorthand."""

    _fields: ClassVar[Tuple[str, ...]] = ("name", "value")

    name: MarkupName
    value: Optional[Node] = None


@dataclass(eq=False)
class SpreadAttribute(Node):
    """``{...props}`` in attribute position."""

    _fields: ClassVar[Tuple[str, ...]] = ("argument",)

    argument: Node


@dataclass(eq=False)
class ExpressionContainer(Node):
    """``{expression}``; ``expression`` is None for an empty container."""

    _fields: ClassVar[Tuple[str, ...]] = ("expression",)

    expression: Optional[Node] = None


@dataclass(eq=False)
class MarkupText(Node):
    """Raw text between non-text children, character references undecoded."""

    raw: str


# === Synthesized ===


@dataclass(eq=False)
class Identifier(Node):
    name: str


@dataclass(eq=False)
class Literal(Node):
    value: Union[str, bool, int, float, None]


@dataclass(eq=False)
class Property(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("key", "value")

    key: Node
    value: Node


@dataclass(eq=False)
class ObjectExpression(Node):
    """Object literal. Properties are ``Property`` or spread source nodes."""

    _fields: ClassVar[Tuple[str, ...]] = ("properties",)

    properties: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class CallExpression(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("callee", "arguments")

    callee: Identifier
    arguments: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ReturnStatement(Node):
    _fields: ClassVar[Tuple[str, ...]] = ("argument",)

    argument: Optional[Node] = None


@dataclass(eq=False)
class StatementBlock(Node):
    """Block body created when an expression-bodied arrow gets a declaration."""

    _fields: ClassVar[Tuple[str, ...]] = ("body",)

    body: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class HoistingDeclaration(Node):
    """``const { div, span } = tags;``"""

    names: List[str]
    binding: str = "tags"
    kind: str = "const"


@dataclass(eq=False)
class ImportBinding(Node):
    """``import { tags } from "ziko/ui";``"""

    name: str
    module: str


# === Scopes ===


class ScopeKind(Enum):
    PROGRAM = "program"
    FUNCTION_DECLARATION = "function_declaration"
    FUNCTION_EXPRESSION = "function_expression"
    ARROW_FUNCTION = "arrow_function"


# Grammar kinds that open a scope. Methods and generators are function
# expressions/declarations in ESTree terms; older grammars call function
# expressions plain ``function``.
SCOPE_KINDS: Dict[str, ScopeKind] = {
    "program": ScopeKind.PROGRAM,
    "function_declaration": ScopeKind.FUNCTION_DECLARATION,
    "generator_function_declaration": ScopeKind.FUNCTION_DECLARATION,
    "function_expression": ScopeKind.FUNCTION_EXPRESSION,
    "function": ScopeKind.FUNCTION_EXPRESSION,
    "generator_function": ScopeKind.FUNCTION_EXPRESSION,
    "method_definition": ScopeKind.FUNCTION_EXPRESSION,
    "arrow_function": ScopeKind.ARROW_FUNCTION,
}

# Children that are not statements when looking for a body's first statement.
NON_STATEMENT_KINDS = frozenset({"comment", "hash_bang_line", "html_comment"})


def scope_kind(node: Node) -> Optional[ScopeKind]:
    """Return the scope classification of ``node``, or None."""
    if isinstance(node, SourceNode):
        return SCOPE_KINDS.get(node.kind)
    return None


def iter_fields(node: Node) -> Iterator[Tuple[str, Any]]:
    """Yield ``(name, value)`` for each structural slot of ``node``."""
    for name in node._fields:
        yield name, getattr(node, name)


def statements_of(block: Node) -> List[Node]:
    """Return the mutable statement list of a program or block body."""
    if isinstance(block, StatementBlock):
        return block.body
    if isinstance(block, SourceNode):
        return block.children
    raise TypeError(f"{type(block).__name__} has no statement list")


def is_directive(node: Node) -> bool:
    """A prologue directive such as ``'use strict';``."""
    return (
        isinstance(node, SourceNode)
        and node.kind == "expression_statement"
        and len(node.children) == 1
        and isinstance(node.children[0], SourceNode)
        and node.children[0].kind == "string"
    )


def first_statement_index(statements: List[Node]) -> int:
    """Index of the first statement, skipping leading comments and directives."""
    for index, node in enumerate(statements):
        if isinstance(node, SourceNode) and node.kind in NON_STATEMENT_KINDS:
            continue
        if is_directive(node):
            continue
        return index
    return len(statements)
