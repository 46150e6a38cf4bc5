"""JavaScript code generation for zikojsx syntax trees.

Nodes that came from the source are reproduced from it: the text between
their children is copied verbatim and each child is generated recursively.
Nodes created by the transform have no source text and are rendered here.
Untouched code therefore round-trips byte for byte, comments included.
"""

from __future__ import annotations

import json
from typing import Callable, Dict, List, Optional

from zikojsx.compiler.ast_nodes import (
    CallExpression,
    HoistingDeclaration,
    Identifier,
    ImportBinding,
    Literal,
    Node,
    ObjectExpression,
    Program,
    Property,
    ReturnStatement,
    SourceNode,
    StatementBlock,
)
from zikojsx.compiler.visitor import iter_child_nodes

INDENT = "  "

# Expressions that must be parenthesized when used as an argument or value.
_NEEDS_PARENS = frozenset({"sequence_expression"})


class CodeGenerator:
    """Generates JavaScript source from a (transformed) syntax tree."""

    def __init__(self, source: bytes = b"") -> None:
        self.source = source
        self._generators: Dict[type, Callable[[Node], str]] = {
            Identifier: self._gen_identifier,
            Literal: self._gen_literal,
            Property: self._gen_property,
            ObjectExpression: self._gen_object,
            CallExpression: self._gen_call,
            ReturnStatement: self._gen_return,
            StatementBlock: self._gen_block,
            HoistingDeclaration: self._gen_hoisting,
            ImportBinding: self._gen_import,
        }

    def generate(self, node: Node) -> str:
        generator = self._generators.get(type(node))
        if generator is not None:
            return generator(node)
        if node.span is None:
            raise ValueError(f"Cannot generate {type(node).__name__} without source")
        return self._splice(node)

    # === Source reproduction ===

    def _text(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")

    def _splice(self, node: Node) -> str:
        """Copy ``node`` from source, generating its children in place."""
        assert node.span is not None
        parts: List[str] = []
        pending: List[Node] = []
        cursor = node.span.start

        for child in iter_child_nodes(node):
            if child.span is None:
                # Inserted by the transform, placed before the next source child.
                pending.append(child)
                continue

            gap = self._text(cursor, child.span.start)
            parts.append(gap)
            if pending:
                separator = _separator(gap)
                for inserted in pending:
                    parts.append(self.generate(inserted))
                    parts.append(separator)
                pending = []
            parts.append(self.generate(child))
            cursor = child.span.end

        tail = self._text(cursor, node.span.end)
        if pending:
            inserted_text = " ".join(self.generate(n) for n in pending)
            closing = tail.rfind("}")
            if closing != -1 and not tail[closing + 1 :].strip():
                tail = f"{tail[:closing].rstrip()} {inserted_text} {tail[closing:]}"
            else:
                tail = f"{tail}\n{inserted_text}\n"
        parts.append(tail)
        return "".join(parts)

    def _line_indent(self, offset: int) -> str:
        line_start = self.source.rfind(b"\n", 0, offset) + 1
        line = self.source[line_start:offset].decode("utf-8")
        return line[: len(line) - len(line.lstrip(" \t"))]

    # === Synthesized nodes ===

    def _gen_identifier(self, node: Identifier) -> str:
        return node.name

    def _gen_literal(self, node: Literal) -> str:
        value = node.value
        if value is True:
            return "true"
        if value is False:
            return "false"
        if value is None:
            return "null"
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        return repr(value)

    def _gen_expression(self, node: Node) -> str:
        code = self.generate(node)
        if isinstance(node, SourceNode) and node.kind in _NEEDS_PARENS:
            return f"({code})"
        return code

    def _gen_property(self, node: Property) -> str:
        return f"{self.generate(node.key)}: {self._gen_expression(node.value)}"

    def _gen_object(self, node: ObjectExpression) -> str:
        return "{" + ", ".join(self._gen_expression(p) for p in node.properties) + "}"

    def _gen_call(self, node: CallExpression) -> str:
        args = ", ".join(self._gen_expression(arg) for arg in node.arguments)
        return f"{self.generate(node.callee)}({args})"

    def _gen_return(self, node: ReturnStatement) -> str:
        if node.argument is None:
            return "return;"
        return f"return {self.generate(node.argument)};"

    def _gen_block(self, node: StatementBlock) -> str:
        base = self._line_indent(node.span.start) if node.span else ""
        inner = base + INDENT
        lines = [inner + self.generate(statement) for statement in node.body]
        return "{\n" + "\n".join(lines) + "\n" + base + "}"

    def _gen_hoisting(self, node: HoistingDeclaration) -> str:
        return f"{node.kind} {{ {', '.join(node.names)} }} = {node.binding};"

    def _gen_import(self, node: ImportBinding) -> str:
        return f"import {{ {node.name} }} from {json.dumps(node.module)};"


def _separator(gap: str) -> str:
    """Whitespace to put after an inserted statement, matching the gap."""
    newline = gap.rfind("\n")
    if newline != -1 and not gap[newline:].strip():
        return gap[newline:]
    trailing = gap[len(gap.rstrip()) :]
    return trailing or "\n"


def generate(program: Program, source: Optional[bytes] = None) -> str:
    """Generate the source text of ``program``."""
    return CodeGenerator(program.source if source is None else source).generate(program)
