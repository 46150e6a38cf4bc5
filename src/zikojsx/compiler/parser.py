"""Parser front end: tree-sitter parse tree -> zikojsx syntax tree."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node as TSNode, Parser

from zikojsx.compiler.ast_nodes import (
    ClosingTag,
    ExpressionContainer,
    Literal,
    MarkupAttribute,
    MarkupElement,
    MarkupName,
    MarkupText,
    NameKind,
    Node,
    OpeningTag,
    Program,
    SourceNode,
    Span,
    SpreadAttribute,
)
from zikojsx.compiler.exceptions import MalformedSource, UnsupportedNameKind

JAVASCRIPT_LANGUAGE = Language(tsjavascript.language())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

DIALECTS: Dict[str, Language] = {
    "jsx": JAVASCRIPT_LANGUAGE,
    "tsx": TSX_LANGUAGE,
}

# Named slots the transform reads back from host-language nodes.
_FIELDS = ("body", "name", "value", "declaration", "alias", "key", "left")

# Non-leaf kinds whose source text is kept on the node.
_TEXT_KINDS = frozenset({"string"})

# Everything inside an element that is not one of these is text.
_MARKUP_CHILD_KINDS = frozenset(
    {"jsx_element", "jsx_self_closing_element", "jsx_expression"}
)

_NAME_KINDS = {
    "identifier": NameKind.IDENTIFIER,
    "jsx_identifier": NameKind.IDENTIFIER,
    "property_identifier": NameKind.IDENTIFIER,
    "member_expression": NameKind.MEMBER,
    "nested_identifier": NameKind.MEMBER,
    "jsx_namespace_name": NameKind.NAMESPACED,
}

_COMMENT_KINDS = frozenset({"comment", "html_comment"})


def dialect_for_path(path: Union[str, Path]) -> str:
    """TypeScript flavoured files need the TSX grammar."""
    return "tsx" if Path(path).suffix in (".tsx", ".ts", ".mts", ".cts") else "jsx"


def _key(node: TSNode) -> Tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


class JsxParser:
    """Parses JavaScript (or TSX) with markup into a ``Program``."""

    def __init__(self, dialect: str = "jsx") -> None:
        if dialect not in DIALECTS:
            raise ValueError(
                f"Unknown dialect '{dialect}' (expected one of {', '.join(DIALECTS)})"
            )
        self.dialect = dialect
        self._parser = Parser(DIALECTS[dialect])
        self._source = b""
        self._file_path = ""

    def parse_file(self, file_path: Path) -> Program:
        """Parse a source file."""
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse(content, str(file_path))

    def parse(self, content: Union[str, bytes], file_path: str = "") -> Program:
        """Parse ``content``; any syntax error raises ``MalformedSource``."""
        source = content.encode("utf-8") if isinstance(content, str) else content
        self._source = source
        self._file_path = file_path

        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            raise self._syntax_error(root)

        program = Program(
            children=[self._map_node(c) for c in root.named_children],
            source=source,
            span=Span(0, len(source), line=1, column=0),
        )
        return program

    # === Errors ===

    def _syntax_error(self, root: TSNode) -> MalformedSource:
        error = _first_error(root) or root
        location = self._location(error.start_byte, error.start_point)
        if error.is_missing:
            message = f"Missing '{error.type}'"
        else:
            snippet = self._text(error.start_byte, error.end_byte).strip()
            snippet = snippet.splitlines()[0][:40] if snippet else ""
            message = f"Unexpected syntax near '{snippet}'" if snippet else "Unexpected syntax"
        return MalformedSource(message, file_path=self._file_path, **location)

    # === Mapping ===

    def _text(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8")

    def _location(self, offset: int, point: Tuple[int, int]) -> Dict[str, int]:
        """1-based line and character column of a byte offset.

        tree-sitter points count bytes; only the current line is decoded.
        """
        row, byte_column = point
        line_start = offset - byte_column
        prefix = self._source[line_start:offset].decode("utf-8", errors="replace")
        return {"line": row + 1, "column": len(prefix)}

    def _span(self, node: TSNode) -> Span:
        return Span(
            node.start_byte,
            node.end_byte,
            **self._location(node.start_byte, node.start_point),
        )

    def _map_node(self, node: TSNode) -> Node:
        if node.type in ("jsx_element", "jsx_self_closing_element"):
            return self._map_element(node)
        if node.type == "jsx_expression":
            return self._map_container(node)
        return self._map_source(node)

    def _map_source(self, node: TSNode) -> SourceNode:
        field_names: Dict[Tuple[int, int, str], str] = {}
        for name in _FIELDS:
            child = node.child_by_field_name(name)
            if child is not None and child.is_named:
                field_names.setdefault(_key(child), name)

        children: List[Node] = []
        fields: Dict[str, Node] = {}
        for child in node.named_children:
            mapped = self._map_node(child)
            children.append(mapped)
            name = field_names.get(_key(child))
            if name is not None:
                fields[name] = mapped

        text = None
        if not children or node.type in _TEXT_KINDS:
            text = self._text(node.start_byte, node.end_byte)

        return SourceNode(
            kind=node.type,
            children=children,
            fields=fields,
            text=text,
            span=self._span(node),
        )

    def _map_element(self, node: TSNode) -> MarkupElement:
        if node.type == "jsx_self_closing_element":
            return MarkupElement(
                open_tag=self._map_opening_tag(node, self_closing=True),
                span=self._span(node),
            )

        opening: Optional[TSNode] = None
        closing: Optional[TSNode] = None
        inner: List[TSNode] = []
        for child in node.named_children:
            if child.type == "jsx_opening_element" and opening is None:
                opening = child
            elif child.type == "jsx_closing_element":
                closing = child
            else:
                inner.append(child)

        if opening is None:
            raise MalformedSource(
                "Element without an opening tag",
                file_path=self._file_path,
                **self._location(node.start_byte, node.start_point),
            )

        children_end = closing.start_byte if closing is not None else node.end_byte
        close_tag = None
        if closing is not None:
            close_name = closing.child_by_field_name("name")
            if close_name is not None:
                close_tag = ClosingTag(
                    name=self._map_name(close_name), span=self._span(closing)
                )

        return MarkupElement(
            open_tag=self._map_opening_tag(opening),
            children=self._map_children(
                inner, opening.end_byte, opening.end_point, children_end
            ),
            close_tag=close_tag,
            span=self._span(node),
        )

    def _map_children(
        self,
        inner: List[TSNode],
        start: int,
        start_point: Tuple[int, int],
        end: int,
    ) -> List[Node]:
        """
        Split the region between the tags into text and markup children.

        Text is taken from the source between non-text children, so
        whitespace and line breaks the grammar leaves out of its text tokens
        are kept. A text run starts where the previous node ends, so its
        position is that node's end point.
        """
        children: List[Node] = []
        cursor, cursor_point = start, start_point
        for child in inner:
            if child.type not in _MARKUP_CHILD_KINDS:
                continue
            if child.start_byte > cursor:
                children.append(self._markup_text(cursor, cursor_point, child.start_byte))
            children.append(self._map_node(child))
            cursor, cursor_point = child.end_byte, child.end_point
        if end > cursor:
            children.append(self._markup_text(cursor, cursor_point, end))
        return children

    def _markup_text(self, start: int, point: Tuple[int, int], end: int) -> MarkupText:
        return MarkupText(
            raw=self._text(start, end),
            span=Span(start, end, **self._location(start, point)),
        )

    def _map_opening_tag(self, node: TSNode, self_closing: bool = False) -> OpeningTag:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            raise UnsupportedNameKind(
                "Fragments (<>...</>) are not supported",
                file_path=self._file_path,
                **self._location(node.start_byte, node.start_point),
            )

        attributes: List[Node] = []
        for child in node.named_children:
            if _key(child) == _key(name_node):
                continue
            if child.type == "jsx_attribute":
                attributes.append(self._map_attribute(child))
            elif child.type == "jsx_expression":
                attributes.append(self._map_spread_attribute(child))
            # Comments and TSX type arguments carry nothing to lower.

        return OpeningTag(
            name=self._map_name(name_node),
            attributes=attributes,
            self_closing=self_closing,
            span=self._span(node),
        )

    def _map_name(self, node: TSNode) -> MarkupName:
        kind = _NAME_KINDS.get(node.type)
        text = self._text(node.start_byte, node.end_byte)
        if kind is None:
            raise UnsupportedNameKind(
                f"Unsupported tag name '{text}' ({node.type})",
                file_path=self._file_path,
                **self._location(node.start_byte, node.start_point),
            )
        return MarkupName(kind=kind, text=text, span=self._span(node))

    def _map_attribute(self, node: TSNode) -> MarkupAttribute:
        parts = [c for c in node.named_children if c.type not in _COMMENT_KINDS]
        name = self._map_name(parts[0])

        value: Optional[Node] = None
        if len(parts) > 1:
            value_node = parts[1]
            if value_node.type == "string":
                raw = self._text(value_node.start_byte + 1, value_node.end_byte - 1)
                value = Literal(value=html.unescape(raw), span=self._span(value_node))
            else:
                value = self._map_node(value_node)

        return MarkupAttribute(name=name, value=value, span=self._span(node))

    def _map_spread_attribute(self, node: TSNode) -> SpreadAttribute:
        inner = [c for c in node.named_children if c.type not in _COMMENT_KINDS]
        if len(inner) != 1 or inner[0].type != "spread_element":
            raise MalformedSource(
                "Expected a spread '{...props}' in attribute position",
                file_path=self._file_path,
                **self._location(node.start_byte, node.start_point),
            )
        return SpreadAttribute(argument=self._map_node(inner[0]), span=self._span(node))

    def _map_container(self, node: TSNode) -> ExpressionContainer:
        inner = [c for c in node.named_children if c.type not in _COMMENT_KINDS]
        expression = self._map_node(inner[0]) if inner else None
        return ExpressionContainer(expression=expression, span=self._span(node))


def _first_error(node: TSNode) -> Optional[TSNode]:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse(
    content: Union[str, bytes], dialect: str = "jsx", file_path: str = ""
) -> Program:
    """Parse ``content`` with a fresh parser."""
    return JsxParser(dialect).parse(content, file_path)
