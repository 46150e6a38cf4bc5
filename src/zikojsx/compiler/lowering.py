"""Lowering of one markup element into a call expression."""

from __future__ import annotations

import re
from typing import List, Optional

from zikojsx.compiler.ast_nodes import (
    CallExpression,
    ExpressionContainer,
    Identifier,
    Literal,
    MarkupAttribute,
    MarkupElement,
    MarkupName,
    MarkupText,
    NameKind,
    Node,
    ObjectExpression,
    Property,
    SpreadAttribute,
)
from zikojsx.compiler.exceptions import MalformedSource, UnsupportedNameKind
from zikojsx.compiler.text import normalize_text

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_$]")
_IDENTIFIER_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_INTRINSIC = re.compile(r"^[a-z]")


def resolve_tag(name: MarkupName) -> Identifier:
    """Turn a tag name into the identifier that will be called."""
    if name.kind is not NameKind.IDENTIFIER:
        raise UnsupportedNameKind(
            f"Unsupported tag name '{name.text}' ({name.kind.value} names are not supported)",
            line=name.line or None,
            column=name.column,
        )

    ident = _INVALID_IDENTIFIER_CHARS.sub("_", name.text)
    if ident[:1].isdigit():
        ident = "_" + ident
    return Identifier(name=ident, span=name.span)


def is_intrinsic(tag: str) -> bool:
    """Lowercase-initial tags are intrinsic; anything else is a component."""
    return bool(_INTRINSIC.match(tag))


def lower_attributes(attributes: List[Node]) -> Optional[ObjectExpression]:
    if not attributes:
        return None

    properties: List[Node] = []
    for attr in attributes:
        if isinstance(attr, SpreadAttribute):
            properties.append(attr.argument)
            continue
        if not isinstance(attr, MarkupAttribute):
            properties.append(attr)
            continue
        properties.append(
            Property(key=_property_key(attr.name.text), value=_attribute_value(attr))
        )
    return ObjectExpression(properties=properties)


def _property_key(raw: str) -> Node:
    if _IDENTIFIER_NAME.match(raw):
        return Identifier(name=raw)
    return Literal(value=raw)


def _attribute_value(attr: MarkupAttribute) -> Node:
    value = attr.value
    if value is None:
        return Literal(value=True)
    if isinstance(value, ExpressionContainer):
        if value.expression is None:
            raise MalformedSource(
                f"Attribute '{attr.name.text}' has an empty expression",
                line=attr.line or None,
                column=attr.column,
            )
        return value.expression
    if isinstance(value, MarkupElement):
        return lower_element(value)
    return value


def lower_child(child: Node, first: bool, last: bool) -> Optional[Node]:
    """Lower one child; None means it contributes no argument."""
    if isinstance(child, MarkupText):
        text = normalize_text(child.raw, first=first, last=last)
        if text is None:
            return None
        return Literal(value=text, span=child.span)

    if isinstance(child, ExpressionContainer):
        return child.expression

    if isinstance(child, MarkupElement):
        return lower_element(child)

    return child


def lower_element(element: MarkupElement) -> CallExpression:
    """Map a markup element to ``tag(attributes?, ...children)``."""
    callee = resolve_tag(element.open_tag.name)

    arguments: List[Node] = []
    attributes = lower_attributes(element.open_tag.attributes)
    if attributes is not None:
        arguments.append(attributes)

    last_index = len(element.children) - 1
    for index, child in enumerate(element.children):
        argument = lower_child(child, first=index == 0, last=index == last_index)
        if argument is not None:
            arguments.append(argument)

    return CallExpression(callee=callee, arguments=arguments, span=element.span)
