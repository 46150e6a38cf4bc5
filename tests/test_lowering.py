import unittest
from typing import List, Optional

import pytest

from zikojsx.compiler.ast_nodes import (
    CallExpression,
    ClosingTag,
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
    OpeningTag,
    Property,
    SourceNode,
    SpreadAttribute,
)
from zikojsx.compiler.exceptions import MalformedSource, UnsupportedNameKind
from zikojsx.compiler.lowering import is_intrinsic, lower_element, resolve_tag


def name(text: str, kind: NameKind = NameKind.IDENTIFIER) -> MarkupName:
    return MarkupName(kind=kind, text=text)


def element(
    tag: str,
    attributes: Optional[List[Node]] = None,
    children: Optional[List[Node]] = None,
) -> MarkupElement:
    return MarkupElement(
        open_tag=OpeningTag(name=name(tag), attributes=attributes or []),
        children=children or [],
        close_tag=ClosingTag(name=name(tag)),
    )


def ident(text: str) -> SourceNode:
    return SourceNode(kind="identifier", text=text)


class TestResolveTag(unittest.TestCase):
    def test_plain_identifier(self) -> None:
        self.assertEqual(resolve_tag(name("div")).name, "div")

    def test_dashes_become_underscores(self) -> None:
        self.assertEqual(resolve_tag(name("custom-el")).name, "custom_el")

    def test_leading_digit_is_prefixed(self) -> None:
        self.assertEqual(resolve_tag(name("1up")).name, "_1up")

    def test_dollar_and_underscore_are_kept(self) -> None:
        self.assertEqual(resolve_tag(name("$my_tag")).name, "$my_tag")

    def test_member_name_is_rejected(self) -> None:
        with self.assertRaises(UnsupportedNameKind):
            resolve_tag(name("ui.Button", NameKind.MEMBER))

    def test_namespaced_name_is_rejected(self) -> None:
        with pytest.raises(UnsupportedNameKind, match="svg:rect"):
            resolve_tag(name("svg:rect", NameKind.NAMESPACED))


def test_intrinsic_classification() -> None:
    assert is_intrinsic("div")
    assert is_intrinsic("custom_el")
    assert not is_intrinsic("Comp")
    assert not is_intrinsic("_private")
    assert not is_intrinsic("$x")


def test_no_attributes_means_no_object_argument() -> None:
    call = lower_element(element("br"))
    assert isinstance(call, CallExpression)
    assert call.callee.name == "br"
    assert call.arguments == []


def test_attributes_object_keeps_source_order() -> None:
    x = ident("x")
    call = lower_element(
        element(
            "div",
            attributes=[
                MarkupAttribute(name=name("class"), value=Literal(value="box")),
                MarkupAttribute(name=name("id"), value=ExpressionContainer(expression=x)),
                MarkupAttribute(name=name("hidden")),
            ],
        )
    )

    assert len(call.arguments) == 1
    props = call.arguments[0]
    assert isinstance(props, ObjectExpression)
    keys = [p.key.name for p in props.properties if isinstance(p, Property)]
    assert keys == ["class", "id", "hidden"]

    class_prop, id_prop, hidden_prop = props.properties
    assert isinstance(class_prop, Property) and class_prop.value.value == "box"
    # Expression containers are unwrapped, never passed through.
    assert isinstance(id_prop, Property) and id_prop.value is x
    # Valueless attributes are boolean true.
    assert isinstance(hidden_prop, Property)
    assert isinstance(hidden_prop.value, Literal) and hidden_prop.value.value is True


def test_non_identifier_attribute_name_becomes_string_key() -> None:
    call = lower_element(
        element("div", attributes=[MarkupAttribute(name=name("data-id"), value=Literal(value="1"))])
    )
    prop = call.arguments[0].properties[0]
    assert isinstance(prop.key, Literal)
    assert prop.key.value == "data-id"


def test_spread_attribute_becomes_spread_property() -> None:
    spread = SourceNode(kind="spread_element", children=[ident("props")])
    call = lower_element(element("div", attributes=[SpreadAttribute(argument=spread)]))
    assert call.arguments[0].properties == [spread]


def test_empty_attribute_expression_is_malformed() -> None:
    with pytest.raises(MalformedSource):
        lower_element(
            element("div", attributes=[MarkupAttribute(name=name("id"), value=ExpressionContainer())])
        )


def test_element_attribute_value_is_lowered() -> None:
    call = lower_element(
        element("Slot", attributes=[MarkupAttribute(name=name("icon"), value=element("svg"))])
    )
    value = call.arguments[0].properties[0].value
    assert isinstance(value, CallExpression)
    assert value.callee.name == "svg"


def test_children_follow_attributes() -> None:
    call = lower_element(
        element(
            "div",
            attributes=[MarkupAttribute(name=name("class"), value=Literal(value="box"))],
            children=[element("h1", children=[MarkupText(raw="Hi")])],
        )
    )
    assert isinstance(call.arguments[0], ObjectExpression)
    nested = call.arguments[1]
    assert isinstance(nested, CallExpression)
    assert nested.callee.name == "h1"
    assert isinstance(nested.arguments[0], Literal)
    assert nested.arguments[0].value == "Hi"


def test_inline_text_siblings_keep_inner_spacing() -> None:
    x = ident("x")
    call = lower_element(
        element(
            "p",
            children=[
                MarkupText(raw="a "),
                ExpressionContainer(expression=x),
                MarkupText(raw=" b"),
            ],
        )
    )
    first, middle, last = call.arguments
    assert first.value == "a "
    assert middle is x
    assert last.value == " b"


def test_whitespace_children_and_empty_containers_are_dropped() -> None:
    call = lower_element(
        element(
            "ul",
            children=[
                MarkupText(raw="\n  "),
                element("li"),
                ExpressionContainer(),
                MarkupText(raw="\n"),
            ],
        )
    )
    assert len(call.arguments) == 1
    assert call.arguments[0].callee.name == "li"


def test_other_children_pass_through() -> None:
    already = CallExpression(callee=Identifier(name="span"))
    call = lower_element(element("div", children=[already]))
    assert call.arguments == [already]


def test_component_tags_are_called_by_name() -> None:
    call = lower_element(element("Comp", attributes=[MarkupAttribute(name=name("a"), value=Literal(value="kk"))]))
    assert call.callee.name == "Comp"
