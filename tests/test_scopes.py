import unittest

import pytest

from zikojsx.compiler.ast_nodes import Program, ScopeKind, SourceNode, scope_kind
from zikojsx.compiler.scopes import TagUsage, find_scope


class TestFindScope(unittest.TestCase):
    def setUp(self) -> None:
        self.program = Program(source=b"")

    def test_top_level_belongs_to_program(self) -> None:
        chain = [self.program, SourceNode(kind="expression_statement")]
        self.assertIs(find_scope(chain), self.program)

    def test_innermost_function_wins(self) -> None:
        outer = SourceNode(kind="function_declaration")
        inner = SourceNode(kind="arrow_function")
        chain = [
            self.program,
            outer,
            SourceNode(kind="statement_block"),
            SourceNode(kind="call_expression"),
            inner,
            SourceNode(kind="parenthesized_expression"),
        ]
        self.assertIs(find_scope(chain), inner)

    def test_method_is_a_scope(self) -> None:
        method = SourceNode(kind="method_definition")
        chain = [self.program, SourceNode(kind="class_declaration"), method]
        self.assertIs(find_scope(chain), method)

    def test_chain_without_program_is_an_error(self) -> None:
        with self.assertRaises(ValueError):
            find_scope([SourceNode(kind="expression_statement")])


@pytest.mark.parametrize(
    "kind, expected",
    [
        ("program", ScopeKind.PROGRAM),
        ("function_declaration", ScopeKind.FUNCTION_DECLARATION),
        ("generator_function_declaration", ScopeKind.FUNCTION_DECLARATION),
        ("function_expression", ScopeKind.FUNCTION_EXPRESSION),
        ("arrow_function", ScopeKind.ARROW_FUNCTION),
        ("statement_block", None),
        ("class_declaration", None),
    ],
)
def test_scope_kind(kind, expected) -> None:
    assert scope_kind(SourceNode(kind=kind)) is expected


def test_usage_is_deduplicated_in_first_seen_order() -> None:
    scope = SourceNode(kind="arrow_function")
    usage = TagUsage()
    for tag in ["div", "h1", "div", "p", "h1"]:
        usage.record(scope, tag)

    assert usage.tags_for(scope) == ["div", "h1", "p"]
    assert scope in usage
    assert len(usage) == 1


def test_usage_keeps_scopes_apart() -> None:
    first = SourceNode(kind="function_declaration")
    second = SourceNode(kind="function_declaration")
    usage = TagUsage()
    usage.record(first, "span")
    usage.record(second, "span")

    assert list(usage.items()) == [(first, ["span"]), (second, ["span"])]


def test_empty_usage_is_falsy() -> None:
    usage = TagUsage()
    assert not usage
    assert usage.tags_for(SourceNode(kind="program")) == []
    usage.record(SourceNode(kind="program"), "div")
    assert usage
