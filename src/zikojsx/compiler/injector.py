"""Hoisting declarations and the program-level import of the tag binding."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from zikojsx.compiler.ast_nodes import (
    HoistingDeclaration,
    ImportBinding,
    Node,
    Program,
    ReturnStatement,
    ScopeKind,
    SourceNode,
    StatementBlock,
    first_statement_index,
    scope_kind,
    statements_of,
)
from zikojsx.compiler.scopes import TagUsage
from zikojsx.config import CompilerOptions

log = logging.getLogger(__name__)

_DECLARATION_KINDS = ("lexical_declaration", "variable_declaration")
_FUNCTION_DECLARATION_KINDS = ("function_declaration", "generator_function_declaration")


def inject_declarations(
    program: Program, usage: TagUsage, options: CompilerOptions
) -> None:
    """Insert one hoisting declaration per used scope, then the import."""
    for scope, tags in usage.items():
        if not tags:
            continue

        block = scope_body(scope)
        statements = statements_of(block)
        index = first_statement_index(statements)
        if index < len(statements) and is_hoisting_declaration(
            statements[index], options.binding
        ):
            log.debug("Scope at line %d already hoists from '%s'", scope.line, options.binding)
            continue

        statements.insert(
            index,
            HoistingDeclaration(
                names=tags, binding=options.binding, kind=options.declaration_kind
            ),
        )
        log.debug("Hoisted %s into scope at line %d", ", ".join(tags), scope.line)

    if usage:
        ensure_import(program, options)


def scope_body(scope: Node) -> Node:
    """
    Return the node holding the statements of ``scope``.

    An arrow function with an expression body gets a block body returning
    that expression first.
    """
    if scope_kind(scope) is ScopeKind.PROGRAM:
        return scope

    assert isinstance(scope, SourceNode)
    body = scope.get_field("body")
    if body is None:
        raise ValueError(f"Scope '{scope.kind}' has no body")
    if isinstance(body, StatementBlock):
        return body
    if isinstance(body, SourceNode) and body.kind == "statement_block":
        return body

    block = StatementBlock(body=[ReturnStatement(argument=body)], span=body.span)
    scope.set_field("body", block)
    return block


def is_hoisting_declaration(node: Node, binding: str) -> bool:
    """True for a declaration that destructures from the identifier ``binding``."""
    if isinstance(node, HoistingDeclaration):
        return node.binding == binding
    if not isinstance(node, SourceNode) or node.kind not in _DECLARATION_KINDS:
        return False

    for declarator in _declarators(node):
        pattern = declarator.get_field("name")
        init = declarator.get_field("value")
        if (
            isinstance(pattern, SourceNode)
            and pattern.kind == "object_pattern"
            and _is_identifier(init, binding)
        ):
            return True
    return False


def ensure_import(program: Program, options: CompilerOptions) -> None:
    """Prepend ``import { binding } from module`` unless the name is bound."""
    statements = statements_of(program)
    if _binds_name(statements, options.binding):
        log.debug("'%s' is already bound at the top level", options.binding)
        return

    statements.insert(
        first_statement_index(statements),
        ImportBinding(name=options.binding, module=options.module),
    )
    log.debug("Imported '%s' from '%s'", options.binding, options.module)


def _binds_name(statements: Iterable[Node], name: str) -> bool:
    for statement in statements:
        if isinstance(statement, ImportBinding) and statement.name == name:
            return True
        if isinstance(statement, HoistingDeclaration) and name in statement.names:
            return True
        if not isinstance(statement, SourceNode):
            continue

        if statement.kind == "import_statement":
            if name in _imported_locals(statement):
                return True
            continue

        declaration = _unwrap_export(statement)
        if declaration is None:
            continue
        if declaration.kind in _DECLARATION_KINDS:
            for declarator in _declarators(declaration):
                if _declares(declarator.get_field("name"), name):
                    return True
        elif declaration.kind in _FUNCTION_DECLARATION_KINDS:
            if _is_identifier(declaration.get_field("name"), name):
                return True
    return False


def _unwrap_export(statement: SourceNode) -> Optional[SourceNode]:
    if statement.kind != "export_statement":
        return statement
    declaration = statement.get_field("declaration")
    if isinstance(declaration, SourceNode):
        return declaration
    return None


def _imported_locals(statement: SourceNode) -> List[str]:
    """Local names bound by an import statement (default, named, namespace)."""
    names: List[str] = []
    for clause in _children_of_kind(statement, "import_clause"):
        for child in clause.children:
            if not isinstance(child, SourceNode):
                continue
            if child.kind == "identifier":
                names.append(child.text or "")
            elif child.kind == "namespace_import":
                names.extend(
                    c.text or "" for c in _children_of_kind(child, "identifier")
                )
            elif child.kind == "named_imports":
                for specifier in _children_of_kind(child, "import_specifier"):
                    local = specifier.get_field("alias") or specifier.get_field("name")
                    if isinstance(local, SourceNode):
                        names.append(_name_text(local))
    return names


def _declares(pattern: Optional[Node], name: str) -> bool:
    """A declarator binds ``name`` directly or destructures a ``name`` key."""
    if _is_identifier(pattern, name):
        return True
    if not isinstance(pattern, SourceNode) or pattern.kind != "object_pattern":
        return False

    for prop in pattern.children:
        if not isinstance(prop, SourceNode):
            continue
        if prop.kind == "shorthand_property_identifier_pattern":
            key: Optional[Node] = prop
        elif prop.kind == "pair_pattern":
            key = prop.get_field("key")
        elif prop.kind == "object_assignment_pattern":
            key = prop.get_field("left")
        else:
            continue
        if isinstance(key, SourceNode) and _name_text(key) == name:
            return True
    return False


def _declarators(declaration: SourceNode) -> List[SourceNode]:
    return _children_of_kind(declaration, "variable_declarator")


def _children_of_kind(node: SourceNode, kind: str) -> List[SourceNode]:
    return [c for c in node.children if isinstance(c, SourceNode) and c.kind == kind]


def _is_identifier(node: Optional[Node], name: str) -> bool:
    return (
        isinstance(node, SourceNode)
        and node.kind == "identifier"
        and node.text == name
    )


def _name_text(node: SourceNode) -> str:
    text = node.text or ""
    # String module export names: import { "tags" as t } ...
    return text.strip("'\"")
