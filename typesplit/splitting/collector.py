"""Raw dependency collection for declaration constructs.

This module walks the syntax tree of each construct and records every name
the construct textually references as a type. The result is the raw
dependency graph; it still contains type parameters, ambient names and
external symbols, which are filtered out by the resolver.

Each rule below handles one syntactic shape. Rules are independent: a node
may match one rule while its children match others, and the walk always
descends into every child, so compound shapes such as an array of a union
are covered by the combination of rules.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from tree_sitter import Node

from typesplit.config import BUILTIN_TYPES
from typesplit.splitting.parser import Construct

__all__ = (
    'DependencyGraph',
    'collect_dependencies',
    'construct_dependencies',
    'reference_name',
)

DependencyGraph = dict[str, set[str]]

# Parent types whose ``name`` field declares a type name instead of using one.
DECLARING_PARENTS = {
    'interface_declaration',
    'type_alias_declaration',
    'class_declaration',
    'abstract_class_declaration',
    'type_parameter',
    'mapped_type_clause',
}


def _text(node: Node) -> str:
    return node.text.decode('utf-8')


def reference_name(node: Node | None) -> str | None:
    """Return the referenced name if ``node`` is a direct type reference.

    Qualified names (``Prisma.User``) resolve to their rightmost segment and
    generic references (``Promise<User>``) to the generic's own name.
    """
    if node is None:
        return None
    if node.type == 'type_identifier':
        return _text(node)
    if node.type == 'nested_type_identifier':
        return reference_name(node.child_by_field_name('name'))
    if node.type == 'generic_type':
        return reference_name(node.child_by_field_name('name'))
    return None


def _is_declaring(node: Node) -> bool:
    parent = node.parent
    if parent is None:
        return False
    if parent.type == 'infer_type':
        return parent.named_children[0] == node
    if parent.type in DECLARING_PARENTS:
        return parent.child_by_field_name('name') == node
    return False


def _add(found: set[str], name: str | None) -> None:
    if name:
        found.add(name)


def _type_reference(node: Node, found: set[str]) -> None:
    if node.type == 'type_identifier' and _is_declaring(node):
        return
    _add(found, reference_name(node))


def _heritage_expression(node: Node, found: set[str]) -> None:
    if node.type == 'identifier':
        _add(found, _text(node))
    elif node.type == 'member_expression':
        member = node.child_by_field_name('property')
        if member is not None:
            _add(found, _text(member))
    else:
        _add(found, reference_name(node))


def _heritage(node: Node, found: set[str]) -> None:
    if node.type == 'extends_clause':
        for value in node.children_by_field_name('value'):
            _heritage_expression(value, found)
        return
    for base in node.named_children:
        _heritage_expression(base, found)


def _property(node: Node, found: set[str]) -> None:
    annotation = node.child_by_field_name('type')
    if annotation is None or not annotation.named_children:
        return
    _add(found, reference_name(annotation.named_children[0]))


def _members(node: Node, found: set[str]) -> None:
    for member in node.named_children:
        _add(found, reference_name(member))


def _array(node: Node, found: set[str]) -> None:
    if node.named_children:
        _add(found, reference_name(node.named_children[0]))


RULES: dict[str, Callable[[Node, set[str]], None]] = {
    'type_identifier': _type_reference,
    'nested_type_identifier': _type_reference,
    'generic_type': _type_reference,
    'extends_clause': _heritage,
    'extends_type_clause': _heritage,
    'implements_clause': _heritage,
    'property_signature': _property,
    'public_field_definition': _property,
    'union_type': _members,
    'intersection_type': _members,
    'array_type': _array,
}


def _walk(root: Node, found: set[str]) -> None:
    # Unions nest left-deep, so long ones are deeper than the recursion limit.
    stack = [root]
    while stack:
        node = stack.pop()
        rule = RULES.get(node.type)
        if rule is not None:
            rule(node, found)
        stack.extend(node.children)


def construct_dependencies(
    construct: Construct, builtin_types: Iterable[str] = BUILTIN_TYPES
) -> set[str]:
    """Collect the names referenced anywhere inside a construct.

    Args:
        construct: The construct to inspect.
        builtin_types: Names that are never dependencies.

    Returns:
        The referenced names, without the construct's own name and without
        any built-in name.
    """
    found: set[str] = set()
    for child in construct.declaration.children:
        _walk(child, found)

    found.discard(construct.name)
    found.difference_update(builtin_types)
    return found


def collect_dependencies(
    constructs: Iterable[Construct], builtin_types: Iterable[str] = BUILTIN_TYPES
) -> DependencyGraph:
    """Build the raw dependency graph, keyed in document order."""
    builtin_types = frozenset(builtin_types)
    return {
        construct.name: construct_dependencies(construct, builtin_types)
        for construct in constructs
    }
