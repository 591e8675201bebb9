"""Parsing of TypeScript declaration documents.

This module turns declaration text into a tree-sitter syntax tree and
flattens the interface, type alias and class declarations it contains into
an ordered list of Constructs, looking inside the generator's export
namespace as well as at the top level.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import lru_cache

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_language

from typesplit.exceptions import DocumentParseError

logger = logging.getLogger(__name__)

__all__ = (
    'Construct',
    'ConstructKind',
    'Document',
    'load_document',
    'parse_document',
    'unwrap_constructs',
)

# Statements that only add modifiers (export, declare) around a declaration.
WRAPPER_TYPES = {'export_statement', 'ambient_declaration', 'expression_statement'}

NAMESPACE_TYPES = {'internal_module', 'module'}


class ConstructKind(str, enum.Enum):
    INTERFACE = 'interface'
    TYPE_ALIAS = 'type-alias'
    CLASS = 'class'


DECLARATION_KINDS = {
    'interface_declaration': ConstructKind.INTERFACE,
    'type_alias_declaration': ConstructKind.TYPE_ALIAS,
    'class_declaration': ConstructKind.CLASS,
    'abstract_class_declaration': ConstructKind.CLASS,
}


@dataclass
class Construct:
    """A named interface, type alias or class declared in the document.

    Attributes:
        name: The declared name, unique within the document.
        kind: Which kind of declaration this is.
        declaration: The declaration node itself, walked for dependencies.
        node: The full statement including export/declare modifiers,
            rendered when the construct is emitted.
        comments: Comment nodes directly above the statement, such as its
            JSDoc block, emitted along with it.
    """

    name: str
    kind: ConstructKind
    declaration: Node = field(repr=False)
    node: Node = field(repr=False)
    comments: list[Node] = field(default_factory=list, repr=False)


@dataclass
class Document:
    """The constructs of one declaration document, in source order."""

    source: str
    tree: Tree = field(repr=False)
    constructs: list[Construct] = field(default_factory=list)

    @property
    def names(self) -> set[str]:
        return {construct.name for construct in self.constructs}


@lru_cache(maxsize=1)
def _get_parser() -> Parser:
    return Parser(get_language('typescript'))


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'ERROR' or node.is_missing:
            return node
        stack.extend(
            child
            for child in reversed(node.children)
            if child.has_error or child.is_missing
        )
    return None


def parse_document(text: str, source: str = '<document>') -> Tree:
    """Parse declaration text into a syntax tree.

    Args:
        text: The full text of the declaration document.
        source: Name of the document, used in error messages.

    Returns:
        The tree-sitter Tree for the document.

    Raises:
        DocumentParseError: If the text contains a syntax error.
    """
    tree = _get_parser().parse(text.encode('utf-8'))

    if tree.root_node.has_error:
        error = _first_error(tree.root_node) or tree.root_node
        row, column = error.start_point
        raise DocumentParseError(source, line=row + 1, column=column + 1)

    return tree


def _unwrap(node: Node) -> Node | None:
    """Strip export/declare wrappers and return the inner declaration."""
    while node is not None and node.type in WRAPPER_TYPES:
        if node.type == 'export_statement':
            node = node.child_by_field_name('declaration')
        else:
            node = node.named_children[0] if node.named_children else None
    return node


def _namespace_body(node: Node, namespace: str) -> Node | None:
    if node.type not in NAMESPACE_TYPES:
        return None
    name = node.child_by_field_name('name')
    body = node.child_by_field_name('body')
    if name is None or body is None or body.type != 'statement_block':
        return None
    if name.text.decode('utf-8') != namespace:
        return None
    return body


def _leading_comments(statement: Node) -> list[Node]:
    """Return the comment block directly above ``statement``, top to bottom.

    A blank line ends the block, and a comment that trails code on the same
    line belongs to that code instead.
    """
    comments = []
    below = statement
    sibling = statement.prev_sibling
    while sibling is not None and sibling.type == 'comment':
        if below.start_point[0] - sibling.end_point[0] > 1:
            break
        above = sibling.prev_sibling
        if above is not None and above.end_point[0] == sibling.start_point[0]:
            break
        comments.append(sibling)
        below = sibling
        sibling = above
    comments.reverse()
    return comments


def _to_construct(statement: Node) -> Construct | None:
    declaration = _unwrap(statement)
    if declaration is None or declaration.type not in DECLARATION_KINDS:
        return None

    name = declaration.child_by_field_name('name')
    if name is None:
        logger.debug(
            'Skipping unnamed %s at line %d',
            declaration.type,
            declaration.start_point[0] + 1,
        )
        return None

    return Construct(
        name=name.text.decode('utf-8'),
        kind=DECLARATION_KINDS[declaration.type],
        declaration=declaration,
        node=statement,
        comments=_leading_comments(statement),
    )


def unwrap_constructs(tree: Tree, namespace: str = 'Prisma') -> list[Construct]:
    """Flatten the document's declarations into an ordered list of Constructs.

    Top-level statements are taken as they are, except for a namespace block
    named ``namespace`` whose body is a plain statement block: its statements
    are taken instead of the block itself. Anything that is not an interface,
    type alias or class declaration is ignored.

    Args:
        tree: The parsed document.
        namespace: Name of the generator's export namespace.

    Returns:
        Constructs in the order they appear in the document.
    """
    statements: list[Node] = []

    for node in tree.root_node.named_children:
        inner = _unwrap(node)
        body = _namespace_body(inner, namespace) if inner is not None else None
        if body is not None:
            statements.extend(body.named_children)
        else:
            statements.append(node)

    constructs = []
    seen: set[str] = set()
    for statement in statements:
        construct = _to_construct(statement)
        if construct is None:
            continue
        if construct.name in seen:
            logger.warning(
                "Duplicate declaration '%s'; the last one wins", construct.name
            )
        seen.add(construct.name)
        constructs.append(construct)

    return constructs


def load_document(
    text: str, source: str = '<document>', namespace: str = 'Prisma'
) -> Document:
    """Parse declaration text and collect its constructs."""
    tree = parse_document(text, source)
    return Document(
        source=source, tree=tree, constructs=unwrap_constructs(tree, namespace)
    )
