"""Unit emitter for split declaration documents.

This module renders each construct back to TypeScript source, prefixes it
with the imports it needs and writes it as its own file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from upath import UPath

from typesplit.file_writer import TextFileWriter

if TYPE_CHECKING:
    from tree_sitter import Node

    from typesplit.config import RuntimeImports, SplitConfig
    from typesplit.splitting.collector import DependencyGraph
    from typesplit.splitting.parser import Construct

logger = logging.getLogger(__name__)

__all__ = (
    'EmittedUnit',
    'UnitEmitter',
    'build_preamble',
    'render_declaration',
    'strip_qualifier',
)

# Node types of the form ``<head>.<member>``.
QUALIFIED_TYPES = {'nested_type_identifier', 'nested_identifier', 'member_expression'}


@dataclass(frozen=True)
class EmittedUnit:
    """Information about an emitted unit.

    Attributes:
        name: The construct name, also the unit's module name.
        path: The file path where the unit was written.
        imports: Names of the local units this unit imports.
    """

    name: str
    path: UPath
    imports: tuple[str, ...] = field(default_factory=tuple)


def _qualifier_spans(root: Node, qualifier: bytes) -> dict[int, int]:
    spans: dict[int, int] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        stack.extend(node.children)
        if node.type not in QUALIFIED_TYPES or not node.named_children:
            continue
        head = node.named_children[0]
        dot = head.next_sibling
        if (
            head.type == 'identifier'
            and head.text == qualifier
            and dot is not None
            and dot.type == '.'
        ):
            spans[head.start_byte] = dot.end_byte
    return spans


def strip_qualifier(node: Node, qualifier: str) -> str:
    """Return the source of ``node`` with ``<qualifier>.`` removed from every
    qualified name it heads.

    Only syntax nodes are touched, so string literals and comments that
    happen to contain the qualifier are left alone.
    """
    spans = _qualifier_spans(node, qualifier.encode('utf-8'))

    source = node.text
    base = node.start_byte
    pieces = []
    position = 0
    for start, end in sorted(spans.items()):
        pieces.append(source[position : start - base])
        position = end - base
    pieces.append(source[position:])
    return b''.join(pieces).decode('utf-8')


def _dedent(text: str, column: int) -> str:
    lines = text.split('\n')
    dedented = [lines[0]]
    for line in lines[1:]:
        indent = len(line) - len(line.lstrip(' \t'))
        dedented.append(line[min(indent, column) :])
    return '\n'.join(dedented)


def render_declaration(
    construct: Construct,
    namespace: str,
    strip_mode: Literal['syntax', 'text'] = 'syntax',
) -> str:
    """Render a construct's full statement as standalone source text.

    Args:
        construct: The construct to render.
        namespace: Qualifier to remove now that the construct is top level.
        strip_mode: ``'syntax'`` removes the qualifier from qualified-name
            nodes only; ``'text'`` removes every ``<namespace>.`` token.

    Returns:
        The declaration text, preceded by its leading comments and dedented
        to column zero.
    """
    node = construct.node
    if strip_mode == 'syntax':
        body = strip_qualifier(node, namespace)
    else:
        body = node.text.decode('utf-8')
    blocks = [
        _dedent(comment.text.decode('utf-8'), comment.start_point[1])
        for comment in construct.comments
    ]
    blocks.append(_dedent(body, node.start_point[1]))
    text = '\n'.join(blocks)
    if strip_mode == 'text':
        text = re.sub(rf'\b{re.escape(namespace)}\.', '', text)
    return text


def build_preamble(
    name: str, dependencies: Iterable[str], runtime: RuntimeImports
) -> str:
    """Build the import block for one unit.

    Local imports come first, one per dependency other than the unit itself,
    sorted so repeated runs write identical files. The shared runtime alias
    block follows and is the same for every unit.
    """
    lines = [
        f"import {{ {dep} }} from './{dep}';"
        for dep in sorted(set(dependencies))
        if dep != name
    ]
    if lines:
        lines.append('')

    lines.append(f"import * as {runtime.binding} from '{runtime.module}'")
    lines.append('')
    for alias in runtime.aliases:
        line = f'import {alias.name} = {runtime.binding}.{alias.target}'
        if alias.comment:
            line += f' // {alias.comment}'
        lines.append(line)

    return '\n'.join(lines)


class UnitEmitter:
    """Emits one file per construct.

    Example:
        >>> emitter = UnitEmitter(SplitConfig(source='schema/index.d.ts'))
        >>> units = emitter.emit(document.constructs, graph)
    """

    def __init__(self, config: SplitConfig, writer: TextFileWriter | None = None):
        self.config = config
        self.output_dir = config.output_path
        self.writer = writer or TextFileWriter()

    def unit_path(self, name: str) -> UPath:
        return self.output_dir / f'{name}{self.config.unit_suffix}'

    def render(self, construct: Construct, graph: DependencyGraph) -> str:
        """Return the full file content for a construct."""
        preamble = build_preamble(
            construct.name, graph.get(construct.name, ()), self.config.runtime
        )
        declaration = render_declaration(
            construct, self.config.namespace, self.config.strip_mode
        )
        return f'{preamble}\n\n{declaration}\n'

    def emit_unit(self, construct: Construct, graph: DependencyGraph) -> EmittedUnit:
        path = self.writer.write(
            self.render(construct, graph), self.unit_path(construct.name)
        )
        imports = tuple(
            sorted(dep for dep in graph.get(construct.name, ()) if dep != construct.name)
        )
        logger.debug('Wrote %s with %d local imports', path, len(imports))
        return EmittedUnit(name=construct.name, path=path, imports=imports)

    def emit(
        self, constructs: Iterable[Construct], graph: DependencyGraph
    ) -> list[EmittedUnit]:
        """Emit every construct in order.

        The first write failure propagates and stops the batch; units written
        before it stay on disk.

        Args:
            constructs: Constructs in document order.
            graph: The filtered dependency graph.

        Returns:
            List of EmittedUnit objects describing what was written.
        """
        self.writer.ensure_directory(self.output_dir)
        return [self.emit_unit(construct, graph) for construct in constructs]
