"""Reduction of raw dependencies to locally declared constructs.

The collector records every referenced name, including type parameters,
ambient runtime aliases and symbols from other packages. Only references to
constructs declared in the same document become imports, so this module
intersects each raw dependency set with the names the document declares.
Names that do not resolve are external by definition and are dropped
without comment.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from typesplit.config import BUILTIN_TYPES
from typesplit.splitting.collector import DependencyGraph, collect_dependencies
from typesplit.splitting.parser import Document

logger = logging.getLogger(__name__)

__all__ = ('DependencyResolver', 'filter_to_known')


def filter_to_known(
    graph: DependencyGraph, known_names: Iterable[str] = ()
) -> DependencyGraph:
    """Keep only dependencies that name another known construct.

    A name is known if it is a key of ``graph`` or a member of
    ``known_names``. Self-references are dropped.

    Args:
        graph: The raw dependency graph.
        known_names: Names declared by the document.

    Returns:
        A new graph with the same keys, in the same order.
    """
    known = set(graph) | set(known_names)
    return {
        name: {dep for dep in dependencies if dep in known and dep != name}
        for name, dependencies in graph.items()
    }


class DependencyResolver:
    """Builds the filtered dependency graph for a document.

    Example:
        >>> resolver = DependencyResolver(document)
        >>> graph = resolver.resolve()
        >>> graph['User']
        {'Post', 'Profile'}
    """

    def __init__(
        self, document: Document, builtin_types: Iterable[str] = BUILTIN_TYPES
    ):
        self.document = document
        self.builtin_types = frozenset(builtin_types)
        self._raw: DependencyGraph | None = None
        self._resolved: DependencyGraph | None = None

    @property
    def raw(self) -> DependencyGraph:
        """The unfiltered graph, built on first access."""
        if self._raw is None:
            self._raw = collect_dependencies(
                self.document.constructs, self.builtin_types
            )
        return self._raw

    def resolve(self) -> DependencyGraph:
        if self._resolved is None:
            self._resolved = filter_to_known(self.raw, self.document.names)
            logger.debug(
                'Resolved %d local references across %d constructs',
                sum(len(deps) for deps in self._resolved.values()),
                len(self._resolved),
            )
        return self._resolved

    def unresolved(self, name: str) -> set[str]:
        """Names referenced by ``name`` that are not declared locally."""
        return self.raw.get(name, set()) - self.resolve().get(name, set())
