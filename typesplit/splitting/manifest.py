"""Manifest generation for split declaration documents.

Once every unit is written, the manifest re-exports all of them and the
original document is overwritten with a stub re-exporting the manifest, so
code that imported the monolithic document keeps working unchanged.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from upath import UPath

from typesplit.file_writer import TextFileWriter

if TYPE_CHECKING:
    from typesplit.config import SplitConfig

logger = logging.getLogger(__name__)

__all__ = ('Manifest', 'ManifestWriter', 'relative_specifier')


@dataclass
class Manifest:
    """Information about the written manifest.

    Attributes:
        path: Where the manifest was written.
        names: The re-exported unit names, in manifest order.
        stub_path: The replaced source document, if it was replaced.
    """

    path: UPath
    names: list[str] = field(default_factory=list)
    stub_path: UPath | None = None


def relative_specifier(target: UPath, start: UPath) -> str:
    """Return a ``./``-style module specifier for ``target`` seen from ``start``."""
    relative = os.path.relpath(str(target.with_suffix('')), str(start))
    relative = relative.replace(os.sep, '/')
    if not relative.startswith('.'):
        relative = f'./{relative}'
    return relative


class ManifestWriter:
    def __init__(self, config: SplitConfig, writer: TextFileWriter | None = None):
        self.config = config
        self.writer = writer or TextFileWriter()

    def render(self, names: Iterable[str]) -> str:
        return ''.join(f"export * from './{name}';\n" for name in names)

    def render_stub(self) -> str:
        specifier = relative_specifier(
            self.config.manifest_path, self.config.source_path.parent
        )
        return f"export * from '{specifier}';\n"

    def write(self, names: Iterable[str]) -> Manifest:
        """Write the manifest, then replace the source document with a stub.

        Args:
            names: Construct names in dependency graph order.

        Returns:
            The written Manifest.
        """
        names = list(names)
        path = self.writer.write(self.render(names), self.config.manifest_path)
        logger.info('Wrote manifest %s re-exporting %d units', path, len(names))

        stub_path = None
        if self.config.replace_source:
            stub_path = self.writer.write(self.render_stub(), self.config.source_path)
            logger.info('Replaced %s with a re-export of the manifest', stub_path)

        return Manifest(path=path, names=names, stub_path=stub_path)
