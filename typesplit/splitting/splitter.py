"""The split pipeline.

This module provides the Splitter class that reads one declaration
document and drives it through parsing, dependency collection, filtering,
unit emission and manifest writing, in that order and exactly once.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from dataclasses import dataclass, field

from typesplit.config import SplitConfig
from typesplit.exceptions import DocumentReadError, SplitError
from typesplit.file_writer import TextFileWriter
from typesplit.splitting.collector import DependencyGraph
from typesplit.splitting.emitter import EmittedUnit, UnitEmitter
from typesplit.splitting.manifest import Manifest, ManifestWriter
from typesplit.splitting.parser import Document, load_document
from typesplit.splitting.resolver import DependencyResolver

logger = logging.getLogger(__name__)


class SplitStage(str, enum.Enum):
    IDLE = 'idle'
    PARSING = 'parsing'
    GRAPH_BUILDING = 'graph-building'
    FILTERING = 'filtering'
    EMITTING = 'emitting'
    MANIFEST_WRITING = 'manifest-writing'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class SplitResult:
    """Outcome of a split run.

    Attributes:
        graph: The filtered dependency graph.
        units: The emitted units, in document order. Empty for dry runs.
        manifest: The written manifest, or None for dry runs.
        elapsed: Wall-clock duration of the run in seconds.
    """

    graph: DependencyGraph
    units: list[EmittedUnit] = field(default_factory=list)
    manifest: Manifest | None = None
    elapsed: float = 0.0


class Splitter:
    """Splits a declaration document into one unit per construct.

    The run is linear: each stage runs once and the first failure moves the
    splitter to ``FAILED`` and raises a SplitError naming the stage. Nothing
    is rolled back; units written before a failure stay on disk without a
    manifest.

    Attributes:
        config: The document configuration.
        stage: The stage the splitter is in.
        document: The parsed document, once parsing succeeded.

    Example:
        >>> from typesplit.config import SplitConfig
        >>> splitter = Splitter(SplitConfig(source='client/index.d.ts'))
        >>> result = splitter.run()
        >>> len(result.units)
        42
    """

    def __init__(self, config: SplitConfig, writer: TextFileWriter | None = None):
        self.config = config
        self.writer = writer or TextFileWriter()
        self.stage = SplitStage.IDLE
        self.document: Document | None = None

    def _enter(self, stage: SplitStage) -> None:
        logger.debug('Entering stage %s', stage.value)
        self.stage = stage

    async def _read(self) -> str:
        path = self.config.source_path
        try:
            return await asyncio.to_thread(path.read_text, encoding='utf-8')
        except OSError as e:
            raise DocumentReadError(str(path), e) from e

    async def arun(self, dry_run: bool = False) -> SplitResult:
        """Run the whole pipeline.

        Args:
            dry_run: Stop after filtering and write nothing.

        Returns:
            The SplitResult of the run.

        Raises:
            SplitError: If any stage fails. ``cause`` holds the original
                error, e.g. a DocumentReadError, DocumentParseError or
                OutputError.
        """
        if self.stage is not SplitStage.IDLE:
            raise SplitError(self.stage.value, RuntimeError('splitter already ran'))

        started = time.perf_counter()
        try:
            self._enter(SplitStage.PARSING)
            text = await self._read()
            self.document = load_document(
                text, str(self.config.source_path), self.config.namespace
            )
            logger.info(
                'Parsed %d constructs from %s',
                len(self.document.constructs),
                self.config.source_path,
            )

            self._enter(SplitStage.GRAPH_BUILDING)
            resolver = DependencyResolver(self.document, self.config.builtin_types)
            raw = resolver.raw

            self._enter(SplitStage.FILTERING)
            graph = resolver.resolve()
            logger.debug(
                'Dropped %d external references',
                sum(len(deps) for deps in raw.values())
                - sum(len(deps) for deps in graph.values()),
            )

            if dry_run:
                self._enter(SplitStage.DONE)
                return SplitResult(graph=graph, elapsed=time.perf_counter() - started)

            self._enter(SplitStage.EMITTING)
            units = UnitEmitter(self.config, self.writer).emit(
                self.document.constructs, graph
            )

            self._enter(SplitStage.MANIFEST_WRITING)
            manifest = ManifestWriter(self.config, self.writer).write(graph.keys())

            self._enter(SplitStage.DONE)
        except Exception as e:
            failed = self.stage
            self.stage = SplitStage.FAILED
            raise SplitError(failed.value, e) from e

        elapsed = time.perf_counter() - started
        logger.info('Split %d units in %.2fs', len(units), elapsed)
        return SplitResult(graph=graph, units=units, manifest=manifest, elapsed=elapsed)

    def run(self, dry_run: bool = False) -> SplitResult:
        """Synchronous wrapper around arun()."""
        return asyncio.run(self.arun(dry_run=dry_run))
