"""Declaration splitting for typesplit.

This package splits one TypeScript declaration document into one unit per
named construct, with the imports each unit needs inferred from a
dependency graph of the constructs.

Classes:
    Construct: A named interface, type alias or class in the document.
    DependencyResolver: Builds the filtered dependency graph.
    UnitEmitter: Writes one unit per construct.
    ManifestWriter: Writes the manifest and the replacement stub.
    Splitter: Runs the whole pipeline.
"""

from typesplit.splitting.collector import (
    DependencyGraph,
    collect_dependencies,
    construct_dependencies,
)
from typesplit.splitting.emitter import EmittedUnit, UnitEmitter
from typesplit.splitting.manifest import Manifest, ManifestWriter
from typesplit.splitting.parser import (
    Construct,
    ConstructKind,
    Document,
    load_document,
    parse_document,
    unwrap_constructs,
)
from typesplit.splitting.resolver import DependencyResolver, filter_to_known
from typesplit.splitting.splitter import SplitResult, SplitStage, Splitter

__all__ = [
    'Construct',
    'ConstructKind',
    'DependencyGraph',
    'DependencyResolver',
    'Document',
    'EmittedUnit',
    'Manifest',
    'ManifestWriter',
    'SplitResult',
    'SplitStage',
    'Splitter',
    'UnitEmitter',
    'collect_dependencies',
    'construct_dependencies',
    'filter_to_known',
    'load_document',
    'parse_document',
    'unwrap_constructs',
]
