"""typesplit - Split generated TypeScript declaration files per type.

typesplit reads one large generated declaration document, such as the
``index.d.ts`` of a Prisma client, and writes one file per interface, type
alias and class with the imports each file needs, plus an ``index.ts`` that
re-exports all of them. The original document is replaced with a stub that
re-exports the index, so existing imports keep working.

Quick Start:
    >>> from typesplit import Splitter, SplitConfig
    >>>
    >>> config = SplitConfig(source='node_modules/@prisma/client-mysql/index.d.ts')
    >>> result = Splitter(config).run()
    >>> len(result.units)

CLI Usage:
    $ typesplit split
    $ typesplit split --config typesplit.yaml
    $ typesplit split --dry-run
"""

from typesplit.config import SplitConfig, TypeSplitConfig, get_config
from typesplit.exceptions import (
    ConfigurationError,
    DocumentError,
    DocumentParseError,
    DocumentReadError,
    OutputError,
    SplitError,
    TypeSplitError,
)
from typesplit.splitting import DependencyResolver, Splitter, UnitEmitter

__all__ = [
    # Main classes
    'Splitter',
    'DependencyResolver',
    'UnitEmitter',
    # Configuration
    'SplitConfig',
    'TypeSplitConfig',
    'get_config',
    # Exceptions
    'TypeSplitError',
    'DocumentError',
    'DocumentReadError',
    'DocumentParseError',
    'ConfigurationError',
    'OutputError',
    'SplitError',
]

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version('typesplit')
except PackageNotFoundError:
    __version__ = 'unknown'
