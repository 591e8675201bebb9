import json
import os
import tomllib
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from upath import UPath

from typesplit.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['typesplit.yaml', 'typesplit.yml']

DEFAULT_SOURCE = 'node_modules/@prisma/client-mysql/index.d.ts'

BUILTIN_TYPES = frozenset(
    {
        'String',
        'Number',
        'Boolean',
        'Array',
        'Promise',
        'Date',
        'string',
        'number',
        'boolean',
        'array',
        'promise',
        'date',
    }
)


class SharedAlias(BaseModel):
    """One ``import <name> = runtime.<target>`` line of the shared alias block."""

    name: str = Field(..., description='Alias visible inside every unit.')
    target: str = Field(
        ..., description='Member path of the runtime module the alias points at.'
    )
    comment: str | None = Field(None, description='Optional trailing comment.')


DEFAULT_ALIASES = [
    SharedAlias(name='$Types', target='Types', comment='general types'),
    SharedAlias(name='$Public', target='Types.Public'),
    SharedAlias(name='$Utils', target='Types.Utils'),
    SharedAlias(name='$Extensions', target='Types.Extensions'),
    SharedAlias(name='$Result', target='Types.Result'),
    SharedAlias(name='JsonObject', target='JsonObject'),
    SharedAlias(name='JsonArray', target='JsonArray'),
    SharedAlias(name='JsonValue', target='JsonValue'),
    SharedAlias(name='InputJsonObject', target='InputJsonObject'),
    SharedAlias(name='InputJsonArray', target='InputJsonArray'),
    SharedAlias(name='InputJsonValue', target='InputJsonValue'),
]


class RuntimeImports(BaseModel):
    """The fixed import block appended to every emitted unit."""

    module: str = Field(
        '../runtime/library.js',
        description='Module specifier of the shared runtime support library.',
    )

    binding: str = Field(
        'runtime', description='Local name the runtime module is imported as.'
    )

    aliases: list[SharedAlias] = Field(
        default_factory=lambda: [alias.model_copy() for alias in DEFAULT_ALIASES],
        description='Aliases the original declarations assume to be ambient.',
    )


class SplitConfig(BaseModel):
    """Represents a single declaration document to be split."""

    source: str = Field(
        DEFAULT_SOURCE, description='Path to the declaration document to split.'
    )

    output: str | None = Field(
        None,
        description='Output directory for the units. Defaults to a "types" directory next to the source.',
    )

    manifest_file: str = Field(
        'index.ts', description='File name of the manifest re-exporting every unit.'
    )

    unit_suffix: str = Field('.ts', description='File suffix of emitted units.')

    namespace: str = Field(
        'Prisma',
        description='Name of the namespace wrapping the declarations, stripped from qualified names.',
    )

    builtin_types: frozenset[str] = Field(
        BUILTIN_TYPES,
        description='Names never treated as local dependencies.',
    )

    runtime: RuntimeImports = Field(default_factory=RuntimeImports)

    strip_mode: Literal['syntax', 'text'] = Field(
        'syntax',
        description='Strip the namespace qualifier from qualified-name nodes only, or everywhere in the text.',
    )

    replace_source: bool = Field(
        True,
        description='Whether to overwrite the source with a stub re-exporting the manifest.',
    )

    @property
    def source_path(self) -> UPath:
        return UPath(self.source)

    @property
    def output_path(self) -> UPath:
        if self.output:
            return UPath(self.output)
        return self.source_path.parent / 'types'

    @property
    def manifest_path(self) -> UPath:
        return self.output_path / self.manifest_file


class TypeSplitConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='TYPESPLIT_')

    documents: list[SplitConfig] = Field(
        default_factory=lambda: [SplitConfig()],
        description='List of declaration documents to split.',
    )


def load_yaml(path: str | Path) -> dict:
    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def _load(path: str | Path) -> dict | None:
    loader = load_json if Path(path).suffix == '.json' else load_yaml
    try:
        return loader(path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f'Malformed configuration: {e}', str(path)) from e


def _validate(data: dict | None, path: str | Path) -> TypeSplitConfig:
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(
            'Malformed configuration: expected a mapping at the top level', str(path)
        )
    try:
        return TypeSplitConfig.model_validate(data or {})
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or None
        raise ConfigurationError(
            f'Invalid configuration: {error["msg"]}', str(path), field
        ) from e


def get_config(path: str | None = None) -> TypeSplitConfig:
    """Load configuration from a file, falling back to the default config."""
    if path:
        if not Path(path).exists():
            raise FileNotFoundError(f'config not found: {path}')
        return _validate(_load(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return _validate(_load(path), path)

    path = Path(cwd) / 'pyproject.toml'

    if path.exists():
        try:
            pyproject = tomllib.loads(path.read_text())
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f'Malformed configuration: {e}', str(path)
            ) from e
        tools = pyproject.get('tool', {})

        if 'typesplit' in tools:
            return _validate(tools['typesplit'], path)

    return TypeSplitConfig()
