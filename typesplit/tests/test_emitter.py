"""Tests for unit rendering and emission."""

import pytest

from typesplit.config import RuntimeImports, SharedAlias, SplitConfig
from typesplit.exceptions import OutputError
from typesplit.file_writer import TextFileWriter
from typesplit.splitting.emitter import (
    UnitEmitter,
    build_preamble,
    render_declaration,
)
from typesplit.splitting.parser import load_document
from typesplit.splitting.resolver import DependencyResolver
from typesplit.tests.fixtures import (
    EXTERNAL_BASE_DOCUMENT,
    PRISMA_DOCUMENT,
    SIMPLE_DOCUMENT,
)

RUNTIME_BLOCK = """\
import * as runtime from '../runtime/library.js'

import $Types = runtime.Types // general types
import $Public = runtime.Types.Public
import $Utils = runtime.Types.Utils
import $Extensions = runtime.Types.Extensions
import $Result = runtime.Types.Result
import JsonObject = runtime.JsonObject
import JsonArray = runtime.JsonArray
import JsonValue = runtime.JsonValue
import InputJsonObject = runtime.InputJsonObject
import InputJsonArray = runtime.InputJsonArray
import InputJsonValue = runtime.InputJsonValue"""


def construct(text: str, name: str):
    document = load_document(text)
    return next(c for c in document.constructs if c.name == name)


@pytest.fixture
def config(tmp_path):
    """Fixture providing a config writing into a temporary directory."""
    return SplitConfig(source=str(tmp_path / 'index.d.ts'))


class TestBuildPreamble:
    """Tests for build_preamble."""

    def test_runtime_block_only(self):
        """Test a unit without local dependencies."""
        assert build_preamble('B', set(), RuntimeImports()) == RUNTIME_BLOCK

    def test_local_imports_sorted_before_runtime_block(self):
        """Test that local imports are sorted and separated by a blank line."""
        preamble = build_preamble('C', {'E', 'D'}, RuntimeImports())

        assert preamble == (
            "import { D } from './D';\n"
            "import { E } from './E';\n"
            '\n' + RUNTIME_BLOCK
        )

    def test_self_import_skipped(self):
        """Test that a unit never imports itself."""
        preamble = build_preamble('A', {'A'}, RuntimeImports())
        assert "from './A'" not in preamble

    def test_custom_runtime(self):
        """Test a configured runtime module and alias table."""
        runtime = RuntimeImports(
            module='@prisma/client/runtime',
            binding='rt',
            aliases=[SharedAlias(name='Decimal', target='Decimal')],
        )
        assert build_preamble('A', set(), runtime) == (
            "import * as rt from '@prisma/client/runtime'\n"
            '\n'
            'import Decimal = rt.Decimal'
        )


class TestRenderDeclaration:
    """Tests for render_declaration."""

    def test_top_level_declaration(self):
        """Test that a top-level declaration renders verbatim."""
        text = render_declaration(construct(SIMPLE_DOCUMENT, 'A'), 'Prisma')
        assert text == 'export interface A {\n  b: B\n}'

    def test_external_reference_kept_in_text(self):
        """Test that filtering imports does not touch the declaration."""
        text = render_declaration(construct(EXTERNAL_BASE_DOCUMENT, 'G'), 'Prisma')
        assert 'extends H' in text

    def test_namespace_member_is_dedented_and_stripped(self):
        """Test a declaration taken out of the namespace block."""
        text = render_declaration(
            construct(PRISMA_DOCUMENT, 'PostListRelationFilter'), 'Prisma'
        )
        assert text == (
            'export interface PostListRelationFilter {\n'
            '  every?: PostWhereInput\n'
            '  none?: PostWhereInput\n'
            '}'
        )

    def test_top_level_qualifier_stripped(self):
        """Test that qualified names outside the namespace are stripped too."""
        text = render_declaration(construct(PRISMA_DOCUMENT, 'User'), 'Prisma')
        assert text == 'export type User = $Result.DefaultSelection<$UserPayload>'

    def test_syntax_mode_keeps_string_literals(self):
        """Test that only qualified-name nodes are stripped by default."""
        document = "export type Tag = 'Prisma.Tag' | Prisma.Other;\n"
        text = render_declaration(construct(document, 'Tag'), 'Prisma')
        assert text == "export type Tag = 'Prisma.Tag' | Other;"

    def test_text_mode_strips_everywhere(self):
        """Test the whole-text substitution mode."""
        document = "export type Tag = 'Prisma.Tag' | Prisma.Other;\n"
        text = render_declaration(construct(document, 'Tag'), 'Prisma', 'text')
        assert text == "export type Tag = 'Tag' | Other;"

    def test_similar_prefix_not_stripped(self):
        """Test that a longer identifier sharing the prefix is left alone."""
        document = 'export type Client = PrismaClient.Options;\n'
        for mode in ('syntax', 'text'):
            text = render_declaration(construct(document, 'Client'), 'Prisma', mode)
            assert text == 'export type Client = PrismaClient.Options;'

    def test_class_heritage_qualifier_stripped(self):
        """Test that member expressions in heritage clauses are stripped."""
        document = 'export class E extends Prisma.Base {\n  code: string\n}\n'
        text = render_declaration(construct(document, 'E'), 'Prisma')
        assert text.startswith('export class E extends Base {')

    def test_leading_jsdoc_kept(self):
        """Test that a doc comment above a namespace member is emitted with it."""
        document = (
            'export namespace Prisma {\n'
            '  /**\n'
            '   * Model User\n'
            '   */\n'
            '  export interface UserDelegate {\n'
            '    findMany(): Prisma.User[]\n'
            '  }\n'
            '}\n'
        )
        text = render_declaration(construct(document, 'UserDelegate'), 'Prisma')
        assert text == (
            '/**\n'
            ' * Model User\n'
            ' */\n'
            'export interface UserDelegate {\n'
            '  findMany(): User[]\n'
            '}'
        )

    def test_line_comments_kept_in_order(self):
        """Test a block of line comments directly above a declaration."""
        document = '// first\n// second\nexport type Id = string\n'
        text = render_declaration(construct(document, 'Id'), 'Prisma')
        assert text == '// first\n// second\nexport type Id = string'

    def test_detached_comment_dropped(self):
        """Test that a comment separated by a blank line is not emitted."""
        document = '// header\n\nexport interface A {}\n'
        text = render_declaration(construct(document, 'A'), 'Prisma')
        assert text == 'export interface A {}'

    def test_text_mode_strips_comments(self):
        """Test that the whole-text mode also applies to leading comments."""
        document = '/** See Prisma.User */\nexport type Id = Prisma.UserId\n'
        syntax = render_declaration(construct(document, 'Id'), 'Prisma')
        text = render_declaration(construct(document, 'Id'), 'Prisma', 'text')
        assert syntax == '/** See Prisma.User */\nexport type Id = UserId'
        assert text == '/** See User */\nexport type Id = UserId'


class TestUnitEmitter:
    """Tests for UnitEmitter."""

    def test_emit_simple_scenario(self, config):
        """Test the two-interface scenario end to end."""
        document = load_document(SIMPLE_DOCUMENT)
        graph = DependencyResolver(document).resolve()

        units = UnitEmitter(config).emit(document.constructs, graph)

        assert [unit.name for unit in units] == ['A', 'B']
        assert units[0].imports == ('B',)
        assert units[1].imports == ()

        a = (config.output_path / 'A.ts').read_text()
        b = (config.output_path / 'B.ts').read_text()
        assert a == (
            "import { B } from './B';\n\n"
            + RUNTIME_BLOCK
            + '\n\nexport interface A {\n  b: B\n}\n'
        )
        assert b == RUNTIME_BLOCK + '\n\nexport interface B {\n  value: string\n}\n'

    def test_creates_output_directory(self, config):
        """Test that the output directory is created on demand."""
        document = load_document(SIMPLE_DOCUMENT)
        graph = DependencyResolver(document).resolve()

        assert not config.output_path.exists()
        UnitEmitter(config).emit(document.constructs, graph)
        assert config.output_path.is_dir()

    def test_no_qualifier_in_emitted_units(self, config):
        """Test that no unit mentions the namespace qualifier."""
        document = load_document(PRISMA_DOCUMENT)
        graph = DependencyResolver(document).resolve()

        for unit in UnitEmitter(config).emit(document.constructs, graph):
            assert 'Prisma.' not in unit.path.read_text()

    def test_custom_suffix(self, tmp_path):
        """Test the configured unit file suffix."""
        config = SplitConfig(
            source=str(tmp_path / 'index.d.ts'),
            output=str(tmp_path / 'out'),
            unit_suffix='.d.ts',
        )
        document = load_document(SIMPLE_DOCUMENT)
        graph = DependencyResolver(document).resolve()

        units = UnitEmitter(config).emit(document.constructs, graph)

        assert units[0].path.name == 'A.d.ts'
        assert (tmp_path / 'out' / 'B.d.ts').exists()

    def test_write_failure_aborts_batch(self, config):
        """Test that a failed write stops emission and keeps earlier units."""

        class FailingWriter(TextFileWriter):
            def write(self, content, path):
                if str(path).endswith('B.ts'):
                    raise OutputError(str(path), OSError('disk full'))
                return super().write(content, path)

        document = load_document(SIMPLE_DOCUMENT + 'export interface Z {}\n')
        graph = DependencyResolver(document).resolve()

        with pytest.raises(OutputError, match='disk full'):
            UnitEmitter(config, FailingWriter()).emit(document.constructs, graph)

        assert (config.output_path / 'A.ts').exists()
        assert not (config.output_path / 'Z.ts').exists()
