import logging
import time
import traceback
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from typesplit.config import get_config
from typesplit.exceptions import SplitError, TypeSplitError
from typesplit.splitting import Splitter

console = Console()
app = typer.Typer(
    name='typesplit',
    help='Split a generated TypeScript declaration file into one file per type',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def split(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option('--dry-run', help='Print the dependency graph without writing'),
    ] = False,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Enable debug logging')
    ] = False,
) -> None:
    """Split every configured declaration document.

    If no config file is specified, will look for default config files
    in the current directory or fall back to the Prisma client layout
    under ./node_modules.

    Examples:
        typesplit split
        typesplit split --config typesplit.yaml
        typesplit split --dry-run
    """
    _configure_logging(verbose)

    try:
        settings = get_config(config)
    except (FileNotFoundError, TypeSplitError) as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    started = time.perf_counter()
    console.print('[dim]Splitting...[/dim]')

    try:
        for document_config in settings.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Splitting {document_config.source} into {document_config.output_path}...',
                    total=None,
                )

                result = Splitter(document_config).run(dry_run=dry_run)

                progress.update(
                    task, description=f'Split completed for {document_config.source}!'
                )

            if dry_run:
                for name, dependencies in result.graph.items():
                    deps = ', '.join(sorted(dependencies)) or '-'
                    console.print(f'  {name}: {deps}')
                continue

            console.print(
                f'[green]Successfully split[/green] {len(result.units)} types '
                f'into {document_config.output_path}'
            )
            console.print(f'  - manifest: {result.manifest.path}')
            if result.manifest.stub_path is not None:
                console.print(f'  - replaced: {result.manifest.stub_path}')

    except SplitError as e:
        console.print(f'[red]Error:[/red] {escape(e.message)}')
        console.print(f'[dim]Failed stage: {e.stage}[/dim]')
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)
    finally:
        console.print(f'[dim]Splitting took {time.perf_counter() - started:.2f}s[/dim]')


@app.command()
def version() -> None:
    """Show the version of typesplit."""
    from typesplit import __version__

    console.print(f'typesplit version: {__version__}')


if __name__ == '__main__':
    app()
