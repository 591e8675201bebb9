"""File writing utilities for emitted declaration units.

This module provides the writer used for every unit, the manifest and the
stub that replaces the original document.
"""

from pathlib import Path

from upath import UPath

from typesplit.exceptions import OutputError


class TextFileWriter:
    """Writes generated TypeScript text to files.

    Example:
        >>> writer = TextFileWriter()
        >>> writer.write("export * from './User';\\n", Path('types/index.ts'))
    """

    def write(self, content: str, path: UPath | Path | str) -> UPath:
        """Write text to a file, creating its directory if needed.

        Args:
            content: The full file content.
            path: Path where the file should be written.

        Returns:
            The path that was written.

        Raises:
            OutputError: If the directory or the file cannot be written.
        """
        path = UPath(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise OutputError(str(path), e) from e

        return path

    def ensure_directory(self, directory: UPath | Path | str) -> UPath:
        """Create ``directory`` and its parents if they do not exist yet."""
        directory = UPath(directory)

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(directory), e) from e

        return directory
