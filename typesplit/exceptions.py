"""Custom exceptions for typesplit.

This module defines a hierarchy of exceptions used throughout the typesplit
library to report which part of a split run failed and why.
"""


class TypeSplitError(Exception):
    """Base exception for all typesplit errors.

    All exceptions raised by typesplit inherit from this class, making it easy
    to catch all typesplit-related errors with a single except clause.

    Example:
        try:
            Splitter(config).run()
        except TypeSplitError as e:
            print(f"typesplit error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DocumentError(TypeSplitError):
    """Base exception for errors concerning the input declaration document."""

    pass


class DocumentReadError(DocumentError):
    """Failed to read the declaration document.

    Attributes:
        source: The path of the document that could not be read.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to read document '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class DocumentParseError(DocumentError):
    """The declaration document is not valid TypeScript.

    tree-sitter recovers from syntax errors instead of raising, so this is
    raised for the first ``ERROR`` or ``MISSING`` node found in the tree.

    Attributes:
        source: The name of the document being parsed.
        line: 1-based line of the first syntax error.
        column: 1-based column of the first syntax error.
    """

    def __init__(
        self, source: str, line: int | None = None, column: int | None = None
    ):
        self.source = source
        self.line = line
        self.column = column
        message = f"Failed to parse document '{source}'"
        if line is not None:
            message += f' at line {line}'
            if column is not None:
                message += f', column {column}'
        super().__init__(message)


class ConfigurationError(TypeSplitError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(TypeSplitError):
    """Error writing a unit, the manifest or the replacement stub.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SplitError(TypeSplitError):
    """A split run aborted.

    Raised by the pipeline for any failure that is not already a
    TypeSplitError, so callers always learn which stage failed.

    Attributes:
        stage: Name of the stage that was running.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, stage: str, cause: Exception | None = None):
        self.stage = stage
        self.cause = cause
        message = f"Split failed during '{stage}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
