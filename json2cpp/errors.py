"""Exceptions raised by the json2cpp pipeline."""

from typing import Optional


class Json2CppError(Exception):
    """
    Base exception for all json2cpp failures.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred (file path, operation)
        cause: Optional underlying exception that caused this error
    """

    def __init__(self, message: str, context: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class InputNotFoundError(Json2CppError):
    """The input path does not exist or cannot be read."""


class GlobError(Json2CppError):
    """The input glob pattern is malformed."""


class NoFilesMatchedError(Json2CppError):
    """Merge mode found no files matching the input pattern."""


class MalformedJsonError(Json2CppError):
    """A document failed to parse as JSON."""


class EmptySchemaError(Json2CppError):
    """Inference or merge produced no structs."""


class DirectoryCreateError(Json2CppError):
    """The output directory could not be created."""


class FileWriteError(Json2CppError):
    """A generated file could not be written."""


class GenerationError(Json2CppError):
    """A code generator rejected its input or configuration."""
