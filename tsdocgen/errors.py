"""Error taxonomy shared by every tsdocgen stage."""

from __future__ import annotations

from typing import Sequence


class DocgenError(RuntimeError):
    """Base class for failures that abort a documentation run."""


class ConfigError(DocgenError):
    """Raised when the configuration is missing or malformed."""


class ParseError(DocgenError):
    """Aggregated source parsing failures reported by the parser."""

    def __init__(self, errors: Sequence[Sequence[str]]) -> None:
        self.errors = [list(file_errors) for file_errors in errors]
        message = "\n".join("\n".join(file_errors) for file_errors in self.errors)
        super().__init__(message)


class ReadFileError(DocgenError):
    def __init__(self, path: str, error: BaseException | None = None) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to read file from: '{path}'")


class WriteFileError(DocgenError):
    def __init__(self, path: str, error: BaseException | None = None) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to write file to: '{path}'")


class RemoveFileError(DocgenError):
    def __init__(self, path: str, error: BaseException | None = None) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to remove file from: '{path}'")


class GlobError(DocgenError):
    def __init__(
        self,
        pattern: str,
        exclude: Sequence[str] = (),
        error: BaseException | None = None,
    ) -> None:
        self.pattern = pattern
        self.exclude = list(exclude)
        self.error = error
        super().__init__(
            f"Unable to execute glob pattern '{pattern}' "
            f"excluding files matching '{', '.join(self.exclude)}'"
        )


class SpawnError(DocgenError):
    """The child process could not be started at all."""

    def __init__(self, command: str, args: Sequence[str], error: BaseException) -> None:
        self.command = command
        self.args_list = list(args)
        self.error = error
        super().__init__(f"Unable to spawn child process for command: '{self.command_line}'")

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.args_list])


class ExecutionError(DocgenError):
    """The child process ran and exited with a non-zero status."""

    def __init__(self, command: str, stderr: str, returncode: int | None = None) -> None:
        self.command = command
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"During execution of '{command}', the following error occurred")


class RenderError(DocgenError):
    """Raised when a module cannot be rendered, e.g. namespaces nested too deep."""


class ExampleNameCollisionError(DocgenError):
    """Two extracted examples mapped to the same candidate file."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Duplicate example file name: '{path}'")


def format_error(exc: DocgenError) -> str:
    """Return the single fatal message shown to the user for *exc*."""
    if isinstance(exc, ParseError):
        return (
            "The following error(s) occurred while parsing the TypeScript source files:\n"
            f"{exc}"
        )
    if isinstance(exc, ExecutionError):
        return f"{exc}:\n{exc.stderr}"
    if isinstance(exc, SpawnError):
        return f"{exc}\n{exc.error}"
    if isinstance(exc, (ReadFileError, WriteFileError, RemoveFileError, GlobError)):
        if exc.error is not None:
            return f"{exc}\n{exc.error}"
        return str(exc)
    return str(exc)


__all__ = [
    "ConfigError",
    "DocgenError",
    "ExampleNameCollisionError",
    "ExecutionError",
    "GlobError",
    "ParseError",
    "ReadFileError",
    "RemoveFileError",
    "RenderError",
    "SpawnError",
    "WriteFileError",
    "format_error",
]
