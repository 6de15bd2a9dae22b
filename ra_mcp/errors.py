"""Error types raised across the package, with hints for callers."""

from __future__ import annotations

from typing import Any


class RaMcpError(Exception):
    """Base class for every error the server reports."""

    default_message = "rust-analyzer MCP error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class _DetailError(RaMcpError):
    """An error whose message embeds one detail value."""

    template = "{}"

    def __init__(self, detail: Any) -> None:
        self.detail = detail
        super().__init__(self.template.format(detail))


class WorkspaceMissingError(_DetailError):
    template = "workspace path does not exist: {}"


class WorkspaceNotDirectoryError(_DetailError):
    template = "workspace path is not a directory: {}"


class OutsideWorkspaceError(RaMcpError):
    default_message = "file_path is outside workspace root"


class FileMissingError(_DetailError):
    template = "file_path does not exist: {}"


class NotAFileError(_DetailError):
    template = "file_path is not a file: {}"


class InvalidFileUriError(_DetailError):
    template = "invalid file URI: {}"


class UrlConversionError(RaMcpError):
    default_message = "URL conversion failed"


class FramingError(_DetailError):
    template = "LSP framing error: {}"


class RustAnalyzerMissingError(RaMcpError):
    default_message = "rust-analyzer was not found on PATH"


class AnalyzerNotRunningError(RaMcpError):
    default_message = "rust-analyzer process is not running"


class CargoMissingError(RaMcpError):
    default_message = "cargo was not found on PATH"


class CargoValidationFailedError(_DetailError):
    template = "cargo validation failed: {}"


class CargoExecutionError(_DetailError):
    template = "cargo execution failed: {}"


class LspError(_DetailError):
    template = "LSP request failed: {}"


_DEFAULT_HINT = "Check the workspace path, rust-analyzer installation, and input parameters."

_HINTS: tuple[tuple[type[RaMcpError] | tuple[type[RaMcpError], ...], str], ...] = (
    (OutsideWorkspaceError, "Pass a path relative to the configured Rust workspace."),
    (
        RustAnalyzerMissingError,
        "Install rust-analyzer, for example: rustup component add rust-analyzer.",
    ),
    (
        (FileMissingError, NotAFileError),
        "Pass an existing Rust source file inside the workspace root.",
    ),
    (CargoMissingError, "Install cargo and make sure it is available on PATH."),
    (
        CargoValidationFailedError,
        "Check the cargo tool parameters; only fixed supported cargo flags are accepted.",
    ),
    (
        CargoExecutionError,
        "Check cargo output, workspace configuration, and whether another process "
        "is locking build artifacts.",
    ),
)


def hint_for_error(error: BaseException) -> str:
    """Return a short suggestion for resolving ``error``."""
    for kinds, hint in _HINTS:
        if isinstance(error, kinds):
            return hint
    return _DEFAULT_HINT