from pathlib import Path

import pytest

from ra_mcp.errors import (
    AnalyzerNotRunningError,
    CargoExecutionError,
    CargoMissingError,
    CargoValidationFailedError,
    FileMissingError,
    FramingError,
    InvalidFileUriError,
    LspError,
    NotAFileError,
    OutsideWorkspaceError,
    RaMcpError,
    RustAnalyzerMissingError,
    UrlConversionError,
    WorkspaceMissingError,
    WorkspaceNotDirectoryError,
    hint_for_error,
)

GENERIC_HINT = "Check the workspace path, rust-analyzer installation, and input parameters."


@pytest.mark.parametrize(
    "error, expected",
    [
        (OutsideWorkspaceError(), "file_path is outside workspace root"),
        (UrlConversionError(), "URL conversion failed"),
        (RustAnalyzerMissingError(), "rust-analyzer was not found on PATH"),
        (AnalyzerNotRunningError(), "rust-analyzer process is not running"),
        (CargoMissingError(), "cargo was not found on PATH"),
    ],
)
def test_fixed_messages(error, expected):
    assert str(error) == expected
    assert error.message == expected


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (WorkspaceMissingError, "workspace path does not exist: "),
        (WorkspaceNotDirectoryError, "workspace path is not a directory: "),
        (FileMissingError, "file_path does not exist: "),
        (NotAFileError, "file_path is not a file: "),
        (InvalidFileUriError, "invalid file URI: "),
        (FramingError, "LSP framing error: "),
        (CargoValidationFailedError, "cargo validation failed: "),
        (CargoExecutionError, "cargo execution failed: "),
        (LspError, "LSP request failed: "),
    ],
)
def test_detail_messages_embed_detail(cls, prefix):
    error = cls("detail-value")
    assert str(error) == prefix + "detail-value"
    assert error.detail == "detail-value"


def test_path_detail_is_rendered_as_path_text():
    path = Path("src") / "missing.rs"
    error = FileMissingError(path)
    assert str(error).endswith(str(path))
    assert error.detail == path


@pytest.mark.parametrize(
    "error, expected_text, expected_hint",
    [
        (LspError("boom"), "LSP request failed: boom", GENERIC_HINT),
        (FramingError("bad"), "LSP framing error: bad", GENERIC_HINT),
        (
            WorkspaceMissingError("ws"),
            "workspace path does not exist: ws",
            GENERIC_HINT,
        ),
        (
            CargoMissingError(),
            "cargo was not found on PATH",
            "Install cargo and make sure it is available on PATH.",
        ),
    ],
)
def test_all_errors_share_base_class(error, expected_text, expected_hint):
    with pytest.raises(RaMcpError) as excinfo:
        raise error
    caught = excinfo.value
    assert str(caught) == expected_text
    assert hint_for_error(caught) == expected_hint


@pytest.mark.parametrize(
    "error, hint",
    [
        (OutsideWorkspaceError(), "Pass a path relative to the configured Rust workspace."),
        (
            RustAnalyzerMissingError(),
            "Install rust-analyzer, for example: rustup component add rust-analyzer.",
        ),
        (
            FileMissingError("x"),
            "Pass an existing Rust source file inside the workspace root.",
        ),
        (
            NotAFileError("x"),
            "Pass an existing Rust source file inside the workspace root.",
        ),
        (CargoMissingError(), "Install cargo and make sure it is available on PATH."),
        (
            CargoValidationFailedError("x"),
            "Check the cargo tool parameters; only fixed supported cargo flags are accepted.",
        ),
        (
            CargoExecutionError("x"),
            "Check cargo output, workspace configuration, and whether another process "
            "is locking build artifacts.",
        ),
    ],
)
def test_hint_for_specific_errors(error, hint):
    assert hint_for_error(error) == hint


@pytest.mark.parametrize(
    "error",
    [LspError("x"), FramingError("x"), AnalyzerNotRunningError(), ValueError("x")],
)
def test_hint_falls_back_to_generic_text(error):
    assert hint_for_error(error) == GENERIC_HINT