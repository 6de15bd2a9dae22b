"""Validation and argument construction for fixed cargo commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from ra_mcp.cargo_params import (
    DEFAULT_CARGO_METADATA_STDOUT_BYTES,
    DEFAULT_CARGO_STDERR_BYTES,
    DEFAULT_CARGO_STDOUT_BYTES,
    DEFAULT_CARGO_TIMEOUT_MS,
    MAX_CARGO_OUTPUT_BYTES,
    MAX_CARGO_TIMEOUT_MS,
    CargoBuildParams,
    CargoFmtCheckParams,
    CargoMetadataParams,
    CargoTestParams,
)

CargoParams = Union[CargoBuildParams, CargoTestParams, CargoFmtCheckParams, CargoMetadataParams]


class CargoCommandKind(Enum):
    BUILD = "Build"
    CHECK = "Check"
    CLIPPY = "Clippy"
    TEST = "Test"
    FMT_CHECK = "FmtCheck"
    METADATA = "Metadata"


class CargoValidationError(ValueError):
    """Raised when cargo tool parameters are inconsistent or unsafe."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


_BUILD_COMMANDS = {
    CargoCommandKind.BUILD: "build",
    CargoCommandKind.CHECK: "check",
    CargoCommandKind.CLIPPY: "clippy",
}


@dataclass
class CargoInvocation:
    """A fully validated cargo command line with its run limits."""

    command: str
    args: list[str]
    timeout_ms: int
    max_stdout_bytes: int
    max_stderr_bytes: int
    parse_metadata_json: bool = False

    @classmethod
    def from_params(cls, kind: CargoCommandKind, params: CargoParams) -> "CargoInvocation":
        """Validate ``params`` for ``kind`` and build the invocation."""
        args = build_args(kind, params)
        default_stdout = (
            DEFAULT_CARGO_METADATA_STDOUT_BYTES
            if isinstance(params, CargoMetadataParams)
            else DEFAULT_CARGO_STDOUT_BYTES
        )
        return cls(
            command="cargo",
            args=args,
            timeout_ms=_clamp(params.timeout_ms, DEFAULT_CARGO_TIMEOUT_MS, MAX_CARGO_TIMEOUT_MS),
            max_stdout_bytes=_clamp(params.max_stdout_bytes, default_stdout, MAX_CARGO_OUTPUT_BYTES),
            max_stderr_bytes=_clamp(
                params.max_stderr_bytes, DEFAULT_CARGO_STDERR_BYTES, MAX_CARGO_OUTPUT_BYTES
            ),
            parse_metadata_json=kind is CargoCommandKind.METADATA,
        )


def build_args(kind: CargoCommandKind, params: CargoParams) -> list[str]:
    """Return the cargo arguments for ``kind`` built from ``params``."""
    if isinstance(params, CargoBuildParams):
        return _build_like_args(kind, params)
    if isinstance(params, CargoTestParams):
        return _test_args(kind, params)
    if isinstance(params, CargoFmtCheckParams):
        return _fmt_check_args(kind, params)
    if isinstance(params, CargoMetadataParams):
        return _metadata_args(kind, params)
    raise TypeError(f"unsupported cargo params type: {type(params).__name__}")


def _build_like_args(kind: CargoCommandKind, params: CargoBuildParams) -> list[str]:
    command = _BUILD_COMMANDS.get(kind)
    if command is None:
        raise _unsupported(kind)
    _validate_package_scope(params.workspace, params.package)
    _validate_feature_flags(params.features, params.all_features, params.no_default_features)
    return [
        command,
        *_package_scope(params.workspace, params.package),
        *_feature_flags(params.features, params.all_features, params.no_default_features),
        *_option("--target", "target", params.target),
        *_flags(
            ("--all-targets", params.all_targets),
            ("--release", params.release),
            ("--locked", params.locked),
            ("--offline", params.offline),
            ("--frozen", params.frozen),
        ),
    ]


def _test_args(kind: CargoCommandKind, params: CargoTestParams) -> list[str]:
    if kind is not CargoCommandKind.TEST:
        raise _unsupported(kind)
    _validate_package_scope(params.workspace, params.package)
    _validate_feature_flags(params.features, params.all_features, params.no_default_features)
    args = [
        "test",
        *_package_scope(params.workspace, params.package),
        *_feature_flags(params.features, params.all_features, params.no_default_features),
        *_option("--target", "target", params.target),
        *_flags(
            ("--all-targets", params.all_targets),
            ("--locked", params.locked),
            ("--offline", params.offline),
            ("--frozen", params.frozen),
        ),
        *_positional("test_filter", params.test_filter),
    ]
    if params.nocapture:
        args += ["--", "--nocapture"]
    return args


def _fmt_check_args(kind: CargoCommandKind, params: CargoFmtCheckParams) -> list[str]:
    if kind is not CargoCommandKind.FMT_CHECK:
        raise _unsupported(kind)
    if params.all and params.package is not None:
        raise CargoValidationError("cargo option conflict: all and package cannot both be set")
    return [
        "fmt",
        "--check",
        *_flags(("--all", params.all)),
        *_option("-p", "package", params.package),
    ]


def _metadata_args(kind: CargoCommandKind, params: CargoMetadataParams) -> list[str]:
    if kind is not CargoCommandKind.METADATA:
        raise _unsupported(kind)
    _validate_feature_flags(params.features, params.all_features, params.no_default_features)
    return [
        "metadata",
        "--format-version",
        "1",
        *_feature_flags(params.features, params.all_features, params.no_default_features),
        *_option("--filter-platform", "filter_platform", params.filter_platform),
        *_flags(
            ("--no-deps", params.no_deps),
            ("--locked", params.locked),
            ("--offline", params.offline),
            ("--frozen", params.frozen),
        ),
    ]


def _unsupported(kind: CargoCommandKind) -> CargoValidationError:
    return CargoValidationError(
        f"cargo command kind {kind.value} is not supported by these params"
    )


def _validate_package_scope(workspace: Optional[bool], package: Optional[str]) -> None:
    if workspace and package is not None:
        raise CargoValidationError(
            "cargo option conflict: workspace and package cannot both be set"
        )


def _validate_feature_flags(
    features: Optional[Sequence[str]],
    all_features: Optional[bool],
    no_default_features: Optional[bool],
) -> None:
    if all_features and features:
        raise CargoValidationError(
            "cargo option conflict: all_features cannot be combined with features"
        )
    if all_features and no_default_features:
        raise CargoValidationError(
            "cargo option conflict: all_features cannot be combined with no_default_features"
        )
    for feature in features or ():
        _validate_user_value("features", feature)
        if "," in feature:
            raise CargoValidationError(
                "cargo option features values must not contain ','", field="features"
            )


def _validate_user_value(field: str, value: str) -> None:
    if not value:
        raise CargoValidationError(f"cargo option {field} value must not be empty", field=field)
    if value.startswith("-"):
        raise CargoValidationError(
            f"cargo option {field} value must not start with '-'", field=field
        )


def _package_scope(workspace: Optional[bool], package: Optional[str]) -> list[str]:
    return [*_flags(("--workspace", workspace)), *_option("-p", "package", package)]


def _feature_flags(
    features: Optional[Sequence[str]],
    all_features: Optional[bool],
    no_default_features: Optional[bool],
) -> list[str]:
    args = ["--features", ",".join(features)] if features else []
    return args + _flags(
        ("--all-features", all_features),
        ("--no-default-features", no_default_features),
    )


def _flags(*pairs: tuple[str, Optional[bool]]) -> list[str]:
    return [flag for flag, enabled in pairs if enabled]


def _option(flag: str, field: str, value: Optional[str]) -> list[str]:
    if value is None:
        return []
    _validate_user_value(field, value)
    return [flag, value]


def _positional(field: str, value: Optional[str]) -> list[str]:
    if value is None:
        return []
    _validate_user_value(field, value)
    return [value]


def _clamp(value: Optional[int], default: int, maximum: int) -> int:
    return min(default if value is None else value, maximum)