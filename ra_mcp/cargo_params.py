"""Structured parameters accepted by the cargo tools, and their limits."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional

DEFAULT_CARGO_TIMEOUT_MS = 120_000
MAX_CARGO_TIMEOUT_MS = 600_000
DEFAULT_CARGO_STDOUT_BYTES = 60_000
DEFAULT_CARGO_STDERR_BYTES = 60_000
DEFAULT_CARGO_METADATA_STDOUT_BYTES = 120_000
MAX_CARGO_OUTPUT_BYTES = 240_000


@dataclass(kw_only=True)
class CargoBuildParams:
    """Options for ``cargo build``, ``cargo check`` and ``cargo clippy``."""

    workspace: Optional[bool] = None
    package: Optional[str] = None
    features: Optional[list[str]] = None
    all_features: Optional[bool] = None
    no_default_features: Optional[bool] = None
    target: Optional[str] = None
    all_targets: Optional[bool] = None
    release: Optional[bool] = None
    locked: Optional[bool] = None
    offline: Optional[bool] = None
    frozen: Optional[bool] = None
    timeout_ms: Optional[int] = None
    max_stdout_bytes: Optional[int] = None
    max_stderr_bytes: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a JSON-ready dictionary."""
        return asdict(self)


@dataclass(kw_only=True)
class CargoTestParams:
    """Options for ``cargo test``."""

    workspace: Optional[bool] = None
    package: Optional[str] = None
    features: Optional[list[str]] = None
    all_features: Optional[bool] = None
    no_default_features: Optional[bool] = None
    target: Optional[str] = None
    all_targets: Optional[bool] = None
    locked: Optional[bool] = None
    offline: Optional[bool] = None
    frozen: Optional[bool] = None
    timeout_ms: Optional[int] = None
    max_stdout_bytes: Optional[int] = None
    max_stderr_bytes: Optional[int] = None
    test_filter: Optional[str] = None
    nocapture: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a JSON-ready dictionary."""
        return asdict(self)


@dataclass(kw_only=True)
class CargoFmtCheckParams:
    """Options for ``cargo fmt --check``."""

    package: Optional[str] = None
    all: Optional[bool] = None
    timeout_ms: Optional[int] = None
    max_stdout_bytes: Optional[int] = None
    max_stderr_bytes: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a JSON-ready dictionary."""
        return asdict(self)


@dataclass(kw_only=True)
class CargoMetadataParams:
    """Options for ``cargo metadata``."""

    features: Optional[list[str]] = None
    all_features: Optional[bool] = None
    no_default_features: Optional[bool] = None
    filter_platform: Optional[str] = None
    no_deps: Optional[bool] = None
    locked: Optional[bool] = None
    offline: Optional[bool] = None
    frozen: Optional[bool] = None
    timeout_ms: Optional[int] = None
    max_stdout_bytes: Optional[int] = None
    max_stderr_bytes: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the parameters as a JSON-ready dictionary."""
        return asdict(self)