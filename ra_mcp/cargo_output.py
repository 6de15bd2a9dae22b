"""Results of a cargo run and helpers for bounding captured output."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ra_mcp.cargo_args import CargoInvocation


@dataclass
class TruncatedText:
    text: str
    truncated: bool


@dataclass
class CargoStatus:
    code: Optional[int]
    success: bool


@dataclass
class CargoRunOutput:
    """Everything captured from one cargo invocation."""

    command: str
    args: list[str]
    status: CargoStatus
    duration_ms: int
    stdout: str
    stderr: str
    stdout_truncated: bool
    stderr_truncated: bool
    timed_out: bool
    notes: list[str] = field(default_factory=list)
    metadata_json: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the output as a JSON-ready dictionary."""
        return asdict(self)


def _is_utf8_continuation(byte: int) -> bool:
    return byte & 0b1100_0000 == 0b1000_0000


def truncate_text(data: bytes, max_bytes: int) -> TruncatedText:
    """Decode at most ``max_bytes`` of ``data`` without splitting a UTF-8 sequence."""
    if len(data) <= max_bytes:
        return TruncatedText(data.decode("utf-8", errors="replace"), False)

    end = min(max_bytes, len(data))
    while 0 < end < len(data) and _is_utf8_continuation(data[end]):
        end -= 1
    return TruncatedText(data[:end].decode("utf-8", errors="replace"), True)


def metadata_json(
    invocation: "CargoInvocation",
    status: CargoStatus,
    stdout: TruncatedText,
    notes: list[str],
) -> Any:
    """Parse cargo metadata output when it is complete; note parse failures in ``notes``."""
    if not invocation.parse_metadata_json or not status.success or stdout.truncated:
        return None
    try:
        return json.loads(stdout.text)
    except json.JSONDecodeError as error:
        notes.append(f"failed to parse cargo metadata JSON: {error}")
        return None