"""JSON-RPC error payloads, the diagnostics cache and URI helpers."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import ParseResult, urlparse

from ra_mcp.errors import InvalidFileUriError

_URI = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:[^\s\x00-\x1f\x7f]*")


@dataclass
class JsonRpcError:
    """The ``error`` member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    @classmethod
    def from_value(cls, value: Any) -> "JsonRpcError":
        """Build an error from decoded JSON, raising ValueError if it is malformed."""
        if not isinstance(value, dict):
            raise ValueError("JSON-RPC error must be an object")
        code = value.get("code")
        message = value.get("message")
        if not isinstance(code, int) or isinstance(code, bool):
            raise ValueError("JSON-RPC error code must be an integer")
        if not isinstance(message, str):
            raise ValueError("JSON-RPC error message must be a string")
        return cls(code=code, message=message, data=value.get("data"))

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, leaving out absent data."""
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


class DiagnosticsCache:
    """Latest published diagnostics, keyed by document URI."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, list[Any]] = {}

    def update(self, uri: str, diagnostics: list[Any]) -> None:
        with self._lock:
            self._entries[str(uri)] = list(diagnostics)

    def get(self, uri: str) -> list[Any]:
        with self._lock:
            return list(self._entries.get(str(uri), ()))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def all(self) -> list[tuple[str, list[Any]]]:
        with self._lock:
            return [(uri, list(diagnostics)) for uri, diagnostics in self._entries.items()]


def _check_uri(text: str) -> Optional[str]:
    return text if _URI.fullmatch(text) else None


def lsp_uri_from_url(url: str) -> str:
    """Return ``url`` as an LSP document URI, raising if it is not a valid URI."""
    uri = _check_uri(str(url))
    if uri is None:
        raise InvalidFileUriError(url)
    return uri


def url_from_lsp_uri(uri: str) -> ParseResult:
    """Parse an LSP document URI into its components."""
    if _check_uri(str(uri)) is None:
        raise InvalidFileUriError(uri)
    return urlparse(str(uri))