"""Content-Length framing for LSP messages."""

from __future__ import annotations

import json
import re
from typing import Any, Iterator, Optional

from ra_mcp.errors import FramingError

HEADER_TERMINATOR = b"\r\n\r\n"
_LENGTH = re.compile(r"\+?[0-9]+")


class FrameDecoder:
    """Accumulates bytes and yields complete JSON-RPC messages."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def push(self, data: bytes) -> None:
        """Append raw bytes read from the stream."""
        self._buffer += data

    def next_message(self) -> Optional[Any]:
        """Return the next complete message, or None if more bytes are needed."""
        header_end = self._buffer.find(HEADER_TERMINATOR)
        if header_end < 0:
            return None
        try:
            header = bytes(self._buffer[:header_end]).decode("utf-8")
        except UnicodeDecodeError as error:
            raise FramingError(str(error)) from error
        content_length = _parse_content_length(header)
        body_start = header_end + len(HEADER_TERMINATOR)
        frame_end = body_start + content_length
        if len(self._buffer) < frame_end:
            return None

        body = bytes(self._buffer[body_start:frame_end])
        del self._buffer[:frame_end]
        return json.loads(body)

    def __iter__(self) -> Iterator[Any]:
        """Yield every complete message currently buffered."""
        while (message := self.next_message()) is not None:
            yield message


def encode_message(value: Any) -> bytes:
    """Serialize ``value`` as one framed LSP message."""
    body = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


def _parse_content_length(header: str) -> int:
    for raw_line in header.split("\n"):
        line = raw_line.removesuffix("\r")
        name, sep, value = line.partition(":")
        if not sep:
            continue
        if name.lower() == "content-length":
            value = value.strip()
            if not value:
                raise FramingError("cannot parse integer from empty string")
            if not _LENGTH.fullmatch(value):
                raise FramingError("invalid digit found in string")
            return int(value)
    raise FramingError("missing Content-Length header")