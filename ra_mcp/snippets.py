"""Numbered source excerpts around a range of lines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass
class SourceSnippet:
    start_line: int
    end_line: int
    text: str
    truncated: bool


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def read_snippet(
    path: Union[str, "os.PathLike[str]"],
    start_line: int,
    end_line: int,
    context_lines: int,
    max_bytes: int,
) -> Optional[SourceSnippet]:
    """Return zero-based lines ``start_line``..``end_line`` plus context, numbered from one.

    Returns None when ``path`` is not a file.
    """
    file = Path(path)
    if not file.is_file():
        return None

    lines = _split_lines(file.read_text(encoding="utf-8"))
    if not lines:
        return SourceSnippet(start_line=0, end_line=0, text="", truncated=False)

    start = max(start_line - context_lines, 0)
    end = min(end_line + context_lines, len(lines) - 1)
    parts: list[str] = []
    size = 0
    truncated = False
    for line_no, line in enumerate(lines[start : end + 1], start=start):
        entry = f"{line_no + 1:>5} | {line}\n"
        entry_size = len(entry.encode("utf-8"))
        if size + entry_size > max_bytes:
            truncated = True
            break
        parts.append(entry)
        size += entry_size

    return SourceSnippet(start_line=start, end_line=end, text="".join(parts), truncated=truncated)