"""Validated cargo invocations and runs, LSP framing, a diagnostics cache and source snippets."""

__version__ = "0.1.0"