# ra_mcp

Library components for tools that work with a Rust workspace through
`cargo` and `rust-analyzer`:

- `ra_mcp.cargo_params`: dataclasses of structured cargo options
  (`CargoBuildParams`, `CargoTestParams`, `CargoFmtCheckParams`,
  `CargoMetadataParams`) and the default and maximum limits.
- `ra_mcp.cargo_args`: `CargoCommandKind`, `CargoInvocation` and
  `build_args`, which turn parameters into a fixed cargo command line and
  reject unsafe or conflicting values with `CargoValidationError`.
- `ra_mcp.cargo_process`: `run_cargo`, which runs an invocation with
  stdin closed, bounded stdout/stderr capture, a timeout and process-tree
  cleanup; `read_limited` drains a stream up to a byte cap.
- `ra_mcp.cargo_output`: `CargoRunOutput`, `CargoStatus`, `TruncatedText`,
  `truncate_text` (UTF-8 safe truncation) and `metadata_json`.
- `ra_mcp.framing`: `Content-Length` framed JSON-RPC encoding
  (`encode_message`) and an incremental `FrameDecoder`.
- `ra_mcp.protocol`: `JsonRpcError`, a thread-safe `DiagnosticsCache` keyed
  by document URI, and the URI checks `lsp_uri_from_url` / `url_from_lsp_uri`.
- `ra_mcp.snippets`: `read_snippet`, numbered source excerpts with context.
- `ra_mcp.errors`: the `RaMcpError` hierarchy and `hint_for_error`.

## Installation

```
pip install .
```

Requires Python 3.10 or later. It has no runtime dependencies.

## Building and running a cargo command

```python
import asyncio
from pathlib import Path

from ra_mcp.cargo_args import CargoCommandKind, CargoInvocation
from ra_mcp.cargo_params import CargoBuildParams
from ra_mcp.cargo_process import run_cargo

params = CargoBuildParams(workspace=True, all_targets=True, locked=True)
invocation = CargoInvocation.from_params(CargoCommandKind.CHECK, params)
print(invocation.args)  # ['check', '--workspace', '--all-targets', '--locked']

output = asyncio.run(run_cargo(Path("."), invocation))
print(output.status.success, output.timed_out)
print(output.to_dict())
```

`CargoValidationError` is raised for `workspace` together with `package`,
`all_features` together with `features` or `no_default_features`, `all`
together with `package` for `fmt --check`, feature names containing `,`,
empty values, values starting with `-`, and a command kind the parameters do
not support.

`run_cargo` raises `CargoMissingError` when the command is not on `PATH` and
`CargoExecutionError` when it cannot be started or its output cannot be
read. On timeout it kills the process group (or uses `taskkill` on Windows),
sets `timed_out`, marks both streams truncated and records what happened in
`notes`.

Default limits:

| limit   | default                          | maximum       |
|---------|----------------------------------|---------------|
| timeout | 120 000 ms                       | 600 000 ms    |
| stdout  | 60 000 bytes (metadata 120 000)  | 240 000 bytes |
| stderr  | 60 000 bytes                     | 240 000 bytes |

For `cargo metadata`, `metadata_json` holds the parsed JSON when the command
succeeded and stdout was not truncated; a parse failure is added to `notes`.

## LSP framing

```python
from ra_mcp.framing import FrameDecoder, encode_message

frame = encode_message({"jsonrpc": "2.0", "id": 1, "result": None})
decoder = FrameDecoder()
decoder.push(frame)
for message in decoder:
    print(message)
```

`next_message()` returns `None` until a complete frame is buffered.
A missing or unparsable `Content-Length` header raises `FramingError`.

## Diagnostics and snippets

```python
from ra_mcp.protocol import DiagnosticsCache
from ra_mcp.snippets import read_snippet

cache = DiagnosticsCache()
cache.update("file:///tmp/example.rs", [{"message": "boom"}])
print(cache.get("file:///tmp/example.rs"))
print(cache.all())

snippet = read_snippet("src/lib.rs", start_line=10, end_line=12,
                       context_lines=2, max_bytes=4000)
if snippet is not None:
    print(snippet.text)
```

Line numbers passed to `read_snippet` are zero-based; the text shows them
one-based. It returns `None` when the path is not a file and sets
`truncated` when the excerpt would exceed `max_bytes`.

## Errors

Every package error derives from `ra_mcp.errors.RaMcpError`
(`CargoValidationError` from `ra_mcp.cargo_args` is a `ValueError`).
`hint_for_error(error)` returns a short suggestion for fixing an error.

## What this package does not do

It has no command-line program and no server: nothing here speaks a tool
protocol over stdio. It does not start or drive a `rust-analyzer` process;
it supplies the message framing, error payloads and diagnostics cache such a
client would use, but not the client itself. Workspace path resolution is
not included either.