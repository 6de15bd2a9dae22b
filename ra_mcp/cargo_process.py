"""Run a validated cargo invocation with bounded output and a hard timeout."""

from __future__ import annotations

import asyncio
import os
import shutil
import signal
import subprocess
import threading
import time
from functools import partial
from typing import IO, Optional, Union

from ra_mcp.cargo_args import CargoInvocation
from ra_mcp.cargo_output import (
    CargoRunOutput,
    CargoStatus,
    TruncatedText,
    metadata_json,
    truncate_text,
)
from ra_mcp.errors import CargoExecutionError, CargoMissingError

_READ_CHUNK = 8192
_POSIX = os.name == "posix"
_REAP_TIMEOUT_S = 1.0
_MIN_COLLECTION_S = 0.1

PathLike = Union[str, "os.PathLike[str]"]


def read_limited(reader: IO[bytes], max_bytes: int) -> TruncatedText:
    """Drain ``reader``, keeping at most ``max_bytes`` and noting whether more arrived."""
    read = getattr(reader, "read1", None) or reader.read
    retained = bytearray()
    total = 0
    while chunk := read(_READ_CHUNK):
        total += len(chunk)
        if len(retained) < max_bytes:
            retained += chunk[: max_bytes - len(retained)]
    text = truncate_text(bytes(retained), max_bytes)
    return TruncatedText(text.text, total > max_bytes)


async def run_cargo(workspace_root: PathLike, invocation: CargoInvocation) -> CargoRunOutput:
    """Run ``invocation`` in ``workspace_root`` and capture its bounded output."""
    if shutil.which(invocation.command) is None:
        raise CargoMissingError()

    started = time.monotonic()
    try:
        process = subprocess.Popen(
            [invocation.command, *invocation.args],
            cwd=workspace_root,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=_POSIX,
        )
    except OSError as error:
        raise CargoExecutionError(str(error)) from error

    loop = asyncio.get_running_loop()
    stdout_future = _start_reader(loop, process.stdout, invocation.max_stdout_bytes, "stdout")
    stderr_future = _start_reader(loop, process.stderr, invocation.max_stderr_bytes, "stderr")

    notes: list[str] = []
    timeout = invocation.timeout_ms / 1000
    try:
        returncode = await asyncio.to_thread(process.wait, timeout)
    except subprocess.TimeoutExpired:
        notes.append(f"cargo timed out after {invocation.timeout_ms} ms")
        await _cleanup_process_tree(process, notes)
        _abort(stdout_future, stderr_future)
        notes.append("cargo output collection stopped after timeout")
        status = CargoStatus(code=None, success=False)
        stdout, stderr = _truncated_pair()
        timed_out = True
    except OSError as error:
        _abort(stdout_future, stderr_future)
        raise CargoExecutionError(str(error)) from error
    else:
        status = CargoStatus(code=returncode if returncode >= 0 else None, success=returncode == 0)
        remaining = max(timeout - (time.monotonic() - started), _MIN_COLLECTION_S)
        collected = await _collect(stdout_future, stderr_future, remaining)
        if collected is None:
            notes.append("cargo output collection stopped after timeout")
            await _cleanup_process_tree(process, notes)
            stdout, stderr = _truncated_pair()
            timed_out = True
        else:
            stdout, stderr = collected
            timed_out = False

    duration_ms = int((time.monotonic() - started) * 1000)
    parsed = metadata_json(invocation, status, stdout, notes)
    return CargoRunOutput(
        command=invocation.command,
        args=list(invocation.args),
        status=status,
        duration_ms=duration_ms,
        stdout=stdout.text,
        stderr=stderr.text,
        stdout_truncated=stdout.truncated,
        stderr_truncated=stderr.truncated,
        timed_out=timed_out,
        notes=notes,
        metadata_json=parsed,
    )


def _start_reader(
    loop: asyncio.AbstractEventLoop,
    stream: Optional[IO[bytes]],
    max_bytes: int,
    name: str,
) -> "asyncio.Future[TruncatedText]":
    if stream is None:
        raise CargoExecutionError(f"failed to capture cargo {name}")
    future: asyncio.Future[TruncatedText] = loop.create_future()

    def deliver(setter, value) -> None:
        if not future.done():
            setter(value)

    def work() -> None:
        try:
            with stream:
                result = read_limited(stream, max_bytes)
        except Exception as error:  # reported to the awaiting side
            callback = partial(deliver, future.set_exception, error)
        else:
            callback = partial(deliver, future.set_result, result)
        try:
            loop.call_soon_threadsafe(callback)
        except RuntimeError:
            pass  # the event loop has already closed

    threading.Thread(target=work, name=f"cargo-{name}-reader", daemon=True).start()
    return future


async def _collect(
    stdout_future: "asyncio.Future[TruncatedText]",
    stderr_future: "asyncio.Future[TruncatedText]",
    timeout: float,
) -> Optional[tuple[TruncatedText, TruncatedText]]:
    done, pending = await asyncio.wait(
        {stdout_future, stderr_future},
        timeout=timeout,
        return_when=asyncio.FIRST_EXCEPTION,
    )
    for future, name in ((stdout_future, "stdout"), (stderr_future, "stderr")):
        if future in done and future.exception() is not None:
            _abort(stdout_future, stderr_future)
            raise CargoExecutionError(f"failed to read cargo {name}: {future.exception()}")
    if pending:
        _abort(stdout_future, stderr_future)
        return None
    return stdout_future.result(), stderr_future.result()


def _abort(*futures: asyncio.Future) -> None:
    for future in futures:
        if not future.done():
            future.cancel()


def _truncated_pair() -> tuple[TruncatedText, TruncatedText]:
    return TruncatedText("", True), TruncatedText("", True)


async def _cleanup_process_tree(process: subprocess.Popen, notes: list[str]) -> None:
    pid = process.pid
    if os.name == "nt":
        await _taskkill(process, notes)
    elif hasattr(os, "killpg"):
        try:
            os.killpg(pid, signal.SIGKILL)
        except OSError as error:
            notes.append(f"cargo process tree cleanup failed for process group {pid}: {error}")
            _kill_fallback(process, notes)
        else:
            notes.append(f"cargo process tree cleanup sent SIGKILL to process group {pid}")
    else:
        notes.append("cargo process tree cleanup is not supported on this platform")
        _kill_fallback(process, notes)
    await _reap(process, notes)


async def _taskkill(process: subprocess.Popen, notes: list[str]) -> None:
    pid = process.pid
    try:
        result = await asyncio.to_thread(
            subprocess.run,
            ["taskkill.exe", "/PID", str(pid), "/T", "/F"],
            stdin=subprocess.DEVNULL,
            capture_output=True,
        )
    except OSError as error:
        notes.append(f"cargo process tree cleanup failed for PID {pid}: {error}")
        _kill_fallback(process, notes)
        return
    if result.returncode == 0:
        notes.append(f"cargo process tree cleanup requested with taskkill for PID {pid}")
    else:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        notes.append(
            f"cargo process tree cleanup failed for PID {pid}: "
            f"taskkill exited with {result.returncode}; {stderr}"
        )
        _kill_fallback(process, notes)


def _kill_fallback(process: subprocess.Popen, notes: list[str]) -> None:
    try:
        process.kill()
    except OSError as error:
        notes.append(f"failed to kill timed out cargo process: {error}")
    else:
        notes.append("cargo top-level process killed after cleanup fallback")


async def _reap(process: subprocess.Popen, notes: list[str]) -> None:
    try:
        await asyncio.to_thread(process.wait, _REAP_TIMEOUT_S)
    except subprocess.TimeoutExpired:
        notes.append("timed out while reaping cargo process after cleanup")
    except OSError as error:
        notes.append(f"failed to reap timed out cargo process: {error}")