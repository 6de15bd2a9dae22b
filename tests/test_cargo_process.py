import io
import sys
import time
from pathlib import Path

import pytest

from ra_mcp.cargo_args import CargoInvocation
from ra_mcp.cargo_process import read_limited, run_cargo
from ra_mcp.errors import CargoMissingError


def _python(script, *, timeout_ms=30_000, max_stdout=1_024, max_stderr=1_024, parse=False):
    return CargoInvocation(
        command=sys.executable,
        args=["-c", script],
        timeout_ms=timeout_ms,
        max_stdout_bytes=max_stdout,
        max_stderr_bytes=max_stderr,
        parse_metadata_json=parse,
    )


def test_read_limited_reports_truncation():
    result = read_limited(io.BytesIO(b"abcdef"), 3)
    assert result.text == "abc"
    assert result.truncated


def test_read_limited_keeps_short_input():
    result = read_limited(io.BytesIO(b"abc"), 10)
    assert result.text == "abc"
    assert not result.truncated


@pytest.mark.asyncio
async def test_missing_command_raises(tmp_path):
    invocation = CargoInvocation(
        command="definitely-not-a-real-command-ra-mcp",
        args=[],
        timeout_ms=1_000,
        max_stdout_bytes=10,
        max_stderr_bytes=10,
    )
    with pytest.raises(CargoMissingError):
        await run_cargo(tmp_path, invocation)


@pytest.mark.asyncio
async def test_runs_in_workspace_root(tmp_path):
    output = await run_cargo(tmp_path, _python("import os; print(os.getcwd())"))
    assert output.command == sys.executable
    assert output.status.success
    assert not output.timed_out
    assert Path(output.stdout.strip()).resolve() == tmp_path.resolve()


@pytest.mark.asyncio
async def test_process_stdin_is_null(tmp_path):
    output = await run_cargo(tmp_path, _python("import sys; print(len(sys.stdin.read()))"))
    assert output.status.success
    assert output.stdout.strip() == "0"


@pytest.mark.asyncio
async def test_exit_code_is_reported(tmp_path):
    output = await run_cargo(tmp_path, _python("import sys; sys.exit(3)"))
    assert output.status.code == 3
    assert not output.status.success
    assert not output.timed_out


@pytest.mark.asyncio
async def test_metadata_json_is_parsed(tmp_path):
    script = "import json; print(json.dumps({'packages': [{'name': 'cargo_mcp_temp'}]}))"
    output = await run_cargo(tmp_path, _python(script, parse=True))
    assert output.status.success
    assert output.metadata_json["packages"][0]["name"] == "cargo_mcp_temp"


@pytest.mark.asyncio
async def test_stdout_and_stderr_caps_are_applied(tmp_path):
    script = "import sys; print('x' * 1000); sys.stderr.write('y' * 1000)"
    output = await run_cargo(tmp_path, _python(script, max_stdout=32, max_stderr=128, parse=True))
    assert output.status.success
    assert output.stdout_truncated
    assert len(output.stdout) <= 32
    assert output.stderr_truncated
    assert len(output.stderr) <= 128
    assert output.metadata_json is None


@pytest.mark.asyncio
async def test_timeout_kills_running_process(tmp_path):
    started = time.monotonic()
    output = await run_cargo(tmp_path, _python("import time; time.sleep(10)", timeout_ms=300))
    assert time.monotonic() - started < 5
    assert output.timed_out
    assert not output.status.success
    assert output.status.code is None
    assert output.stdout_truncated and output.stderr_truncated
    assert "cargo timed out after 300 ms" in output.notes
    assert any("output collection stopped" in note for note in output.notes)
    assert any("process tree cleanup" in note for note in output.notes)


@pytest.mark.asyncio
async def test_output_collection_times_out_after_process_exits(tmp_path):
    script = (
        "import subprocess, sys\n"
        "subprocess.Popen([sys.executable, '-c', "
        "'import time; print(\"child keeps stdout open\", flush=True); time.sleep(5)'])\n"
        "print('parent exits', flush=True)\n"
    )
    started = time.monotonic()
    output = await run_cargo(tmp_path, _python(script, timeout_ms=500))
    assert time.monotonic() - started < 3
    assert output.status.success
    assert output.timed_out
    assert output.stdout_truncated
    assert output.stderr_truncated
    assert any("output collection stopped" in note for note in output.notes)
    assert any("process tree cleanup" in note for note in output.notes)