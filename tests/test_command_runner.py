import asyncio

import pytest

from waitmounts.utils.command_runner import CommandTimeoutError, run_command


@pytest.mark.asyncio
async def test_captures_output_and_exit_code():
    result = await run_command(["sh", "-c", "echo status: running; echo oops >&2; exit 3"])

    assert result.returncode == 3
    assert result.succeeded is False
    assert result.stdout.strip() == "status: running"
    assert result.stderr.strip() == "oops"
    assert result.cmd[0] == "sh"


@pytest.mark.asyncio
async def test_success():
    result = await run_command(["true"], timeout=5)
    assert result.succeeded is True


@pytest.mark.asyncio
async def test_missing_executable():
    with pytest.raises(FileNotFoundError):
        await run_command(["/nonexistent/bin/pct", "status", "101"])


@pytest.mark.asyncio
async def test_timeout_kills_process():
    with pytest.raises(CommandTimeoutError) as exc_info:
        await run_command(["sleep", "5"], timeout=0.2)

    assert exc_info.value.cmd == ["sleep", "5"]
    assert exc_info.value.timeout == 0.2


@pytest.mark.asyncio
async def test_cancellation_waits_for_running_command(tmp_path):
    marker = tmp_path / "done"
    task = asyncio.create_task(
        run_command(["sh", "-c", f"sleep 0.5; touch {marker}"], timeout=5)
    )
    await asyncio.sleep(0.2)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert marker.exists()
