"""
Tests for monitor_session: logging lifecycle, exit codes and signal handling.
"""

import asyncio
import os
import signal

import pytest

from waitmounts.models import MonitorConfig
from waitmounts.services.monitor import monitor_session


@pytest.fixture
def config(tmp_path) -> MonitorConfig:
    return MonitorConfig(
        mount_points=["/mnt/nfs", "/mnt/cifs"],
        container_ids=["101", "102"],
        log_path=str(tmp_path / "wait-mounts.log"),
        daemon_mode=True,
    )


def log_text(config: MonitorConfig) -> str:
    with open(config.log_path, encoding="utf-8") as f:
        return f.read()


@pytest.mark.asyncio
async def test_start_and_end_lines(config):
    async with monitor_session(config, "2.0.0") as session:
        pass

    text = log_text(config)
    assert session.exit_code == 0
    assert "===== Mount monitoring session started =====" in text
    assert "wait-mounts version 2.0.0" in text
    assert "Monitoring mounts: /mnt/nfs /mnt/cifs" in text
    assert "Managing containers: 101 102" in text
    assert "SUCCESS: Script completed successfully" in text
    assert text.rstrip().endswith("===== Mount monitoring session ended (exit code 0) =====")


@pytest.mark.asyncio
async def test_error_sets_exit_code_and_is_reraised(config):
    with pytest.raises(RuntimeError):
        async with monitor_session(config, "2.0.0") as session:
            raise RuntimeError("pct exploded")

    text = log_text(config)
    assert session.exit_code == 1
    assert "ERROR: Script terminated with error: pct exploded" in text
    assert "session ended (exit code 1)" in text


@pytest.mark.asyncio
async def test_sigterm_ends_session_cleanly(config):
    async with monitor_session(config, "2.0.0") as session:
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.sleep(5)

    text = log_text(config)
    assert session.exit_code == 0
    assert session.received_signal == "SIGTERM"
    assert "Received SIGTERM, shutting down mount monitoring" in text
    assert "session ended (exit code 0)" in text


@pytest.mark.asyncio
async def test_signal_handlers_removed_after_session(config):
    async with monitor_session(config, "2.0.0"):
        pass

    loop = asyncio.get_running_loop()
    # remove_signal_handler returns False when nothing is registered
    assert loop.remove_signal_handler(signal.SIGTERM) is False


@pytest.mark.asyncio
async def test_log_is_appended_across_sessions(config):
    async with monitor_session(config, "2.0.0"):
        pass
    async with monitor_session(config, "2.0.0"):
        pass

    assert log_text(config).count("===== Mount monitoring session started =====") == 2
