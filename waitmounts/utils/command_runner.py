"""
Async subprocess helper shared by the mount prober and the container backend.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence


class CommandTimeoutError(Exception):
    """Raised when a command does not finish within its timeout."""

    def __init__(self, cmd: Sequence[str], timeout: float):
        self.cmd = list(cmd)
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:.0f}s: {' '.join(cmd)}")


@dataclass(frozen=True)
class CommandResult:
    """Exit status and decoded output of a finished command."""

    cmd: tuple
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


async def run_command(
    cmd: Sequence[str], timeout: Optional[float] = None
) -> CommandResult:
    """
    Run a command and wait for it to finish.

    The wait is shielded from cancellation: once a command has been issued it
    is always awaited to completion (or to its timeout) before a pending
    cancellation is re-raised to the caller.

    Raises:
        FileNotFoundError: If the executable does not exist.
        CommandTimeoutError: If the command exceeds the timeout. The process is killed.
    """
    logging.debug(f"Running command: {' '.join(cmd)}")

    process = await asyncio.create_subprocess_exec(
        *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
    )

    communicate = asyncio.ensure_future(
        asyncio.wait_for(process.communicate(), timeout=timeout)
    )
    cancelled = False
    while True:
        try:
            stdout, stderr = await asyncio.shield(communicate)
            break
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise CommandTimeoutError(cmd, timeout or 0.0)
        except asyncio.CancelledError:
            if communicate.done():
                raise
            # Finish the in-flight command first, then honor the cancellation
            cancelled = True

    result = CommandResult(
        cmd=tuple(cmd),
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace") if stdout else "",
        stderr=stderr.decode(errors="replace") if stderr else "",
    )
    logging.debug(f"Command finished with exit code {result.returncode}: {' '.join(cmd)}")

    if cancelled:
        raise asyncio.CancelledError()
    return result
