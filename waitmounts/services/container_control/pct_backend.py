"""Proxmox VE LXC backend using the `pct` command line tool."""

import logging
import re

from .base_backend import ContainerBackend
from ...core.exceptions import ContainerOperationError
from ...models import ContainerStatus
from ...utils.command_runner import CommandResult, CommandTimeoutError, run_command

_STATUS_PATTERN = re.compile(r"status:\s*(\w+)")


class PctBackend(ContainerBackend):
    """Drive LXC containers through `pct status|stop|start`."""

    def __init__(self, pct_binary: str = "pct", timeout: float = 180.0):
        self._binary = pct_binary
        self._timeout = timeout

    async def status(self, container_id: str) -> ContainerStatus:
        result = await self._run(container_id, "status", [container_id])

        if not result.succeeded:
            # pct exits nonzero when the container config does not exist
            logging.debug(
                f"pct status {container_id} failed: {result.stderr.strip() or result.returncode}"
            )
            return ContainerStatus(container_id=container_id, exists=False)

        match = _STATUS_PATTERN.search(result.stdout)
        state = match.group(1) if match else "unknown"
        return ContainerStatus(
            container_id=container_id, exists=True, running=state == "running"
        )

    async def stop(self, container_id: str, force: bool = False) -> bool:
        args = [container_id, "--force"] if force else [container_id]
        result = await self._run(container_id, "stop", args)
        if not result.succeeded:
            logging.debug(
                f"pct stop {' '.join(args)} failed: {result.stderr.strip() or result.returncode}"
            )
        return result.succeeded

    async def start(self, container_id: str) -> bool:
        result = await self._run(container_id, "start", [container_id])
        if not result.succeeded:
            logging.debug(
                f"pct start {container_id} failed: {result.stderr.strip() or result.returncode}"
            )
        return result.succeeded

    def get_backend_name(self) -> str:
        return "Proxmox pct"

    async def _run(self, container_id: str, operation: str, args: list) -> CommandResult:
        try:
            return await run_command(
                [self._binary, operation, *args], timeout=self._timeout
            )
        except FileNotFoundError:
            raise ContainerOperationError(
                container_id, operation, f"'{self._binary}' command not found"
            )
        except CommandTimeoutError as e:
            raise ContainerOperationError(container_id, operation, str(e))
        except OSError as e:
            raise ContainerOperationError(container_id, operation, str(e))
