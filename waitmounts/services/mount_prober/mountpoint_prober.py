"""Linux Mount Prober backed by util-linux `mountpoint -q`."""

import asyncio
import logging
from typing import Dict

import aiofiles.os

from .base_prober import BaseMountProber
from ...core.exceptions import ProbeError
from ...utils.command_runner import CommandTimeoutError, run_command


class MountpointProber(BaseMountProber):
    """
    Probe mounts with `mountpoint -q <path>`; exit code 0 means mounted.

    A missing directory or a probe fault is warned about once per path; the
    same condition on later polls is logged at debug level until the path
    probes cleanly again.
    """

    def __init__(self, mountpoint_binary: str = "mountpoint", timeout: float = 10.0):
        self._binary = mountpoint_binary
        self._timeout = timeout
        # path -> last warning issued for it
        self._warned: Dict[str, str] = {}

    async def is_mounted(self, path: str) -> bool:
        try:
            if not await self._directory_exists(path):
                self._warn_once(
                    path,
                    f"Mount point directory does not exist: {path} "
                    f"(normal if the mount is not yet active)",
                )
                return False

            mounted = await self._probe(path)

        except ProbeError as e:
            self._warn_once(path, f"{e} - treating as not mounted")
            return False

        self._warned.pop(path, None)
        return mounted

    def _warn_once(self, path: str, message: str) -> None:
        if self._warned.get(path) == message:
            logging.debug(message)
            return
        self._warned[path] = message
        logging.warning(message)

    async def _directory_exists(self, path: str) -> bool:
        try:
            return await asyncio.wait_for(
                aiofiles.os.path.isdir(path), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            raise ProbeError(path, f"directory check timed out after {self._timeout:.0f}s")
        except OSError as e:
            raise ProbeError(path, str(e))

    async def _probe(self, path: str) -> bool:
        try:
            result = await run_command(
                [self._binary, "-q", path], timeout=self._timeout
            )
        except FileNotFoundError:
            raise ProbeError(path, f"'{self._binary}' command not found")
        except CommandTimeoutError as e:
            raise ProbeError(path, str(e))
        except OSError as e:
            raise ProbeError(path, str(e))

        # Older util-linux returns 1 for "not a mountpoint", newer returns 32
        if not result.succeeded and result.stderr.strip():
            logging.debug(f"mountpoint reported for {path}: {result.stderr.strip()}")

        return result.succeeded
