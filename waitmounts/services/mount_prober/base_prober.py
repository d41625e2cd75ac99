"""Abstract Mount Prober - interface plus the shared aggregate checks."""

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from ...models import MountStatus


class BaseMountProber(ABC):
    """Checks whether filesystem paths are active mount points."""

    @abstractmethod
    async def is_mounted(self, path: str) -> bool:
        """Return True if path is an active mount. Never raises."""
        pass

    async def check_all(self, paths: Sequence[str]) -> MountStatus:
        """Probe every path once and return the per-path status."""
        status: MountStatus = {}
        for path in paths:
            status[path] = await self.is_mounted(path)
        return status

    async def all_mounted(self, paths: Sequence[str]) -> bool:
        """True iff every path probes as mounted."""
        status = await self.check_all(paths)
        missing = [path for path, mounted in status.items() if not mounted]
        if missing:
            logging.debug(f"Mounts not active: {', '.join(missing)}")
        return not missing
