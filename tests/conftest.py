"""
Pytest configuration and shared fixtures.

Fakes replace the external collaborators (mount table, pct, wall clock) so the
monitor logic runs deterministically without a Proxmox host.
"""

from typing import Callable, Dict, List, Optional, Set, Tuple

import pytest

from waitmounts.core.exceptions import ContainerOperationError
from waitmounts.dependencies import reset_singletons
from waitmounts.models import ContainerStatus, MountStatus
from waitmounts.services.container_control import ContainerBackend
from waitmounts.services.mount_prober import BaseMountProber


class FakeClock:
    """Monotonic clock whose sleep() advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []
        self.on_sleep: Optional[Callable[[float], None]] = None

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        if self.on_sleep:
            self.on_sleep(seconds)
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedProber(BaseMountProber):
    """
    Mount prober driven by a predicate over (path, current time).

    Every check_all() call is one probe round.
    """

    def __init__(self, clock: FakeClock, is_active: Callable[[str, float], bool]):
        self._clock = clock
        self._is_active = is_active
        self.rounds = 0
        self.probed_paths: List[str] = []

    async def is_mounted(self, path: str) -> bool:
        self.probed_paths.append(path)
        return self._is_active(path, self._clock.now)

    async def check_all(self, paths) -> MountStatus:
        self.rounds += 1
        return await super().check_all(paths)


class StaticProber(BaseMountProber):
    """Mount prober with a fixed answer per path."""

    def __init__(self, status: Dict[str, bool]):
        self._status = status

    async def is_mounted(self, path: str) -> bool:
        return self._status.get(path, False)


class FakeBackend(ContainerBackend):
    """In-memory container backend that records every call."""

    def __init__(
        self,
        containers: Optional[Dict[str, bool]] = None,
        stop_failures: Optional[Set[str]] = None,
        graceful_stop_failures: Optional[Set[str]] = None,
        start_failures: Optional[Set[str]] = None,
        broken: Optional[Set[str]] = None,
    ):
        # container id -> running
        self.containers = containers if containers is not None else {}
        self.stop_failures = stop_failures or set()
        self.graceful_stop_failures = graceful_stop_failures or set()
        self.start_failures = start_failures or set()
        self.broken = broken or set()
        self.calls: List[Tuple] = []

    async def status(self, container_id: str) -> ContainerStatus:
        self.calls.append(("status", container_id))
        self._raise_if_broken(container_id, "status")
        if container_id not in self.containers:
            return ContainerStatus(container_id=container_id, exists=False)
        return ContainerStatus(
            container_id=container_id,
            exists=True,
            running=self.containers[container_id],
        )

    async def stop(self, container_id: str, force: bool = False) -> bool:
        self.calls.append(("stop", container_id, force))
        self._raise_if_broken(container_id, "stop")
        if container_id in self.stop_failures:
            return False
        if container_id in self.graceful_stop_failures and not force:
            return False
        self.containers[container_id] = False
        return True

    async def start(self, container_id: str) -> bool:
        self.calls.append(("start", container_id))
        self._raise_if_broken(container_id, "start")
        if container_id in self.start_failures:
            return False
        self.containers[container_id] = True
        return True

    def get_backend_name(self) -> str:
        return "fake"

    def operations(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]

    def _raise_if_broken(self, container_id: str, operation: str) -> None:
        if container_id in self.broken:
            raise ContainerOperationError(container_id, operation, "backend unavailable")


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before each test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(containers={"101": True, "102": True, "103": False})
