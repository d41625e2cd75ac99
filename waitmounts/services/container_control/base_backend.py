"""Abstract Container Backend - the three operations the controller relies on."""

from abc import ABC, abstractmethod

from ...models import ContainerStatus


class ContainerBackend(ABC):
    """Container management collaborator (status/stop/start)."""

    @abstractmethod
    async def status(self, container_id: str) -> ContainerStatus:
        """Report whether the container exists and is running."""
        pass

    @abstractmethod
    async def stop(self, container_id: str, force: bool = False) -> bool:
        """Stop the container. Returns True on success."""
        pass

    @abstractmethod
    async def start(self, container_id: str) -> bool:
        """Start the container. Returns True on success."""
        pass

    @abstractmethod
    def get_backend_name(self) -> str:
        """Backend name for logging."""
        pass
