"""Container Controller - best-effort stop/start of a fleet of containers."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from .base_backend import ContainerBackend
from ...core.exceptions import ContainerOperationError
from ...logging_config import log_success
from ...models import ContainerOutcome
from ...utils.console_reporter import ConsoleReporter

SleepFunc = Callable[[float], Awaitable[None]]

ALREADY_STOPPED = "already stopped"


class ContainerController:
    """
    Stops and starts containers through a ContainerBackend.

    stop() and start() never raise: every failure is reported as a failed
    ContainerOutcome so restart_all() can carry on with the remaining ids.
    """

    def __init__(
        self,
        backend: ContainerBackend,
        restart_delay_seconds: float = 2.0,
        sleep: Optional[SleepFunc] = None,
        reporter: Optional[ConsoleReporter] = None,
    ):
        self._backend = backend
        self._restart_delay = restart_delay_seconds
        self._sleep = sleep or asyncio.sleep
        self._reporter = reporter

    async def stop(self, container_id: str) -> ContainerOutcome:
        """Graceful stop, falling back to a forced stop."""
        self._step(f"Stopping container {container_id}...")
        logging.info(f"Stopping container {container_id}")

        try:
            status = await self._backend.status(container_id)
            if status.exists and not status.running:
                logging.info(f"Container {container_id} is not running, nothing to stop")
                return ContainerOutcome(
                    container_id=container_id, succeeded=True, message=ALREADY_STOPPED
                )

            if await self._backend.stop(container_id):
                log_success(f"Container {container_id} stopped successfully")
                return ContainerOutcome(
                    container_id=container_id, succeeded=True, message="stopped"
                )

            logging.warning(
                f"Failed to stop container {container_id} gracefully, attempting force stop"
            )
            if await self._backend.stop(container_id, force=True):
                log_success(f"Container {container_id} force stopped")
                return ContainerOutcome(
                    container_id=container_id, succeeded=True, message="force stopped"
                )

            logging.error(f"Failed to force stop container {container_id}")
            return ContainerOutcome(
                container_id=container_id, succeeded=False, message="force stop failed"
            )

        except ContainerOperationError as e:
            logging.error(str(e))
            return ContainerOutcome(
                container_id=container_id, succeeded=False, message=e.reason
            )

    async def start(self, container_id: str) -> ContainerOutcome:
        self._step(f"Starting container {container_id}...")
        logging.info(f"Starting container {container_id}")

        try:
            if await self._backend.start(container_id):
                log_success(f"Container {container_id} started successfully")
                return ContainerOutcome(
                    container_id=container_id, succeeded=True, message="started"
                )

            logging.error(f"Failed to start container {container_id}")
            return ContainerOutcome(
                container_id=container_id, succeeded=False, message="start failed"
            )

        except ContainerOperationError as e:
            logging.error(str(e))
            return ContainerOutcome(
                container_id=container_id, succeeded=False, message=e.reason
            )

    async def restart_all(self, container_ids: Sequence[str]) -> List[str]:
        """
        Restart every container: stop, short delay if it was running, start.

        Each id is handled independently; a failed stop does not prevent the
        start attempt, and one container's failure does not affect the others.

        Returns:
            Ids that failed the stop or the start phase, in configured order.
        """
        self._step("Restarting all configured containers...")
        logging.info("Starting container restart process")

        failed: List[str] = []
        for container_id in container_ids:
            stop_outcome = await self.stop(container_id)
            if stop_outcome.message != ALREADY_STOPPED:
                await self._sleep(self._restart_delay)
            start_outcome = await self.start(container_id)

            if stop_outcome.succeeded and start_outcome.succeeded:
                log_success(f"Container {container_id} processed successfully")
            else:
                failed.append(container_id)

        if failed:
            logging.warning(f"Failed containers: {' '.join(failed)}")
        else:
            log_success("All containers processed successfully")

        return failed

    def get_backend_name(self) -> str:
        return self._backend.get_backend_name()

    def _step(self, message: str) -> None:
        if self._reporter:
            self._reporter.step(message)
