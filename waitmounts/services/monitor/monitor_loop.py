import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque, List, Optional

from ..container_control import ContainerController
from ..mount_prober import BaseMountProber
from ...core.exceptions import MountTimeoutError
from ...core.monitor_state_machine import MonitorStateMachine
from ...logging_config import log_success
from ...models import CycleReport, MonitorConfig, MonitorState, MountStatus
from ...utils.console_reporter import ConsoleReporter

SleepFunc = Callable[[float], Awaitable[None]]
ClockFunc = Callable[[], float]


class MountDependencyMonitor:
    """
    Waits for all configured mounts, restarts the configured containers, then
    keeps watching the mounts and starts a new cycle when one disappears.

    Everything runs sequentially on one task: probes, container operations and
    sleeps are awaited one at a time.
    """

    def __init__(
        self,
        config: MonitorConfig,
        prober: BaseMountProber,
        controller: ContainerController,
        reporter: Optional[ConsoleReporter] = None,
        surveillance_interval_seconds: float = 60,
        heartbeat_interval_seconds: float = 600,
        sleep: Optional[SleepFunc] = None,
        clock: Optional[ClockFunc] = None,
        history_size: int = 100,
    ):
        self._config = config
        self._prober = prober
        self._controller = controller
        self._reporter = reporter or ConsoleReporter(quiet=True)
        self._surveillance_interval = surveillance_interval_seconds
        self._heartbeat_interval = heartbeat_interval_seconds
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic

        self._state_machine = MonitorStateMachine(history_size=history_size)
        # Only the most recent cycle reports are kept
        self._cycles: Deque[CycleReport] = deque(maxlen=history_size)
        self._cycle_count = 0
        self._last_status: MountStatus = {}
        self._is_running = False

    @property
    def state(self) -> MonitorState:
        return self._state_machine.state

    @property
    def state_machine(self) -> MonitorStateMachine:
        return self._state_machine

    @property
    def cycles(self) -> List[CycleReport]:
        """Reports of the most recent cycles, oldest first."""
        return list(self._cycles)

    @property
    def cycle_count(self) -> int:
        """Number of cycles started since run()."""
        return self._cycle_count

    @property
    def is_running(self) -> bool:
        return self._is_running

    def stop(self) -> None:
        """Request the loop to finish at its next check."""
        if self._is_running:
            logging.info("Stop requested for mount monitoring")
        self._is_running = False

    async def run(self) -> None:
        """
        Run monitoring cycles until stop() is called.

        Raises:
            MountTimeoutError: Interactive mode only, when the mounts do not
                become active within the timeout.
        """
        self._is_running = True
        self._reporter.step("Starting mount monitoring process...")
        logging.info(f"Starting mount monitoring for: {' '.join(self._config.mount_points)}")
        logging.info(f"Managing containers: {' '.join(self._config.container_ids)}")
        logging.info(f"Timeout set to {self._config.timeout_seconds} seconds")

        try:
            while self._is_running:
                await self._run_cycle()
        finally:
            self._is_running = False
            self._state_machine.transition(MonitorState.STOPPED)

    async def _run_cycle(self) -> None:
        self._cycle_count += 1
        report = CycleReport(cycle=self._cycle_count)
        self._cycles.append(report)

        self._state_machine.transition(MonitorState.WAITING)
        all_active = await self._wait_for_mounts(report)
        if not self._is_running:
            return

        if not all_active:
            await self._handle_timeout(report)
            return

        self._state_machine.transition(MonitorState.RESTARTING)
        report.outcome = MonitorState.RESTARTING
        log_success("All required mounts are now available")
        self._reporter.success("All mounts detected! Processing containers...")

        report.failed_containers = await self._controller.restart_all(
            self._config.container_ids
        )
        if report.failed_containers:
            logging.warning(
                f"Container restart cycle {report.cycle} completed with errors: "
                f"{' '.join(report.failed_containers)}"
            )
        else:
            log_success(f"Container restart cycle {report.cycle} completed successfully")

        self._state_machine.transition(MonitorState.SURVEILLING)
        report.outcome = MonitorState.SURVEILLING
        await self._surveil()

    async def _wait_for_mounts(self, report: CycleReport) -> bool:
        """Poll until every mount is active (True) or the timeout elapses (False)."""
        self._reporter.step("Waiting for all mounts to become available...")
        timeout = self._config.timeout_seconds
        interval = self._config.check_interval_seconds
        cycle_start = self._clock()

        while self._is_running:
            elapsed = self._clock() - cycle_start
            if elapsed >= timeout:
                return False

            self._reporter.wait_progress(elapsed, timeout - elapsed)

            report.probe_attempts += 1
            status = await self._prober.check_all(self._config.mount_points)
            self._last_status = status
            self._reporter.mount_status(status)
            if all(status.values()):
                return True

            self._reporter.info(f"Mounts not ready. Retrying in {interval} seconds...")
            await self._sleep(interval)

        return False

    async def _handle_timeout(self, report: CycleReport) -> None:
        self._state_machine.transition(MonitorState.TIMED_OUT)
        report.outcome = MonitorState.TIMED_OUT
        timeout = self._config.timeout_seconds

        self._reporter.error(f"TIMEOUT REACHED after {timeout} seconds")
        logging.error(
            f"Timeout reached - required mounts not available after {timeout} seconds"
        )

        if self._config.daemon_mode:
            logging.warning("Daemon mode - restarting monitoring cycle")
            return

        missing = [path for path, mounted in self._last_status.items() if not mounted]
        logging.error("Interactive mode - exiting due to timeout")
        raise MountTimeoutError(timeout, missing)

    async def _surveil(self) -> None:
        """Re-check mounts on a fixed tick until one of them goes away."""
        self._reporter.step("Entering continuous monitoring mode...")
        self._reporter.info(
            f"Continuous monitoring active - checking every {self._surveillance_interval:.0f} seconds"
        )
        logging.info("Continuous monitoring activated")

        last_heartbeat = self._clock()
        while self._is_running:
            await self._sleep(self._surveillance_interval)
            if not self._is_running:
                return

            if not await self._prober.all_mounted(self._config.mount_points):
                self._reporter.warning("One or more mounts have disconnected!")
                logging.warning("Mount disconnection detected")
                self._reporter.info(
                    "Will attempt to restore containers when mounts are available again"
                )
                logging.info("Returning to main monitoring loop")
                return

            now = self._clock()
            if now - last_heartbeat >= self._heartbeat_interval:
                logging.info("Continuous monitoring - all mounts active")
                last_heartbeat = now
