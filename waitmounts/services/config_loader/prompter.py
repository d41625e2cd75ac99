"""Interactive prompts used when no mounts/containers/config are given."""

import signal
import threading
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from ...utils.console_reporter import ConsoleReporter

# Returns an error message, or None when the value is acceptable
ValidatorFunc = Callable[[str], Awaitable[Optional[str]]]


@contextmanager
def _interruptible() -> Iterator[None]:
    """
    Make Ctrl+C raise KeyboardInterrupt while blocked reading stdin.

    Under asyncio.run, SIGINT only cancels the main task, which a blocking
    read never observes.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


class InteractivePrompter:
    """
    Rich prompts for interactive configuration.

    Prompts run on the event loop thread; they are only used while the
    configuration is resolved, before monitoring starts.
    """

    def __init__(self, reporter: ConsoleReporter, console: Optional[Console] = None):
        self._reporter = reporter
        self._console = console or reporter.console

    async def ask(self, question: str, default: str = "") -> str:
        with _interruptible():
            answer = Prompt.ask(
                f"[cyan]📝 \\[INPUT][/] {question}",
                console=self._console,
                default=default,
                show_default=False,
            )
        return (answer or "").strip()

    async def ask_mount_points(self, validate: ValidatorFunc) -> List[str]:
        self._reporter.info("Mount Point Configuration")
        self._reporter.info("Enter mount points that containers depend on (one per line)")
        self._reporter.info("Examples: /mnt/nfs, /mnt/cifs, /mnt/storage")
        self._reporter.info("Press Enter on empty line to finish")
        return await self._collect("Mount point path (or Enter to finish)", "mount point", validate)

    async def ask_container_ids(self, validate: ValidatorFunc) -> List[str]:
        self._reporter.info("Container Configuration")
        self._reporter.info("Enter LXC container IDs to manage (one per line)")
        self._reporter.info("These containers will be restarted when mounts become available")
        self._reporter.info("Press Enter on empty line to finish")
        return await self._collect("Container ID (or Enter to finish)", "container", validate)

    async def ask_int(self, question: str) -> Optional[int]:
        """Blank or non-numeric input keeps the default (None)."""
        answer = await self.ask(question)
        if answer.isdigit() and int(answer) > 0:
            return int(answer)
        return None

    async def ask_text(self, question: str) -> Optional[str]:
        answer = await self.ask(question)
        return answer or None

    async def confirm_start(self) -> bool:
        self._reporter.warning("IMPORTANT NOTICE")
        self._reporter.warning(
            "This script will monitor mount points and restart containers automatically"
        )
        self._reporter.warning("Ensure this is the desired behavior before proceeding")
        with _interruptible():
            return Confirm.ask(
                "[cyan]📝 \\[INPUT][/] Proceed with mount monitoring?",
                console=self._console,
                default=False,
            )

    async def _collect(self, question: str, label: str, validate: ValidatorFunc) -> List[str]:
        values: List[str] = []
        while True:
            answer = await self.ask(question)

            if not answer:
                if values:
                    return values
                self._reporter.warning(f"At least one {label} is required")
                continue

            error = await validate(answer)
            if error:
                self._reporter.error(error)
                continue

            values.append(answer)
            self._reporter.success(f"Added {label}: {answer}")
