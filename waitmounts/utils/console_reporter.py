"""
Colored console status lines for interactive mode.

Everything here is console-only chatter (steps, progress, summaries); events
worth keeping go through logging instead. A quiet reporter prints nothing,
which is how daemon mode suppresses console output.
"""

from typing import Optional

from rich.console import Console
from rich.rule import Rule

from ..models import MonitorConfig, MountStatus


class ConsoleReporter:
    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console(highlight=False)

    def info(self, message: str) -> None:
        self._print(f"[blue]ℹ️  \\[INFO][/] {message}")

    def success(self, message: str) -> None:
        self._print(f"[green]✅ \\[SUCCESS][/] {message}")

    def warning(self, message: str) -> None:
        self._print(f"[bold yellow]⚠️  \\[WARNING][/] {message}")

    def error(self, message: str) -> None:
        self._print(f"[red]❌ \\[ERROR][/] {message}")

    def step(self, message: str) -> None:
        self._print(f"[magenta]🔧 \\[STEP][/] {message}")

    def header(self) -> None:
        self._print(Rule("[cyan]LXC CONTAINER MOUNT DEPENDENCY MANAGER[/]", style="cyan"))
        self._print("[bold white]Proxmox VE Mount-Aware Container Management Tool[/]")
        self._print("")

    def mount_status(self, status: MountStatus) -> None:
        for path, mounted in status.items():
            state = "[green]ACTIVE[/]" if mounted else "[red]NOT MOUNTED[/]"
            self._print(f"Mount {path}: {state}")

    def wait_progress(self, elapsed: float, remaining: float) -> None:
        self.info(f"Time elapsed: {elapsed:.0f}s | Remaining: {remaining:.0f}s")

    def configuration(self, config: MonitorConfig) -> None:
        self._print("")
        self.info("Current Configuration Summary")
        self._print(Rule(style="blue"))
        self.info(f"Mount Points: {' '.join(config.mount_points)}")
        self.info(f"Containers: {' '.join(config.container_ids)}")
        self.info(f"Timeout: {config.timeout_seconds}s")
        self.info(f"Check Interval: {config.check_interval_seconds}s")
        self.info(f"Log Path: {config.log_path}")
        self.info(f"Mode: {'Daemon' if config.daemon_mode else 'Interactive'}")
        self._print("")

    def _print(self, renderable) -> None:
        if not self.quiet:
            self.console.print(renderable)
