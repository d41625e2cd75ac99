import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Settings
from .core.exceptions import ConfigurationError, MountTimeoutError
from .dependencies import get_container_backend, get_mount_prober, get_settings
from .logging_config import setup_logging, teardown_logging
from .services.config_loader import (
    CliOptions,
    ConfigurationLoader,
    InteractivePrompter,
    split_list_value,
    write_config_file,
)
from .services.container_control import ContainerController
from .services.monitor import MountDependencyMonitor, monitor_session
from .utils.console_reporter import ConsoleReporter
from .utils.prerequisites import check_prerequisites

EXAMPLES = """\
examples:
  # Interactive mode
  wait-mounts

  # Command line mode
  wait-mounts --mounts "/mnt/nfs,/mnt/cifs" --containers "101,102"

  # Daemon mode with custom settings
  wait-mounts --daemon --config /etc/wait-mounts.conf --timeout 600 --interval 10

configuration file format:
  # Lines starting with # are comments
  MOUNT_POINTS="/mnt/nfs,/mnt/cifs,/mnt/storage"
  CONTAINERS="101,102,103,104"
  TIMEOUT=300
  CHECK_INTERVAL=5
  LOG_PATH="/var/log/wait-mounts.log"
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Argument errors are configuration errors: show help, exit 1."""

    def error(self, message: str):
        self.print_help(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _list_value(value: str) -> List[str]:
    try:
        return split_list_value(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="wait-mounts",
        description=(
            "Monitor mount points and manage LXC container lifecycle based on mount "
            "availability. Containers are restarted once all their mounts are active."
        ),
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-m", "--mounts", type=_list_value, metavar="PATHS",
        help='Comma-separated mount points to monitor, e.g. "/mnt/nfs,/mnt/cifs"',
    )
    parser.add_argument(
        "-c", "--containers", type=_list_value, metavar="IDS",
        help='Comma-separated container IDs to manage, e.g. "101,102,103"',
    )
    parser.add_argument(
        "-t", "--timeout", type=_positive_int, metavar="SECONDS",
        help=f"Maximum time to wait for mounts (default: {settings.default_timeout_seconds})",
    )
    parser.add_argument(
        "-i", "--interval", type=_positive_int, metavar="SECONDS",
        help=f"Check interval between mount tests (default: {settings.default_check_interval_seconds})",
    )
    parser.add_argument(
        "-l", "--log", dest="log_path", metavar="PATH",
        help=f"Log file path (default: {settings.default_log_path})",
    )
    parser.add_argument(
        "-f", "--config", dest="config_file", metavar="FILE",
        help="Load configuration from file",
    )
    parser.add_argument(
        "-d", "--daemon", action="store_true",
        help="Run in daemon mode (non-interactive, no console output)",
    )
    parser.add_argument(
        "--save-config", metavar="FILE",
        help="Write the resolved configuration to FILE before monitoring",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_cli_options(argv: Optional[List[str]], settings: Settings) -> CliOptions:
    args = build_parser(settings).parse_args(argv)
    return CliOptions(
        mounts=args.mounts,
        containers=args.containers,
        timeout=args.timeout,
        interval=args.interval,
        log_path=args.log_path,
        config_file=args.config_file,
        daemon=args.daemon,
        save_config=args.save_config,
        verbose=args.verbose,
    )


def _log_startup_failure(message: str, options: CliOptions, settings: Settings) -> None:
    """Daemon mode has no console, so startup failures must reach the log file."""
    log_path = options.log_path or settings.default_log_path
    try:
        handlers = setup_logging(log_path, daemon_mode=True, log_level="INFO")
    except OSError:
        return
    logging.error(f"Startup failed: {message}")
    teardown_logging(handlers)


async def run_monitor(
    options: CliOptions, settings: Settings, reporter: ConsoleReporter
) -> int:
    """Resolve configuration, then run the monitor inside a session. Returns the exit code."""
    if not options.daemon:
        reporter.header()

    backend = get_container_backend()
    prompter = InteractivePrompter(reporter) if options.interactive else None

    try:
        reporter.step("Checking prerequisites...")
        check_prerequisites(settings)
        reporter.success("Prerequisites check passed")

        loader = ConfigurationLoader(settings, backend, prompter, reporter)
        config = await loader.load(options)

        if options.save_config:
            await write_config_file(config, options.save_config)
            reporter.success(f"Configuration saved to {options.save_config}")

    except ConfigurationError as e:
        reporter.error(str(e))
        reporter.info("Run 'wait-mounts --help' for usage")
        if options.daemon:
            _log_startup_failure(str(e), options, settings)
        return 1

    if not options.daemon:
        reporter.configuration(config)

    if prompter and not await prompter.confirm_start():
        reporter.info("Operation cancelled by user")
        return 0

    controller = ContainerController(
        backend, restart_delay_seconds=settings.restart_delay_seconds, reporter=reporter
    )
    monitor = MountDependencyMonitor(
        config,
        get_mount_prober(),
        controller,
        reporter=reporter,
        surveillance_interval_seconds=settings.surveillance_interval_seconds,
        heartbeat_interval_seconds=settings.heartbeat_interval_seconds,
    )

    log_level = "DEBUG" if options.verbose else settings.log_level
    try:
        async with monitor_session(config, __version__, log_level) as session:
            reporter.step("Starting mount dependency monitoring...")
            await monitor.run()
    except MountTimeoutError as e:
        reporter.error(str(e))
        reporter.error("Interactive mode: exiting due to timeout")
        return 1
    except Exception as e:
        reporter.error(f"Script terminated with error: {e}")
        return 1

    return session.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    options = parse_cli_options(argv, settings)
    reporter = ConsoleReporter(quiet=options.daemon)

    try:
        return asyncio.run(run_monitor(options, settings, reporter))
    except KeyboardInterrupt:
        reporter.warning("Interrupted")
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
