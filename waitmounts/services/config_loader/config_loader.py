import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import aiofiles.os
from pydantic import ValidationError

from .config_file import read_config_file
from .prompter import InteractivePrompter
from ..container_control import ContainerBackend
from ...config import Settings
from ...core.exceptions import ConfigurationError, ContainerOperationError
from ...models import ConfigFileValues, MonitorConfig
from ...utils.console_reporter import ConsoleReporter

_CONTAINER_ID_PATTERN = re.compile(r"^[0-9]+$")


@dataclass
class CliOptions:
    """Values given on the command line. None means 'not given'."""

    mounts: Optional[List[str]] = None
    containers: Optional[List[str]] = None
    timeout: Optional[int] = None
    interval: Optional[int] = None
    log_path: Optional[str] = None
    config_file: Optional[str] = None
    daemon: bool = False
    save_config: Optional[str] = None
    verbose: bool = False

    @property
    def interactive(self) -> bool:
        """Prompts are only used when nothing identifies the mounts/containers."""
        return not (
            self.daemon
            or self.mounts is not None
            or self.containers is not None
            or self.config_file is not None
        )


def _first_given(*candidates):
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _first_non_empty(*candidates) -> List[str]:
    for candidate in candidates:
        if candidate:
            return list(candidate)
    return []


class ConfigurationLoader:
    """
    Resolves a MonitorConfig.

    Precedence: command line flags > config file > interactive prompts > defaults.
    """

    def __init__(
        self,
        settings: Settings,
        backend: ContainerBackend,
        prompter: Optional[InteractivePrompter] = None,
        reporter: Optional[ConsoleReporter] = None,
    ):
        self._settings = settings
        self._backend = backend
        self._prompter = prompter
        self._reporter = reporter or ConsoleReporter(quiet=True)

    async def load(self, options: CliOptions) -> MonitorConfig:
        file_values = await self._load_file_values(options)

        prompted = ConfigFileValues()
        if options.interactive and self._prompter:
            prompted = await self._prompt_for_missing(options, file_values)

        mount_points = _first_non_empty(
            options.mounts, file_values.mount_points, prompted.mount_points
        )
        container_ids = _first_non_empty(
            options.containers, file_values.container_ids, prompted.container_ids
        )

        if not mount_points:
            raise ConfigurationError("No mount points specified")
        if not container_ids:
            raise ConfigurationError("No container IDs specified")

        try:
            config = MonitorConfig(
                mount_points=mount_points,
                container_ids=container_ids,
                timeout_seconds=_first_given(
                    options.timeout,
                    file_values.timeout_seconds,
                    prompted.timeout_seconds,
                    self._settings.default_timeout_seconds,
                ),
                check_interval_seconds=_first_given(
                    options.interval,
                    file_values.check_interval_seconds,
                    prompted.check_interval_seconds,
                    self._settings.default_check_interval_seconds,
                ),
                log_path=_first_given(
                    options.log_path,
                    file_values.log_path,
                    prompted.log_path,
                    self._settings.default_log_path,
                ),
                daemon_mode=options.daemon,
            )
        except ValidationError as e:
            raise ConfigurationError(self._format_validation_error(e))

        await self._warn_missing_mount_directories(config.mount_points)
        await self._validate_containers(config.container_ids)
        self._ensure_log_directory(config.log_path)

        return config

    async def validate_mount_point(self, path: str) -> Optional[str]:
        """Return an error message for an unusable mount path, else None."""
        if not path.startswith("/"):
            return f"Mount point must be an absolute path: {path}"
        await self._warn_missing_mount_directories([path])
        return None

    async def validate_container_id(self, container_id: str) -> Optional[str]:
        """Return an error message for an unusable container id, else None."""
        if not _CONTAINER_ID_PATTERN.match(container_id):
            return f"Container ID must be numeric: {container_id}"

        try:
            status = await self._backend.status(container_id)
        except ContainerOperationError as e:
            return f"Cannot query container {container_id}: {e.reason}"

        if not status.exists:
            return f"Container with ID {container_id} does not exist"
        return None

    async def _load_file_values(self, options: CliOptions) -> ConfigFileValues:
        config_file = options.config_file

        if config_file is None and options.daemon:
            default_path = self._settings.default_config_path
            if await aiofiles.os.path.isfile(default_path):
                logging.info(f"No --config given, using default configuration {default_path}")
                config_file = default_path

        if config_file is None:
            return ConfigFileValues()

        self._reporter.step(f"Loading configuration from: {config_file}")
        values = await read_config_file(config_file)
        self._reporter.success("Configuration loaded successfully")
        return values

    async def _prompt_for_missing(
        self, options: CliOptions, file_values: ConfigFileValues
    ) -> ConfigFileValues:
        prompter = self._prompter
        prompted = {}

        if not (options.mounts or file_values.mount_points):
            prompted["mount_points"] = await prompter.ask_mount_points(
                self.validate_mount_point
            )

        if not (options.containers or file_values.container_ids):
            prompted["container_ids"] = await prompter.ask_container_ids(
                self.validate_container_id
            )

        self._reporter.info("Additional Settings")
        if _first_given(options.timeout, file_values.timeout_seconds) is None:
            prompted["timeout_seconds"] = await prompter.ask_int(
                f"Timeout in seconds (default: {self._settings.default_timeout_seconds})"
            )
        if _first_given(options.interval, file_values.check_interval_seconds) is None:
            prompted["check_interval_seconds"] = await prompter.ask_int(
                f"Check interval in seconds (default: {self._settings.default_check_interval_seconds})"
            )
        if _first_given(options.log_path, file_values.log_path) is None:
            prompted["log_path"] = await prompter.ask_text(
                f"Log file path (default: {self._settings.default_log_path})"
            )

        return ConfigFileValues(**prompted)

    async def _warn_missing_mount_directories(self, mount_points: List[str]) -> None:
        for path in mount_points:
            if not await aiofiles.os.path.isdir(path):
                self._reporter.warning(f"Mount point directory does not exist: {path}")
                self._reporter.info("This might be normal if the mount is not yet active")
                logging.debug(f"Mount point directory does not exist yet: {path}")

    async def _validate_containers(self, container_ids: List[str]) -> None:
        for container_id in container_ids:
            error = await self.validate_container_id(container_id)
            if error:
                raise ConfigurationError(error)

    def _ensure_log_directory(self, log_path: str) -> None:
        try:
            Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot create log directory for {log_path}: {e}")

    @staticmethod
    def _format_validation_error(error: ValidationError) -> str:
        messages = []
        for detail in error.errors():
            field = ".".join(str(part) for part in detail.get("loc", ()))
            message = detail.get("msg", "invalid value").removeprefix("Value error, ")
            messages.append(f"{field}: {message}" if field else message)
        return "Invalid configuration: " + "; ".join(messages)
