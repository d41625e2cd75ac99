"""
Key=value configuration file support.

    # Lines starting with # are comments
    MOUNT_POINTS=("/mnt/nfs" "/mnt/cifs")      or  MOUNT_POINTS="/mnt/nfs,/mnt/cifs"
    CONTAINERS="101,102,103"
    TIMEOUT=300
    CHECK_INTERVAL=5
    LOG_PATH="/var/log/wait-mounts.log"

Unknown keys are ignored.
"""

import logging
import shlex
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import aiofiles
import aiofiles.os

from ...core.exceptions import ConfigurationError
from ...models import ConfigFileValues, MonitorConfig

_LIST_KEYS = {"MOUNT_POINTS": "mount_points", "CONTAINERS": "container_ids"}
_INT_KEYS = {"TIMEOUT": "timeout_seconds", "CHECK_INTERVAL": "check_interval_seconds"}
_STR_KEYS = {"LOG_PATH": "log_path"}


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def split_list_value(value: str) -> List[str]:
    """
    Parse a list value in either bash array or comma-separated form.

    '("/mnt/a" "/mnt/b")', '("/mnt/a","/mnt/b")' and '"/mnt/a,/mnt/b"' all
    give ['/mnt/a', '/mnt/b'].
    """
    value = value.strip()
    if value.startswith("(") and value.endswith(")"):
        try:
            tokens = shlex.split(value[1:-1])
        except ValueError as e:
            raise ConfigurationError(f"Malformed array value {value!r}: {e}")
        return [
            item.strip() for token in tokens for item in token.split(",") if item.strip()
        ]

    return [item.strip() for item in _unquote(value).split(",") if item.strip()]


def parse_config_text(text: str, source: str = "<config>") -> ConfigFileValues:
    values = {}

    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, separator, value = line.partition("=")
        if not separator:
            logging.debug(f"{source}:{line_number}: ignoring line without '='")
            continue

        key = key.strip()
        value = value.strip()

        if key in _LIST_KEYS:
            values[_LIST_KEYS[key]] = split_list_value(value)
        elif key in _INT_KEYS:
            try:
                values[_INT_KEYS[key]] = int(_unquote(value))
            except ValueError:
                raise ConfigurationError(
                    f"{source}:{line_number}: {key} must be an integer, got {value!r}"
                )
        elif key in _STR_KEYS:
            values[_STR_KEYS[key]] = _unquote(value)
        else:
            logging.debug(f"{source}:{line_number}: ignoring unknown key {key}")

    return ConfigFileValues(**values)


async def read_config_file(path: str) -> ConfigFileValues:
    """Load and parse a config file. A missing file is a configuration error."""
    if not await aiofiles.os.path.isfile(path):
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            text = await f.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}")

    return parse_config_text(text, source=path)


def render_config(config: MonitorConfig, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    mounts = " ".join(f'"{path}"' for path in config.mount_points)
    return "\n".join(
        [
            "# Wait-Mounts Configuration File",
            f"# Generated on {generated_at:%Y-%m-%d %H:%M:%S}",
            "",
            "# Mount points to monitor (space-separated, quoted)",
            f"MOUNT_POINTS=({mounts})",
            "",
            "# Container IDs to restart after mounts are ready (comma-separated)",
            f'CONTAINERS="{",".join(config.container_ids)}"',
            "",
            "# Timeout in seconds",
            f"TIMEOUT={config.timeout_seconds}",
            "",
            "# Check interval in seconds",
            f"CHECK_INTERVAL={config.check_interval_seconds}",
            "",
            "# Log file",
            f'LOG_PATH="{config.log_path}"',
            "",
        ]
    )


async def write_config_file(config: MonitorConfig, path: str) -> None:
    """Write the resolved configuration so it can be reused with --config."""
    try:
        await aiofiles.os.makedirs(str(Path(path).parent), exist_ok=True)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(render_config(config))
    except OSError as e:
        raise ConfigurationError(f"Cannot write configuration file {path}: {e}")

    logging.info(f"Configuration written to {path}")
