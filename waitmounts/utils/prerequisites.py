"""
Host prerequisite checks.

The monitor drives Proxmox containers, so it must run as root on a host that
has `pct` and `mountpoint` available.
"""

import logging
import os
import shutil
from typing import List

from ..config import Settings
from ..core.exceptions import PrerequisiteError


def find_missing_commands(commands: List[str]) -> List[str]:
    return [command for command in commands if shutil.which(command) is None]


def check_prerequisites(settings: Settings) -> None:
    """
    Raises:
        PrerequisiteError: Not root, not a Proxmox VE host, or commands missing.
    """
    if settings.require_root and os.geteuid() != 0:
        raise PrerequisiteError("This script must be run as root")

    if shutil.which(settings.pct_binary) is None:
        raise PrerequisiteError(
            f"This script must be run on a Proxmox VE host "
            f"(the '{settings.pct_binary}' command is not available)"
        )

    missing = find_missing_commands([settings.mountpoint_binary, settings.pct_binary])
    if missing:
        raise PrerequisiteError(
            f"Missing required commands: {' '.join(missing)}. "
            f"Please install the necessary packages and try again"
        )

    logging.debug("Prerequisites check passed")
