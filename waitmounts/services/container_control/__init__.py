"""
Container Control Module

Components:
- ContainerBackend: Abstract status/stop/start interface
- PctBackend: Proxmox VE implementation via `pct`
- ContainerController: Best-effort stop/start/restart of configured containers
"""

from .base_backend import ContainerBackend
from .pct_backend import PctBackend
from .container_controller import ContainerController

__all__ = ["ContainerBackend", "PctBackend", "ContainerController"]
