"""
Mount Prober Module

Components:
- BaseMountProber: Interface with the aggregate all_mounted/check_all checks
- MountpointProber: Linux implementation using `mountpoint -q`
"""

from .base_prober import BaseMountProber
from .mountpoint_prober import MountpointProber

__all__ = ["BaseMountProber", "MountpointProber"]
