from functools import lru_cache
from typing import Any, Dict

from .config import Settings
from .services.container_control import ContainerBackend, PctBackend
from .services.mount_prober import BaseMountProber, MountpointProber

# Global singleton instances
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Settings singleton instance."""
    return Settings()


def get_mount_prober() -> BaseMountProber:
    if "mount_prober" not in _singletons:
        settings = get_settings()
        _singletons["mount_prober"] = MountpointProber(
            mountpoint_binary=settings.mountpoint_binary,
            timeout=settings.probe_timeout_seconds,
        )
    return _singletons["mount_prober"]


def get_container_backend() -> ContainerBackend:
    if "container_backend" not in _singletons:
        settings = get_settings()
        _singletons["container_backend"] = PctBackend(
            pct_binary=settings.pct_binary,
            timeout=settings.container_command_timeout_seconds,
        )
    return _singletons["container_backend"]


def reset_singletons() -> None:
    """Reset all singletons (used by tests)."""
    _singletons.clear()
    get_settings.cache_clear()
