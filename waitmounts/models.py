import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Transient per-poll result: mount path -> active
MountStatus = Dict[str, bool]

_CONTAINER_ID_PATTERN = re.compile(r"^[0-9]+$")


class MonitorState(str, Enum):
    """
    States of the mount dependency monitor.

    Cycle: Idle -> Waiting -> Restarting -> Surveilling -> Waiting ...
    Timeout: Waiting -> TimedOut -> Waiting (daemon) or exit (interactive)
    Any state -> Stopped on shutdown request.
    """

    IDLE = "Idle"  # Monitor created, no cycle started yet
    WAITING = "Waiting"  # Polling until all mounts are active or timeout
    RESTARTING = "Restarting"  # Driving the container controller
    SURVEILLING = "Surveilling"  # All mounts active, periodic re-check
    TIMED_OUT = "TimedOut"  # Mounts did not appear within the timeout
    STOPPED = "Stopped"  # Shutdown requested (signal or stop())


class MonitorConfig(BaseModel):
    """
    Fully resolved monitor configuration.

    Built once at startup from flags, config file, prompts and defaults and
    passed explicitly to every component. Immutable after construction.
    """

    mount_points: Tuple[str, ...] = Field(
        ..., min_length=1, description="Absolute mount paths, in configured order"
    )

    container_ids: Tuple[str, ...] = Field(
        ..., min_length=1, description="Numeric LXC container IDs, in configured order"
    )

    timeout_seconds: int = Field(
        default=300, gt=0, description="Max wait for all mounts per cycle"
    )

    check_interval_seconds: int = Field(
        default=5, gt=0, description="Delay between mount probes while waiting"
    )

    log_path: str = Field(
        default="/var/log/wait-mounts.log", description="Append-only log file"
    )

    daemon_mode: bool = Field(
        default=False, description="Non-interactive, retry forever on timeout"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("mount_points")
    @classmethod
    def _mounts_must_be_absolute(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for path in value:
            if not path.startswith("/"):
                raise ValueError(f"Mount point must be an absolute path: {path}")
        return value

    @field_validator("container_ids")
    @classmethod
    def _ids_must_be_numeric(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for container_id in value:
            if not _CONTAINER_ID_PATTERN.match(container_id):
                raise ValueError(f"Container ID must be numeric: {container_id}")
        return value


class ConfigFileValues(BaseModel):
    """Values read from a key=value config file. Every key is optional."""

    mount_points: Optional[List[str]] = None
    container_ids: Optional[List[str]] = None
    timeout_seconds: Optional[int] = None
    check_interval_seconds: Optional[int] = None
    log_path: Optional[str] = None


class ContainerStatus(BaseModel):
    """Container state as reported by the container backend."""

    container_id: str
    exists: bool
    running: bool = False


class ContainerOutcome(BaseModel):
    """Result of a single stop or start attempt."""

    container_id: str
    succeeded: bool
    message: str = ""


class CycleReport(BaseModel):
    """Summary of one monitoring cycle, kept in memory only."""

    cycle: int = Field(..., ge=1)
    started_at: datetime = Field(default_factory=datetime.now)
    probe_attempts: int = 0
    outcome: MonitorState = MonitorState.WAITING
    failed_containers: List[str] = Field(default_factory=list)
