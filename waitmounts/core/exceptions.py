# waitmounts/core/exceptions.py


class WaitMountsError(Exception):
    """Base class for all wait-mounts errors."""


class ConfigurationError(WaitMountsError):
    """Missing or invalid settings. Fatal before monitoring starts."""


class PrerequisiteError(ConfigurationError):
    """Host does not meet the requirements (root, pct, mountpoint)."""


class ProbeError(WaitMountsError):
    """A mount probe could not be performed. Treated as 'not mounted'."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot probe mount {path}: {reason}")


class ContainerOperationError(WaitMountsError):
    """A container backend command could not be executed."""

    def __init__(self, container_id: str, operation: str, reason: str):
        self.container_id = container_id
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Container {container_id}: {operation} failed: {reason}"
        )


class MountTimeoutError(WaitMountsError):
    """Mounts did not become active within the configured timeout."""

    def __init__(self, timeout_seconds: int, missing_mounts: list[str]):
        self.timeout_seconds = timeout_seconds
        self.missing_mounts = missing_mounts
        super().__init__(
            f"Required mounts not available after {timeout_seconds} seconds: "
            f"{', '.join(missing_mounts) or 'unknown'}"
        )


class InvalidTransitionError(WaitMountsError):
    """Raised when a monitor state transition is not allowed."""

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid monitor state transition: "
            f"Cannot move from '{from_state}' to '{to_state}'."
        )
