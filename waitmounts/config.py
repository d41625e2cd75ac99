from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Built-in defaults for values not given by flags, config file or prompts
    default_timeout_seconds: int = 300
    default_check_interval_seconds: int = 5
    default_log_path: str = "/var/log/wait-mounts.log"
    default_config_path: str = "/etc/wait-mounts.conf"

    # Logging
    log_level: str = "INFO"

    # Container handling
    restart_delay_seconds: float = 2.0  # Pause between stop and start of one container
    pct_binary: str = "pct"
    container_command_timeout_seconds: float = 180.0  # pct stop can take a while

    # Mount probing
    mountpoint_binary: str = "mountpoint"
    probe_timeout_seconds: float = 10.0  # Hung NFS mounts must not block the loop

    # Surveillance once all mounts are active
    surveillance_interval_seconds: int = 60
    heartbeat_interval_seconds: int = 600  # Log "all mounts active" every 10 minutes

    # Startup checks
    require_root: bool = True

    model_config = SettingsConfigDict(
        env_prefix="WAIT_MOUNTS_", env_file="wait-mounts.env", extra="ignore"
    )

    @property
    def default_log_directory(self) -> Path:
        """Directory holding the default log file."""
        return Path(self.default_log_path).parent
