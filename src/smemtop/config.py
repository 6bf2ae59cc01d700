"""Configuration system for smemtop."""

from dataclasses import dataclass
from pathlib import Path

import tomlkit

from smemtop.models import DEFAULT_SORT_KEY, SortKey

MIN_REFRESH_INTERVAL = 0.1  # Seconds; shared with the --interval option
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class Config:
    """Main configuration container."""

    proc_root: Path = Path("/proc")
    refresh_interval: float = 1.0  # Seconds between rescans
    sort_key: SortKey = DEFAULT_SORT_KEY
    # Log file rotation
    log_max_bytes: int = 1024 * 1024  # Max log file size (1MB)
    log_backup_count: int = 2  # Number of backup log files to keep
    log_level: str = "info"  # One of LOG_LEVELS; "debug" records skipped processes

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "smemtop"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory for the log file."""
        return Path.home() / ".local" / "state" / "smemtop"

    @property
    def log_path(self) -> Path:
        """Diagnostic log path."""
        return self.state_dir / "smemtop.log"

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values."""
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        sort_value = data.get("sort_key", defaults.sort_key.value)
        try:
            sort_key = SortKey(sort_value)
        except (TypeError, ValueError) as e:
            valid = [key.value for key in SortKey]
            raise ValueError(f"Invalid sort_key: {sort_value!r}. Must be one of {valid}") from e

        log_level = data.get("log_level", defaults.log_level)
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {log_level!r}. Must be one of {list(LOG_LEVELS)}")

        try:
            refresh_interval = float(data.get("refresh_interval", defaults.refresh_interval))
            log_max_bytes = int(data.get("log_max_bytes", defaults.log_max_bytes))
            log_backup_count = int(data.get("log_backup_count", defaults.log_backup_count))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value in config file {path}: {e}") from e

        if refresh_interval < MIN_REFRESH_INTERVAL:
            raise ValueError(
                f"refresh_interval must be >= {MIN_REFRESH_INTERVAL}, got {refresh_interval}"
            )

        return cls(
            proc_root=Path(str(data.get("proc_root", defaults.proc_root))),
            refresh_interval=refresh_interval,
            sort_key=sort_key,
            log_max_bytes=log_max_bytes,
            log_backup_count=log_backup_count,
            log_level=str(log_level),
        )
