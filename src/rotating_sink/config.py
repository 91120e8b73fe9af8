"""
Configuration for the rotating log sink
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

# Never rotate on size unless a limit is configured (1 PiB)
DEFAULT_MAX_SIZE = 1024**5


@dataclass
class RotatingLogConfig:
    """Configuration for a rotating log writer"""

    # File location: <directory>/<name><extension>
    directory: str = ""
    name: str = ""
    extension: str = ".log"

    # Rotation settings
    max_size: int = 0  # bytes, 0 means DEFAULT_MAX_SIZE
    split_days: int = 0  # day boundaries per rotation, 0 disables

    # Retention settings
    max_backups: int = 0  # 0 keeps any number
    max_age_days: float = 0  # 0 keeps any age
    compress: bool = False
    compresslevel: int = 9

    # Timestamps
    local_time: bool = False
    log_time_format: Optional[str] = "%Y-%m-%d %H:%M:%S"  # leading time of a log line
    reconcile_on_startup: bool = True

    def __post_init__(self):
        """Validate configuration values"""
        if self.max_size < 0:
            raise ValueError("max_size must not be negative")
        if self.split_days < 0:
            raise ValueError("split_days must not be negative")
        if self.max_backups < 0:
            raise ValueError("max_backups must not be negative")
        if self.max_age_days < 0:
            raise ValueError("max_age_days must not be negative")
        if not 0 <= self.compresslevel <= 9:
            raise ValueError("compresslevel must be between 0 and 9")

    @property
    def filename(self) -> str:
        """Full path of the active log file"""
        directory = self.directory or tempfile.gettempdir()
        name = self.name or f"{os.path.basename(sys.argv[0]) or 'python'}-rotating"
        return os.path.join(directory, name + self.extension)

    @property
    def effective_max_size(self) -> int:
        return self.max_size or DEFAULT_MAX_SIZE

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls) -> "RotatingLogConfig":
        """Create configuration from environment variables"""
        return cls(
            directory=os.getenv("ROTATING_LOG_DIR", ""),
            name=os.getenv("ROTATING_LOG_NAME", ""),
            extension=os.getenv("ROTATING_LOG_EXT", ".log"),
            max_size=int(os.getenv("ROTATING_LOG_MAX_SIZE", "0")),
            split_days=int(os.getenv("ROTATING_LOG_SPLIT_DAYS", "0")),
            max_backups=int(os.getenv("ROTATING_LOG_MAX_BACKUPS", "0")),
            max_age_days=float(os.getenv("ROTATING_LOG_MAX_AGE_DAYS", "0")),
            compress=cls._parse_bool_env("ROTATING_LOG_COMPRESS"),
            compresslevel=int(os.getenv("ROTATING_LOG_COMPRESS_LEVEL", "9")),
            local_time=cls._parse_bool_env("ROTATING_LOG_LOCAL_TIME"),
            log_time_format=os.getenv("ROTATING_LOG_TIME_FORMAT", "%Y-%m-%d %H:%M:%S"),
            reconcile_on_startup=cls._parse_bool_env("ROTATING_LOG_RECONCILE", "true"),
        )


_default_config: Optional[RotatingLogConfig] = None


def get_default_config() -> RotatingLogConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = RotatingLogConfig.from_env()
    return _default_config


def set_default_config(config: RotatingLogConfig) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config
