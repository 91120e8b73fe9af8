"""
Rotating Sink

An append-only byte sink that rotates its log file by size and calendar day,
names backups with a sortable timestamp, and compresses and prunes old
backups in the background.
"""

__version__ = "0.1.0"

from .clock import Clock
from .compression import compress_log_file
from .config import (
    DEFAULT_MAX_SIZE,
    RotatingLogConfig,
    get_default_config,
    set_default_config,
)
from .errors import (
    BackupNameMismatch,
    CompressionError,
    RotatingLogError,
    RotationError,
    WriteTooLargeError,
)
from .handler import RotatingSinkHandler, create_file_logger
from .naming import (
    BACKUP_TIME_FORMAT,
    COMPRESS_SUFFIX,
    backup_name,
    backup_time,
    parse_backup_time,
)
from .retention import (
    BackupFile,
    RetentionPolicy,
    RetentionSweeper,
    SweepReport,
    list_backups,
    plan_retention,
)
from .writer import RotatingLogWriter

__all__ = [
    # Writer
    "RotatingLogWriter",
    "RotatingLogConfig",
    "DEFAULT_MAX_SIZE",
    "get_default_config",
    "set_default_config",
    # Time
    "Clock",
    # Backups
    "BACKUP_TIME_FORMAT",
    "COMPRESS_SUFFIX",
    "backup_name",
    "backup_time",
    "parse_backup_time",
    "compress_log_file",
    # Retention
    "BackupFile",
    "RetentionPolicy",
    "RetentionSweeper",
    "SweepReport",
    "list_backups",
    "plan_retention",
    # Logging integration
    "RotatingSinkHandler",
    "create_file_logger",
    # Errors
    "RotatingLogError",
    "WriteTooLargeError",
    "BackupNameMismatch",
    "RotationError",
    "CompressionError",
]
