"""
Exceptions raised by the rotating log sink
"""


class RotatingLogError(Exception):
    """Base class for rotating log sink errors"""


class WriteTooLargeError(RotatingLogError, ValueError):
    """A single write is larger than the maximum file size"""

    def __init__(self, length: int, max_size: int):
        super().__init__(
            f"write length {length} exceeds maximum file size {max_size}"
        )
        self.length = length
        self.max_size = max_size


class BackupNameMismatch(RotatingLogError, ValueError):
    """A filename is not one of our backups"""


class RotationError(RotatingLogError, OSError):
    """Filesystem failure while rotating the active log file"""


class CompressionError(RotatingLogError, OSError):
    """Filesystem or encoding failure while compressing a backup"""
