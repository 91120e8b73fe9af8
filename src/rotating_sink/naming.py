"""
Backup file naming: timestamped names for rotated log files
"""

import os
from datetime import datetime
from typing import Optional, Tuple

from .clock import Clock
from .errors import BackupNameMismatch

# Fixed width and filesystem safe; sorts lexicographically in time order
BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S"
COMPRESS_SUFFIX = ".gz"


def split_name(filename: str, ext: Optional[str] = None) -> Tuple[str, str]:
    """Return the backup prefix (base name plus ``-``) and extension"""
    base = os.path.basename(filename)
    if ext is None:
        ext = os.path.splitext(base)[1]
    stem = base[: len(base) - len(ext)] if ext else base
    return f"{stem}-", ext


def backup_name(path: str, timestamp: datetime, ext: Optional[str] = None) -> str:
    """
    Build the backup path for ``path`` rotated at ``timestamp``.

    The timestamp goes between the base name and the extension, so
    ``/var/log/app.log`` becomes ``/var/log/app-2016-11-04T18-30-00.log``.
    """
    directory = os.path.dirname(path)
    prefix, ext = split_name(path, ext)
    return os.path.join(
        directory, f"{prefix}{timestamp.strftime(BACKUP_TIME_FORMAT)}{ext}"
    )


def parse_backup_time(
    filename: str, prefix: str, ext: str, clock: Optional[Clock] = None
) -> datetime:
    """
    Extract the rotation time from a backup filename.

    Stripping the prefix and extension first keeps the rest of the name from
    confusing the parser. Raises BackupNameMismatch for anything that is not
    ``prefix + timestamp + ext``.
    """
    if not filename.startswith(prefix):
        raise BackupNameMismatch("mismatched prefix")
    if not filename.endswith(ext):
        raise BackupNameMismatch("mismatched extension")

    stamp = filename[len(prefix) : len(filename) - len(ext)]
    try:
        parsed = datetime.strptime(stamp, BACKUP_TIME_FORMAT)
    except ValueError as e:
        raise BackupNameMismatch(f"invalid backup timestamp {stamp!r}") from e

    return (clock or Clock()).localize(parsed)


def backup_time(
    filename: str, prefix: str, ext: str, clock: Optional[Clock] = None
) -> Optional[datetime]:
    """Rotation time of a plain or compressed backup, None for other files"""
    for candidate_ext in (ext, ext + COMPRESS_SUFFIX):
        try:
            return parse_backup_time(filename, prefix, candidate_ext, clock)
        except BackupNameMismatch:
            continue
    return None
