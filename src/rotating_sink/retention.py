"""
Retention sweep: prune and compress rotated backups
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from .clock import Clock
from .compression import compress_log_file
from .errors import RotatingLogError
from .naming import COMPRESS_SUFFIX, backup_time

logger = logging.getLogger(__name__)


@dataclass
class BackupFile:
    """A rotated log file found in the log directory"""

    timestamp: datetime
    name: str
    path: str
    size: int = 0
    mode: int = 0
    mtime: float = 0.0

    @property
    def compressed(self) -> bool:
        return self.name.endswith(COMPRESS_SUFFIX)

    @property
    def logical_name(self) -> str:
        """Name shared by a backup and its compressed counterpart"""
        if self.compressed:
            return self.name[: -len(COMPRESS_SUFFIX)]
        return self.name


@dataclass
class RetentionPolicy:
    """Which backups to keep, delete and compress"""

    max_backups: int = 0  # 0 keeps any number
    max_age: timedelta = timedelta(0)  # zero keeps any age
    compress: bool = False

    @property
    def enabled(self) -> bool:
        return bool(self.max_backups or self.max_age or self.compress)


@dataclass
class SweepReport:
    """Outcome of one retention sweep"""

    removed: List[str] = field(default_factory=list)
    compressed: List[str] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    @property
    def first_error(self) -> Optional[Exception]:
        return self.errors[0] if self.errors else None

    def raise_first(self) -> None:
        if self.errors:
            raise self.errors[0]


def list_backups(
    directory: str, prefix: str, ext: str, clock: Optional[Clock] = None
) -> List[BackupFile]:
    """Backups in ``directory``, newest rotation time first"""
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        raise RotatingLogError(f"can't read log file directory: {e}") from e

    backups = []
    for entry in entries:
        if not entry.is_file():
            continue
        timestamp = backup_time(entry.name, prefix, ext, clock)
        if timestamp is None:
            # Not a name we generated
            continue
        try:
            st = entry.stat()
        except FileNotFoundError:
            continue
        backups.append(
            BackupFile(
                timestamp=timestamp,
                name=entry.name,
                path=entry.path,
                size=st.st_size,
                mode=st.st_mode,
                mtime=st.st_mtime,
            )
        )

    backups.sort(key=lambda b: b.timestamp, reverse=True)
    return backups


def plan_retention(
    files: List[BackupFile], policy: RetentionPolicy, now: datetime
) -> Tuple[List[BackupFile], List[BackupFile]]:
    """
    Split newest-first ``files`` into (remove, compress) lists.

    The count limit is applied first, counting a backup and its compressed
    counterpart once. The age limit then removes anything older than
    ``now - max_age`` regardless of count. Survivors not yet compressed are
    compressed when the policy asks for it.
    """
    remove: List[BackupFile] = []
    compress: List[BackupFile] = []

    if policy.max_backups > 0:
        preserved = set()
        remaining = []
        for f in files:
            preserved.add(f.logical_name)
            if len(preserved) > policy.max_backups:
                remove.append(f)
            else:
                remaining.append(f)
        files = remaining

    if policy.max_age:
        cutoff = int((now - policy.max_age).timestamp())
        remaining = []
        for f in files:
            if int(f.timestamp.timestamp()) < cutoff:
                remove.append(f)
            else:
                remaining.append(f)
        files = remaining

    if policy.compress:
        compress = [f for f in files if not f.compressed]

    return remove, compress


class RetentionSweeper:
    """Applies a RetentionPolicy to the backups of one log file"""

    def __init__(
        self,
        directory: str,
        prefix: str,
        ext: str,
        policy: RetentionPolicy,
        clock: Optional[Clock] = None,
        compresslevel: int = 9,
    ):
        self.directory = directory
        self.prefix = prefix
        self.ext = ext
        self.policy = policy
        self.clock = clock or Clock()
        self.compresslevel = compresslevel

    def backups(self) -> List[BackupFile]:
        return list_backups(self.directory, self.prefix, self.ext, self.clock)

    def sweep(self) -> SweepReport:
        """
        Delete and compress backups according to the policy.

        Deletions run before compressions. A failure on one file does not stop
        the others; every error is collected in the report.
        """
        report = SweepReport()
        if not self.policy.enabled:
            return report

        try:
            files = self.backups()
        except RotatingLogError as e:
            report.errors.append(e)
            return report

        remove, compress = plan_retention(files, self.policy, self.clock.now())

        for f in remove:
            try:
                os.remove(f.path)
            except FileNotFoundError:
                continue
            except OSError as e:
                report.errors.append(e)
            else:
                report.removed.append(f.name)

        for f in compress:
            try:
                compress_log_file(
                    f.path, f.path + COMPRESS_SUFFIX, compresslevel=self.compresslevel
                )
            except RotatingLogError as e:
                report.errors.append(e)
            else:
                report.compressed.append(f.name)

        if report.removed or report.compressed:
            logger.debug(
                "Retention sweep in %s removed %d and compressed %d backups",
                self.directory,
                len(report.removed),
                len(report.compressed),
            )
        return report
