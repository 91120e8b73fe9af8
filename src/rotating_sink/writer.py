"""
Rotating log writer: an append-only byte sink that rolls its file by size
and calendar day and prunes old backups in the background
"""

import logging
import os
import queue
import threading
from datetime import datetime
from typing import Optional

from .clock import Clock
from .compression import copy_ownership
from .config import RotatingLogConfig, get_default_config
from .errors import RotationError, WriteTooLargeError
from .naming import backup_name, split_name
from .reconcile import last_entry_time
from .retention import RetentionPolicy, RetentionSweeper, SweepReport

logger = logging.getLogger(__name__)


class RotatingLogWriter:
    """
    Writes bytes to ``<directory>/<name><extension>``, rotating it as needed.

    The file is opened on the first write. If it already exists and the write
    fits, it is appended to; otherwise it is renamed to a timestamped backup
    (``<name>-<timestamp><extension>``) and a new file is created. A write
    that would push the file past ``max_size`` rotates first, and with
    ``split_days`` set the file is also rotated after that many calendar-day
    boundaries.

    After every rotation a retention sweep is queued for a background thread,
    which deletes backups over the count or age limit and compresses the rest
    when configured. Writes never wait for a sweep.

    Only one process may write to a given file.
    """

    def __init__(
        self,
        config: Optional[RotatingLogConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or get_default_config()
        self.clock = clock or Clock(local=self.config.local_time)

        self.filename = self.config.filename
        self.directory = os.path.dirname(self.filename)
        self.prefix, self.ext = split_name(self.filename, self.config.extension)

        # Current state
        self._lock = threading.Lock()
        self._file = None
        self._size = 0
        self._split_day_count = 0
        self._current_day = self.clock.now().date()
        self._rotation_requested = False

        self._sweeper = RetentionSweeper(
            self.directory,
            self.prefix,
            self.ext,
            RetentionPolicy(
                max_backups=self.config.max_backups,
                max_age=self.config.max_age,
                compress=self.config.compress,
            ),
            clock=self.clock,
            compresslevel=self.config.compresslevel,
        )

        # Single slot: a request made while one is pending is dropped
        self._sweep_queue: "queue.Queue[bool]" = queue.Queue(maxsize=1)
        self._sweep_thread: Optional[threading.Thread] = None
        self._sweep_start_lock = threading.Lock()

        if self.config.reconcile_on_startup:
            self.reconcile()

    @property
    def max_size(self) -> int:
        return self.config.effective_max_size

    @property
    def size(self) -> int:
        """Bytes written to the active file"""
        return self._size

    @property
    def closed(self) -> bool:
        return self._file is None

    def writable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:
        """
        Write ``data`` to the active file and return the number of bytes
        written, rotating first if the write would not fit.

        Raises WriteTooLargeError if ``data`` can never fit in one file.
        """
        if isinstance(data, str):
            raise TypeError("write() argument must be bytes-like, not str")

        with self._lock:
            length = len(data)
            if length > self.max_size:
                raise WriteTooLargeError(length, self.max_size)

            if self._file is None:
                self._open_existing_or_new(length)

            if self._rotation_requested:
                self._rotation_requested = False
                if self._size > 0:
                    self._rotate()

            if self.config.split_days > 0 and self._crossed_day_boundary():
                self._split_day_count += 1
                if self._split_day_count >= self.config.split_days:
                    self._split_day_count = 0
                    self._rotate(day_split=True)

            if self._size + length > self.max_size:
                self._rotate()

            written = self._file.write(data) or 0
            self._size += written
            return written

    def flush(self) -> None:
        """Flush the active file (writes are unbuffered)"""
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        """Close the active file; pending background sweeps keep running"""
        with self._lock:
            self._close_file()

    def rotate(self) -> None:
        """
        Roll the active file over now, e.g. on an administrative request.

        Same as an automatic rotation: the current file becomes a backup, a new
        file is created and a retention sweep is queued.
        """
        with self._lock:
            self._rotate()

    def request_rotation(self) -> None:
        """
        Ask for a rotation before the next write.

        Takes no lock, so it is safe to call from a signal handler that may
        interrupt a write in progress.
        """
        self._rotation_requested = True

    def sweep(self) -> SweepReport:
        """Run a retention sweep in the calling thread, raising its first error"""
        report = self._sweeper.sweep()
        report.raise_first()
        return report

    def wait_for_sweeps(self) -> None:
        """Block until every queued background sweep has finished"""
        self._sweep_queue.join()

    def reconcile(self) -> Optional[str]:
        """
        Finalize a log file left over from a previous day.

        If the last entry of the existing file is from before today, the file
        is renamed to a backup named after that entry's time and a retention
        sweep runs. Returns the backup path, or None when nothing was done,
        including when the last line has no recognizable timestamp.
        """
        time_format = self.config.log_time_format
        if not time_format or not os.path.isfile(self.filename):
            return None

        try:
            last_time = last_entry_time(self.filename, time_format, self.clock)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise RotationError(f"can't read log file: {e}") from e

        if last_time is None:
            logger.debug(
                "No %r timestamp at the end of %s, not reconciling",
                time_format,
                self.filename,
            )
            return None
        if last_time > self.clock.end_of_previous_day():
            return None

        target = backup_name(self.filename, last_time, self.ext)
        with self._lock:
            self._close_file()
            try:
                os.rename(self.filename, target)
            except OSError as e:
                raise RotationError(f"can't rename log file: {e}") from e

        logger.debug("Moved log from a previous day to %s", target)
        self._log_sweep_errors(self._sweeper.sweep())
        return target

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # The methods below expect self._lock to be held

    def _crossed_day_boundary(self) -> bool:
        today = self.clock.now().date()
        if today <= self._current_day:
            return False
        self._current_day = today
        return True

    def _close_file(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        f.close()

    def _rotate(self, day_split: bool = False) -> None:
        self._close_file()
        self._open_new(day_split)
        self._request_sweep()

    def _open_existing_or_new(self, write_len: int) -> None:
        # Also picks up stale backups from an earlier run
        self._request_sweep()

        try:
            st = os.stat(self.filename)
        except FileNotFoundError:
            self._open_new()
            return
        except OSError as e:
            raise RotationError(f"error getting log file info: {e}") from e

        if st.st_size + write_len >= self.max_size:
            self._rotate()
            return

        try:
            self._file = open(self.filename, "ab", buffering=0)
        except OSError:
            # Can't reuse the old file; start a fresh one instead
            self._open_new()
            return
        self._size = st.st_size

    def _backup_time(self, day_split: bool) -> datetime:
        if day_split:
            # The file holds the previous day's entries
            return self.clock.end_of_previous_day()
        return self.clock.now()

    def _open_new(self, day_split: bool = False) -> None:
        try:
            os.makedirs(self.directory or ".", exist_ok=True)
        except OSError as e:
            raise RotationError(f"can't make directories for new logfile: {e}") from e

        mode = 0o600
        try:
            old = os.stat(self.filename)
        except FileNotFoundError:
            old = None
        except OSError as e:
            raise RotationError(f"error getting log file info: {e}") from e

        if old is not None:
            mode = old.st_mode & 0o7777
            target = backup_name(self.filename, self._backup_time(day_split), self.ext)
            try:
                os.rename(self.filename, target)
            except OSError as e:
                raise RotationError(f"can't rename log file: {e}") from e

        try:
            # Truncate in case someone recreated the file after our rename
            fd = os.open(self.filename, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, mode)
        except OSError as e:
            raise RotationError(f"can't open new logfile: {e}") from e
        self._file = open(fd, "wb", buffering=0)
        self._size = 0
        # A fresh file starts on the current day
        self._current_day = self.clock.now().date()

        if old is not None:
            try:
                os.chmod(self.filename, mode)
                copy_ownership(self.filename, old)
            except OSError as e:
                raise RotationError(f"can't copy log file permissions: {e}") from e

    def _request_sweep(self) -> None:
        with self._sweep_start_lock:
            if self._sweep_thread is None:
                self._sweep_thread = threading.Thread(
                    target=self._sweep_worker, daemon=True, name="rotating-sink-sweep"
                )
                self._sweep_thread.start()

        try:
            self._sweep_queue.put_nowait(True)
        except queue.Full:
            pass  # a sweep is already pending

    def _sweep_worker(self) -> None:
        """Background worker that runs queued retention sweeps"""
        while True:
            self._sweep_queue.get()
            try:
                self._log_sweep_errors(self._sweeper.sweep())
            except Exception:
                logger.exception("Retention sweep crashed for %s", self.filename)
            finally:
                self._sweep_queue.task_done()

    def _log_sweep_errors(self, report: SweepReport) -> None:
        for error in report.errors:
            logger.warning("Retention sweep error for %s: %s", self.filename, error)
