"""
Gzip compression of rotated log files
"""

import gzip
import os
import shutil

from .errors import CompressionError


def copy_ownership(path: str, st: os.stat_result) -> None:
    """Give ``path`` the owner and group recorded in ``st`` (POSIX only)"""
    if not hasattr(os, "chown"):
        return
    current = os.stat(path)
    if (current.st_uid, current.st_gid) != (st.st_uid, st.st_gid):
        os.chown(path, st.st_uid, st.st_gid)


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def compress_log_file(src: str, dst: str, compresslevel: int = 9) -> None:
    """
    Compress ``src`` into ``dst`` and remove ``src`` on success.

    The compressed file gets the source's permission mode and owner. If any
    step fails the partial ``dst`` is deleted, ``src`` is left alone and
    CompressionError is raised.
    """
    try:
        f_in = open(src, "rb")
    except OSError as e:
        raise CompressionError(f"failed to open log file: {e}") from e

    with f_in:
        try:
            st = os.fstat(f_in.fileno())
        except OSError as e:
            raise CompressionError(f"failed to stat log file: {e}") from e

        mode = st.st_mode & 0o7777
        try:
            # An existing dst is left over from an earlier interrupted attempt
            fd = os.open(dst, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, mode)
        except OSError as e:
            raise CompressionError(f"failed to open compressed log file: {e}") from e

        try:
            with open(fd, "wb") as raw:
                os.chmod(dst, mode)
                copy_ownership(dst, st)
                with gzip.GzipFile(
                    filename="", mode="wb", fileobj=raw, compresslevel=compresslevel
                ) as f_out:
                    shutil.copyfileobj(f_in, f_out)
        except Exception as e:
            _remove_quietly(dst)
            raise CompressionError(f"failed to compress log file: {e}") from e

    try:
        os.remove(src)
    except OSError as e:
        _remove_quietly(dst)
        raise CompressionError(f"failed to remove log file: {e}") from e
