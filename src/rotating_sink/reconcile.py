"""
Helpers for finalizing a previous run's log file at startup
"""

import os
import re
from datetime import datetime
from typing import Optional

from .clock import Clock

# Candidate timestamp text: digits and the separators date formats use
_TIMESTAMP_RUN = re.compile(r"[0-9T :/.,+\-]+")

# Longer trailing "lines" are treated as binary or corrupt content
MAX_LINE_LENGTH = 64 * 1024


def _last_newline(chunk: bytes, end: int) -> int:
    return max(chunk.rfind(b"\n", 0, end), chunk.rfind(b"\r", 0, end))


def read_last_line(
    path: str, chunk_size: int = 4096, max_length: int = MAX_LINE_LENGTH
) -> str:
    """
    Return the last non-blank line of ``path``, stripped.

    The file is read backwards in chunks and only the line being assembled
    is kept. Returns "" for an empty file or when the last line is longer
    than ``max_length`` bytes.
    """
    with open(path, "rb") as f:
        f.seek(0, os.SEEK_END)
        position = f.tell()
        pending = b""  # start of the current line lies in an earlier chunk
        while position > 0:
            step = min(chunk_size, position)
            position -= step
            f.seek(position)
            chunk = f.read(step)

            end = len(chunk)
            newline = _last_newline(chunk, end)
            while newline >= 0:
                line = (chunk[newline + 1 : end] + pending).strip()
                pending = b""
                if line:
                    return _decode_line(line, max_length)
                end = newline
                newline = _last_newline(chunk, end)

            pending = chunk[:end] + pending
            if not pending.strip():
                pending = b""
            elif len(pending) > max_length:
                return ""

    return _decode_line(pending.strip(), max_length)


def _decode_line(line: bytes, max_length: int) -> str:
    if len(line) > max_length:
        return ""
    return line.decode("utf-8", errors="replace")


def extract_timestamp(
    line: str, time_format: str, clock: Optional[Clock] = None
) -> Optional[datetime]:
    """First run of timestamp-like text in ``line`` that parses with ``time_format``"""
    for match in _TIMESTAMP_RUN.finditer(line):
        candidate = match.group(0).strip()
        # Runs can swallow separators after the time ("... 12:00:00 - "),
        # so take the longest prefix that parses
        for end in range(len(candidate), 0, -1):
            text = candidate[:end]
            if text != text.rstrip():
                continue
            try:
                parsed = datetime.strptime(text, time_format)
            except ValueError:
                continue
            return (clock or Clock()).localize(parsed)
    return None


def last_entry_time(
    path: str, time_format: str, clock: Optional[Clock] = None
) -> Optional[datetime]:
    """Timestamp of the last entry in the log at ``path``, if one can be found"""
    line = read_last_line(path)
    if not line:
        return None
    return extract_timestamp(line, time_format, clock)
