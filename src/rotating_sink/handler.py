"""
Logging handler that writes formatted records to a rotating log writer
"""

import logging
import time
from typing import Optional

from .config import RotatingLogConfig
from .writer import RotatingLogWriter


class RotatingSinkHandler(logging.Handler):
    """
    Handler that sends each formatted record to a RotatingLogWriter
    """

    terminator = "\n"

    def __init__(
        self,
        config: Optional[RotatingLogConfig] = None,
        writer: Optional[RotatingLogWriter] = None,
        encoding: str = "utf-8",
    ):
        super().__init__()
        self.writer = writer or RotatingLogWriter(config)
        self.encoding = encoding

    @property
    def base_filename(self) -> str:
        return self.writer.filename

    def emit(self, record: logging.LogRecord):
        """Emit a log record"""
        try:
            msg = self.format(record) + self.terminator
            self.writer.write(msg.encode(self.encoding))
        except Exception:
            self.handleError(record)

    def flush(self):
        """Flush the writer"""
        self.acquire()
        try:
            self.writer.flush()
        finally:
            self.release()

    def close(self):
        """Close the writer and the handler"""
        self.acquire()
        try:
            self.writer.close()
        finally:
            self.release()
        super().close()


def create_file_logger(
    name: str,
    config: RotatingLogConfig,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Logger:
    """
    Create a logger that writes to a rotating log file

    Args:
        name: Logger name
        config: Rotating log configuration
        formatter: Optional custom formatter

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = RotatingSinkHandler(config)

    # Set formatter
    if formatter:
        handler.setFormatter(formatter)
    else:
        # Use simple default formatter; its leading timestamp matches the
        # default log_time_format used for startup reconciliation
        simple_formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        if not config.local_time:
            simple_formatter.converter = time.gmtime
        handler.setFormatter(simple_formatter)

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    return logger
