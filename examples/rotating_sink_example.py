#!/usr/bin/env python3
"""
Example: a service log that rolls daily and on size, keeps a week of
compressed backups, and rotates on SIGHUP
"""

import logging
import signal
import tempfile

from rotating_sink import RotatingLogConfig, RotatingSinkHandler, create_file_logger


def main():
    config = RotatingLogConfig(
        directory=tempfile.mkdtemp(prefix="rotating-sink-"),
        name="service",
        max_size=10 * 1024 * 1024,
        split_days=1,
        max_backups=7,
        max_age_days=7,
        compress=True,
        local_time=True,
    )

    logger = create_file_logger("service", config)
    handler = logger.handlers[0]
    assert isinstance(handler, RotatingSinkHandler)

    # logrotate-style administrative rotation, carried out on the next write
    signal.signal(signal.SIGHUP, lambda signum, frame: handler.writer.request_rotation())

    logger.info("Service started")
    for i in range(10):
        logger.info("Processed request %d", i)

    # Force a roll directly from the main thread
    handler.writer.rotate()
    logger.info("Writing into a fresh file")

    handler.writer.wait_for_sweeps()
    print(f"Logs written to {config.directory}")

    logging.shutdown()


if __name__ == "__main__":
    main()
