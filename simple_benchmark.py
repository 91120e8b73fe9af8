#!/usr/bin/env python3
"""
Simple performance analysis for the rotating log sink
"""

import logging
import shutil
import statistics
import tempfile
import time

from rotating_sink import RotatingLogConfig, RotatingLogWriter, RotatingSinkHandler


def time_function(func, iterations=1000):
    """Time a function over multiple iterations"""
    times = []
    for _ in range(5):  # Run 5 times for average
        start = time.perf_counter()
        for _ in range(iterations):
            func()
        end = time.perf_counter()
        times.append((end - start) / iterations * 1000)  # ms per iteration

    return {
        "mean": statistics.mean(times),
        "stdev": statistics.stdev(times) if len(times) > 1 else 0,
        "min": min(times),
        "max": max(times),
    }


def main():
    temp_dir = tempfile.mkdtemp()
    line = b"2024-03-10 12:00:00 - bench - INFO - Test message\n"

    print("Rotating Sink Performance Analysis")
    print("=" * 50)

    try:
        # Test 1: Raw writes, no rotation
        print("\n1. Raw Write Performance (per write)")
        writer = RotatingLogWriter(RotatingLogConfig(directory=temp_dir, name="plain"))
        plain_stats = time_function(lambda: writer.write(line), 1000)
        writer.close()
        print(f"   Mean: {plain_stats['mean']:.3f}ms")
        print(f"   Std:  {plain_stats['stdev']:.3f}ms")

        # Test 2: Writes with frequent rotation and background retention
        print("\n2. Rotating Write Performance (per write)")
        config = RotatingLogConfig(
            directory=temp_dir,
            name="rotating",
            max_size=64 * 1024,
            max_backups=3,
            compress=True,
        )
        writer = RotatingLogWriter(config)
        rotating_stats = time_function(lambda: writer.write(line), 1000)
        writer.close()
        writer.wait_for_sweeps()
        print(f"   Mean: {rotating_stats['mean']:.3f}ms")
        print(f"   Overhead: {rotating_stats['mean'] - plain_stats['mean']:.3f}ms")

        # Test 3: Through the logging handler
        print("\n3. Logging Handler Performance (per log call)")
        handler = RotatingSinkHandler(RotatingLogConfig(directory=temp_dir, name="handler"))
        handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        logger = logging.getLogger("bench_rotating_sink")
        logger.addHandler(handler)
        logger.propagate = False
        handler_stats = time_function(lambda: logger.info("Test message"), 1000)
        handler.close()
        print(f"   Mean: {handler_stats['mean']:.3f}ms")

        print("\n" + "=" * 50)
        print("Throughput:")
        print(f"Raw writes: {1000 / plain_stats['mean']:.0f} writes/second")
        print(f"Rotating writes: {1000 / rotating_stats['mean']:.0f} writes/second")
        print(f"Handler: {1000 / handler_stats['mean']:.0f} logs/second")
    finally:
        shutil.rmtree(temp_dir)


if __name__ == "__main__":
    main()
