# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of LineBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import time

BENCHMARK_LOGGING_LEVEL = 5

logger = logging.getLogger(__name__)
logging.addLevelName(BENCHMARK_LOGGING_LEVEL, "BENCHMARK")


class Benchmark:
    """ Context manager that reports how long a piece of code takes to run. """

    nesting: list[str] = []

    def __init__(self, name: str):
        self.name = name
        self.startTime = 0.0

    def __enter__(self):
        Benchmark.nesting.append(self.name)
        self.startTime = time.perf_counter()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None):
        ms = 1000 * (time.perf_counter() - self.startTime)

        description = "/".join(Benchmark.nesting)
        if exc_type:
            description += f" (EXCEPTION RAISED! {exc_type.__name__})"
        logger.log(BENCHMARK_LOGGING_LEVEL, f"{ms:8.1f} ms {description}")

        Benchmark.nesting.pop()
        self.startTime = 0.0


def benchmark(func):
    """ Function decorator that reports how long the function takes to run. """
    def wrapper(*args, **kwargs):
        with Benchmark(func.__qualname__):
            return func(*args, **kwargs)
    return wrapper
