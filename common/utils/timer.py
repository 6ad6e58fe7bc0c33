from __future__ import annotations

import logging
import time
from typing import Optional


class BlockTimer:
    """Times the enclosed block and logs the duration when it exits."""

    def __init__(self, label: str = "Block", logger: Optional[logging.Logger] = None):
        self.label = label
        self._logger = logger or logging.getLogger(__name__)
        self.total_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.total_time = self.end_time - self.start_time
        self._logger.info("%s took %.4f seconds", self.label, self.total_time)

        # None, not self: a truthy return from __exit__ would swallow the exception.
        return None
