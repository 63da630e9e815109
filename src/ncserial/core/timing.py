"""
Timing mixin for ncserial components.

Provides timing utilities for batch serialization steps.
"""

import logging
import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, Iterator


class TimingMixin:
    """
    Mixin providing timing utilities.

    Requires self.logger to be available. Durations are accumulated per task
    name in ``self.timings`` so a run can report totals at the end.
    """

    @property
    def timings(self) -> Dict[str, float]:
        if not hasattr(self, '_timings'):
            self._timings = defaultdict(float)
        return self._timings

    @contextmanager
    def time_limit(self, task_name: str, category: str = None) -> Iterator[None]:
        """
        Context manager to time a task and log the duration.

        Args:
            task_name: Label used in log messages
            category: Key the duration is accumulated under (defaults to task_name)
        """
        start_time = time.perf_counter()
        logger = getattr(self, 'logger', logging.getLogger(__name__))
        logger.debug(f"Starting task: {task_name}")
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self.timings[category or task_name] += duration
            logger.debug(f"Completed task: {task_name} in {duration:.2f} seconds")
