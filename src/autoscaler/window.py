# src/autoscaler/window.py
import threading
from collections import deque
from typing import Deque, List

from .exceptions import ConfigurationError


class BoundedWindow:
    """Fixed-capacity FIFO of utilization samples."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ConfigurationError(f"Window capacity must be >= 1, got {capacity}")
        self._samples: Deque[float] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def push(self, sample: float) -> None:
        """Append a sample, evicting the oldest one once capacity is reached."""
        value = float(sample)
        with self._lock:
            self._samples.append(value)

    def average(self) -> float:
        """
        Mean of the held samples.

        An empty window averages to 0.0, which callers cannot tell apart
        from a window of genuine zero readings.
        """
        with self._lock:
            if not self._samples:
                return 0.0
            return sum(self._samples) / len(self._samples)

    def size(self) -> int:
        with self._lock:
            return len(self._samples)

    def snapshot(self) -> List[float]:
        """Copy of the held samples, oldest first."""
        with self._lock:
            return list(self._samples)

    def __len__(self) -> int:
        return self.size()
