# src/autoscaler/target.py
import threading
from typing import Optional

from .exceptions import ConfigurationError


class ScalableTarget:
    """One managed service and its running instance count."""

    def __init__(
        self,
        name: str,
        min_instances: int = 1,
        max_instances: int = 10,
        initial_instances: Optional[int] = None,
    ):
        if min_instances < 1:
            raise ConfigurationError(f"{name}: min_instances must be >= 1, got {min_instances}")
        if max_instances < min_instances:
            raise ConfigurationError(
                f"{name}: max_instances ({max_instances}) must be >= min_instances ({min_instances})"
            )
        current = min_instances if initial_instances is None else initial_instances
        if not min_instances <= current <= max_instances:
            raise ConfigurationError(
                f"{name}: initial_instances ({current}) outside [{min_instances}, {max_instances}]"
            )

        self.name = name
        self.min_instances = min_instances
        self.max_instances = max_instances
        self._instances = current
        self._lock = threading.Lock()

    def current_instances(self) -> int:
        with self._lock:
            return self._instances

    def scale_to(self, count: int) -> int:
        """
        Set the instance count, floored at min_instances.

        The upper bound is the caller's job; the policy already clamps
        against max_instances.
        """
        with self._lock:
            self._instances = max(self.min_instances, int(count))
            return self._instances

    def __repr__(self) -> str:
        return (
            f"ScalableTarget(name={self.name!r}, instances={self.current_instances()}, "
            f"bounds=[{self.min_instances}, {self.max_instances}])"
        )
