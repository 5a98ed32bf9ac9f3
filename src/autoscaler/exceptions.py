# src/autoscaler/exceptions.py
from typing import Optional


class AutoscalerError(Exception):
    """Base exception for autoscaler errors"""
    pass


class ConfigurationError(AutoscalerError):
    """Raised when bounds, factors or capacities are invalid"""
    pass


class ServiceNotFoundError(AutoscalerError):
    """Raised when a sample or query targets an unknown service"""
    pass


class TickError(AutoscalerError):
    """A single tick failed; the loop keeps running"""

    def __init__(self, service: str, stage: str, cause: Optional[BaseException] = None):
        self.service = service
        self.stage = stage
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Tick failed for {service} during {stage}{detail}")
