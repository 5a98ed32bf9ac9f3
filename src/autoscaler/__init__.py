# src/autoscaler/__init__.py
from .window import BoundedWindow
from .target import ScalableTarget
from .policy import ScalingPolicy
from .ticker import PeriodicTicker
from .loop import AutoscalerLoop
from .service import AutoscalerService
from .sinks import DecisionSink, DecisionHistory, FanOutSink
from .config import AppSettings, load_service_configs
from .models import (
    PolicyConfig,
    ServiceConfig,
    ScalingAction,
    ScalingDecision,
    DecisionEvent,
    LoopState,
    TickStatus,
    TickOutcome,
)
from .exceptions import (
    AutoscalerError,
    ConfigurationError,
    ServiceNotFoundError,
    TickError,
)

__all__ = [
    'BoundedWindow',
    'ScalableTarget',
    'ScalingPolicy',
    'PeriodicTicker',
    'AutoscalerLoop',
    'AutoscalerService',
    'DecisionSink',
    'DecisionHistory',
    'FanOutSink',
    'AppSettings',
    'load_service_configs',
    'PolicyConfig',
    'ServiceConfig',
    'ScalingAction',
    'ScalingDecision',
    'DecisionEvent',
    'LoopState',
    'TickStatus',
    'TickOutcome',
    'AutoscalerError',
    'ConfigurationError',
    'ServiceNotFoundError',
    'TickError',
]

__version__ = '1.0.0'
