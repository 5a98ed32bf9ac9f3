# src/api/__init__.py
from .models import SampleSubmission, IngestResponse, ServiceStatusResponse, DecisionResponse
from .router import router
from .exceptions import ServiceNotFoundHTTPError, AutoscalerAPIError, AutoscalerUnavailableError

__all__ = [
    'SampleSubmission',
    'IngestResponse',
    'ServiceStatusResponse',
    'DecisionResponse',
    'router',
    'ServiceNotFoundHTTPError',
    'AutoscalerAPIError',
    'AutoscalerUnavailableError'
]

__version__ = '1.0.0'
