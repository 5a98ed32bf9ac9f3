# src/api/router.py
import logging
from typing import TYPE_CHECKING, List, Optional

from fastapi import APIRouter, Depends, Query

from .exceptions import AutoscalerAPIError, AutoscalerUnavailableError, ServiceNotFoundHTTPError
from .models import (
    DecisionResponse,
    IngestResponse,
    SampleSubmission,
    ServiceStatusResponse,
)
from src.autoscaler.exceptions import ServiceNotFoundError

# Import for type checking only
if TYPE_CHECKING:
    from src.autoscaler.service import AutoscalerService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_autoscaler() -> "AutoscalerService":
    from src.main import app_state

    if app_state.autoscaler is None:
        raise AutoscalerAPIError("Autoscaler service is not running")
    return app_state.autoscaler


@router.post("/services/{service_id}/samples", response_model=IngestResponse)
async def ingest_sample(
    service_id: str,
    sample: SampleSubmission,
    autoscaler: "AutoscalerService" = Depends(get_autoscaler),
):
    """
    Push a utilization sample into a service's metric windows
    """
    from src.main import app_state

    if app_state.is_shutting_down:
        raise AutoscalerUnavailableError("Autoscaler is shutting down, sample rejected")

    try:
        accepted = autoscaler.ingest(service_id, sample.value)
        loop = autoscaler.get_loop(service_id)
    except ServiceNotFoundError as e:
        raise ServiceNotFoundHTTPError(str(e))

    logger.debug(f"Sample {sample.value} for {service_id} accepted={accepted}")
    return IngestResponse(
        service_id=service_id,
        accepted=accepted,
        short_window_size=loop.short_window.size(),
        long_window_size=loop.long_window.size(),
    )


@router.get("/services", response_model=List[ServiceStatusResponse])
async def list_services(autoscaler: "AutoscalerService" = Depends(get_autoscaler)):
    """
    Status snapshot of every managed service
    """
    return [ServiceStatusResponse(**stats) for stats in autoscaler.get_stats()]


@router.get("/services/{service_id}", response_model=ServiceStatusResponse)
async def get_service(
    service_id: str, autoscaler: "AutoscalerService" = Depends(get_autoscaler)
):
    try:
        loop = autoscaler.get_loop(service_id)
    except ServiceNotFoundError as e:
        raise ServiceNotFoundHTTPError(str(e))
    return ServiceStatusResponse(**loop.get_stats())


@router.get("/decisions", response_model=List[DecisionResponse])
async def list_decisions(
    service: Optional[str] = Query(None, description="Filter by service name"),
    limit: int = Query(50, ge=1, le=1000),
    autoscaler: "AutoscalerService" = Depends(get_autoscaler),
):
    """
    Most recent scaling decisions, newest first
    """
    try:
        events = autoscaler.recent_decisions(service_id=service, limit=limit)
    except ServiceNotFoundError as e:
        raise ServiceNotFoundHTTPError(str(e))
    return [DecisionResponse(**event.to_dict()) for event in events]


@router.get("/health")
async def health():
    return {"status": "ok"}
