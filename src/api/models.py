# src/api/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SampleSubmission(BaseModel):
    value: float = Field(description="Utilization reading in percent")


class IngestResponse(BaseModel):
    service_id: str
    accepted: bool
    short_window_size: int
    long_window_size: int


class ServiceStatusResponse(BaseModel):
    service: str
    state: str
    instances: int
    min_instances: int
    max_instances: int
    short_window_size: int
    long_window_size: int
    short_avg: float
    long_avg: float
    ticks: int = 0
    scale_events: int = 0
    tick_failures: int = 0
    last_action: Optional[str] = None


class DecisionResponse(BaseModel):
    timestamp: datetime
    action: str
    service: str
    before: int
    after: int
    short_avg: float
    long_avg: float
