# src/autoscaler/models.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import TickError


class ScalingAction(str, Enum):
    NONE = "no_action"
    SCALE_UP = "scale_up"
    SCALE_DOWN = "scale_down"
    PROACTIVE_SCALE_UP = "proactive_scale_up"


class LoopState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TickStatus(str, Enum):
    NO_ACTION = "no_action"
    SCALED = "scaled"
    COOLDOWN = "cooldown"
    FAILED = "failed"


class PolicyConfig(BaseModel):
    """Thresholds are utilization percentages."""

    model_config = ConfigDict(frozen=True)

    scale_up_threshold: float = Field(default=70.0)
    scale_down_threshold: float = Field(default=30.0)
    scale_factor: float = Field(default=1.5, gt=1.0)
    trend_margin: float = Field(default=5.0, ge=0.0)

    @model_validator(mode="after")
    def check_thresholds(self) -> "PolicyConfig":
        if self.scale_down_threshold >= self.scale_up_threshold:
            raise ValueError(
                f"scale_down_threshold ({self.scale_down_threshold}) must be "
                f"below scale_up_threshold ({self.scale_up_threshold})"
            )
        return self


class ServiceConfig(BaseModel):
    """Construction-time settings for one managed service."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    min_instances: int = Field(default=1, ge=1)
    max_instances: int = Field(default=10, ge=1)
    initial_instances: Optional[int] = Field(default=None, ge=1)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    short_window: int = Field(default=5, ge=1)
    long_window: int = Field(default=30, ge=1)
    tick_period: float = Field(default=1.0, gt=0.0)
    cooldown_period: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def check_bounds(self) -> "ServiceConfig":
        if self.max_instances < self.min_instances:
            raise ValueError(
                f"max_instances ({self.max_instances}) must be >= "
                f"min_instances ({self.min_instances})"
            )
        if self.initial_instances is not None and not (
            self.min_instances <= self.initial_instances <= self.max_instances
        ):
            raise ValueError(
                f"initial_instances ({self.initial_instances}) must lie within "
                f"[{self.min_instances}, {self.max_instances}]"
            )
        return self


@dataclass(frozen=True)
class ScalingDecision:
    """Outcome of one policy evaluation, with the averages that justified it."""

    action: ScalingAction
    from_count: int
    to_count: int
    short_avg: float
    long_avg: float

    @property
    def is_action(self) -> bool:
        return self.action is not ScalingAction.NONE

    @classmethod
    def no_action(cls, current: int, short_avg: float, long_avg: float) -> "ScalingDecision":
        return cls(ScalingAction.NONE, current, current, short_avg, long_avg)


@dataclass(frozen=True)
class DecisionEvent:
    service: str
    decision: ScalingDecision
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "action": self.decision.action.value,
            "service": self.service,
            "before": self.decision.from_count,
            "after": self.decision.to_count,
            "short_avg": self.decision.short_avg,
            "long_avg": self.decision.long_avg,
        }


@dataclass(frozen=True)
class TickOutcome:
    """Result of a single tick, consumed by the loop driver."""

    status: TickStatus
    decision: Optional[ScalingDecision] = None
    error: Optional[TickError] = None

    @property
    def failed(self) -> bool:
        return self.status is TickStatus.FAILED
