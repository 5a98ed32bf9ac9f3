# src/autoscaler/service.py
import asyncio
from typing import Any, Dict, Iterable, List, Optional

from src.log_handler.decision_logger import LoggingDecisionSink
from src.log_handler.logging_config import get_logger

from .exceptions import ConfigurationError, ServiceNotFoundError
from .loop import AutoscalerLoop
from .models import DecisionEvent, ServiceConfig
from .sinks import DecisionHistory, DecisionSink, FanOutSink

logger = get_logger(__name__)


class AutoscalerService:
    """One independent AutoscalerLoop per configured service."""

    def __init__(
        self,
        configs: Iterable[ServiceConfig],
        extra_sinks: Optional[Iterable[DecisionSink]] = None,
        history_size: int = 100,
    ):
        self.history = DecisionHistory(max_events=history_size)
        self.sink = FanOutSink([LoggingDecisionSink(), self.history, *(extra_sinks or [])])
        self.loops: Dict[str, AutoscalerLoop] = {}

        for config in configs:
            if config.name in self.loops:
                raise ConfigurationError(f"Duplicate service name: {config.name}")
            self.loops[config.name] = AutoscalerLoop.from_config(config, sink=self.sink)

        logger.info(f"AutoscalerService initialized with {len(self.loops)} service(s)")

    def get_loop(self, service_id: str) -> AutoscalerLoop:
        try:
            return self.loops[service_id]
        except KeyError:
            raise ServiceNotFoundError(f"Unknown service: {service_id}") from None

    def ingest(self, service_id: str, sample: float) -> bool:
        """Push a utilization sample to the named service's windows."""
        return self.get_loop(service_id).ingest(sample)

    async def start(self) -> None:
        await asyncio.gather(*(loop.start() for loop in self.loops.values()))
        logger.info(f"Started {len(self.loops)} autoscaler loop(s)")

    async def stop(self) -> None:
        await asyncio.gather(*(loop.stop() for loop in self.loops.values()))
        logger.info("All autoscaler loops stopped")

    def get_stats(self) -> List[Dict[str, Any]]:
        return [loop.get_stats() for loop in self.loops.values()]

    def recent_decisions(self, service_id: Optional[str] = None, limit: Optional[int] = None) -> List[DecisionEvent]:
        if service_id is not None:
            self.get_loop(service_id)
        return self.history.recent(service=service_id, limit=limit)
