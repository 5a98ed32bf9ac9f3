# src/autoscaler/sinks.py
import threading
from collections import deque
from typing import Deque, Iterable, List, Optional, Protocol

from src.log_handler.logging_config import get_logger

from .exceptions import TickError
from .models import DecisionEvent

logger = get_logger(__name__)


class DecisionSink(Protocol):
    """Receives scaling decisions and tick failures from a loop."""

    def on_decision(self, event: DecisionEvent) -> None: ...

    def on_tick_error(self, service: str, error: TickError) -> None: ...


class DecisionHistory:
    """Keeps the most recent decisions and tick errors in memory."""

    def __init__(self, max_events: int = 100):
        self._events: Deque[DecisionEvent] = deque(maxlen=max_events)
        self._errors: Deque[TickError] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def on_decision(self, event: DecisionEvent) -> None:
        with self._lock:
            self._events.append(event)

    def on_tick_error(self, service: str, error: TickError) -> None:
        with self._lock:
            self._errors.append(error)

    def recent(self, service: Optional[str] = None, limit: Optional[int] = None) -> List[DecisionEvent]:
        """Newest first."""
        with self._lock:
            events = [e for e in reversed(self._events) if service is None or e.service == service]
        return events[:limit] if limit is not None else events

    def errors(self, service: Optional[str] = None) -> List[TickError]:
        with self._lock:
            return [e for e in self._errors if service is None or e.service == service]


class FanOutSink:
    """Forwards to several sinks; one failing sink does not starve the rest."""

    def __init__(self, sinks: Iterable[DecisionSink]):
        self.sinks = list(sinks)

    def on_decision(self, event: DecisionEvent) -> None:
        for sink in self.sinks:
            try:
                sink.on_decision(event)
            except Exception as e:
                logger.error(f"Sink {type(sink).__name__} rejected decision for {event.service}: {str(e)}")

    def on_tick_error(self, service: str, error: TickError) -> None:
        for sink in self.sinks:
            try:
                sink.on_tick_error(service, error)
            except Exception as e:
                logger.error(f"Sink {type(sink).__name__} rejected tick error for {service}: {str(e)}")
