# src/log_handler/decision_logger.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.autoscaler.exceptions import TickError
    from src.autoscaler.models import DecisionEvent


class LoggingDecisionSink:
    """Writes scaling decisions and tick failures to the ``autoscaler.decisions`` logger."""

    def __init__(self, logger_name: str = "autoscaler.decisions"):
        self.logger = logging.getLogger(logger_name)

    def on_decision(self, event: "DecisionEvent"):
        """Log an applied scaling decision."""
        decision = event.decision
        self.logger.info(
            f"[{event.timestamp.isoformat()}] {event.service}: "
            f"{decision.action.value} {decision.from_count} -> {decision.to_count} "
            f"(short_avg={decision.short_avg:.2f}%, long_avg={decision.long_avg:.2f}%)"
        )

    def on_tick_error(self, service: str, error: "TickError"):
        """Log a tick that failed without stopping its loop."""
        self.logger.warning(
            f"Tick failure for {service}:\n"
            f"Stage: {error.stage}\n"
            f"Error: {error.cause!r}"
        )
