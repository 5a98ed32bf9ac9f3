# src/autoscaler/loop.py
import asyncio
import threading
import time
from typing import Any, Callable, Dict, Optional

from src.log_handler.logging_config import get_logger

from .exceptions import TickError
from .models import (
    DecisionEvent,
    LoopState,
    ScalingDecision,
    ServiceConfig,
    TickOutcome,
    TickStatus,
)
from .policy import ScalingPolicy
from .sinks import DecisionSink
from .target import ScalableTarget
from .ticker import PeriodicTicker
from .window import BoundedWindow

logger = get_logger(__name__)


class AutoscalerLoop:
    """Drives one target: buffers samples, ticks the policy, applies decisions."""

    def __init__(
        self,
        target: ScalableTarget,
        policy: ScalingPolicy,
        short_window: BoundedWindow,
        long_window: BoundedWindow,
        sink: Optional[DecisionSink] = None,
        tick_period: float = 1.0,
        cooldown_period: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if sink is None:
            from src.log_handler.decision_logger import LoggingDecisionSink

            sink = LoggingDecisionSink()

        self.target = target
        self.policy = policy
        self.short_window = short_window
        self.long_window = long_window
        self.sink = sink
        self.cooldown_period = cooldown_period
        self._clock = clock

        self.ticker = PeriodicTicker(tick_period, self._on_tick, name=f"autoscaler-{target.name}")
        self._state = LoopState.IDLE
        self._state_lock = asyncio.Lock()
        self._ingest_guard = threading.Lock()
        self._last_scale_time: Optional[float] = None

        self.tick_count = 0
        self.scale_count = 0
        self.failure_count = 0
        self.last_decision: Optional[ScalingDecision] = None

    @classmethod
    def from_config(cls, config: ServiceConfig, sink: Optional[DecisionSink] = None) -> "AutoscalerLoop":
        target = ScalableTarget(
            config.name,
            min_instances=config.min_instances,
            max_instances=config.max_instances,
            initial_instances=config.initial_instances,
        )
        return cls(
            target=target,
            policy=ScalingPolicy(config.policy, config.min_instances, config.max_instances),
            short_window=BoundedWindow(config.short_window),
            long_window=BoundedWindow(config.long_window),
            sink=sink,
            tick_period=config.tick_period,
            cooldown_period=config.cooldown_period,
        )

    @property
    def name(self) -> str:
        return self.target.name

    @property
    def state(self) -> LoopState:
        return self._state

    async def start(self) -> None:
        async with self._state_lock:
            if self._state is not LoopState.IDLE:
                return
            self.ticker.start()
            self._state = LoopState.RUNNING
        logger.info(f"Autoscaler loop for {self.name} started (period={self.ticker.period}s)")

    async def stop(self) -> None:
        """Stop ticking. A tick in progress completes; no new tick starts."""
        async with self._state_lock:
            if self._state is not LoopState.RUNNING:
                return
            with self._ingest_guard:
                self._state = LoopState.STOPPED
            await self.ticker.cancel()
        logger.info(f"Autoscaler loop for {self.name} stopped after {self.tick_count} ticks")

    def ingest(self, sample: float) -> bool:
        """Buffer a sample into both windows. Returns False once stopped."""
        with self._ingest_guard:
            if self._state is LoopState.STOPPED:
                logger.debug(f"Dropping sample for stopped loop {self.name}")
                return False
            self.short_window.push(sample)
            self.long_window.push(sample)
        return True

    def _in_cooldown(self) -> bool:
        if self.cooldown_period <= 0 or self._last_scale_time is None:
            return False
        return self._clock() - self._last_scale_time < self.cooldown_period

    def monitor_and_scale(self) -> TickOutcome:
        """Run one decision tick and report how it went instead of raising."""
        if self._state is LoopState.STOPPED:
            return TickOutcome(TickStatus.NO_ACTION)

        self.tick_count += 1
        stage = "policy"
        decision: Optional[ScalingDecision] = None
        try:
            with self._ingest_guard:
                short_avg = self.short_window.average()
                long_avg = self.long_window.average()
            decision = self.policy.decide(short_avg, long_avg, self.target.current_instances())
            if not decision.is_action:
                return TickOutcome(TickStatus.NO_ACTION, decision)

            if self._in_cooldown():
                logger.debug(f"{self.name}: {decision.action.value} suppressed by cooldown")
                return TickOutcome(TickStatus.COOLDOWN, decision)

            stage = "scale"
            self.target.scale_to(decision.to_count)
            self._last_scale_time = self._clock()
            self.scale_count += 1
            self.last_decision = decision

            stage = "emit"
            self.sink.on_decision(DecisionEvent(service=self.name, decision=decision))
            return TickOutcome(TickStatus.SCALED, decision)
        except Exception as e:
            self.failure_count += 1
            return TickOutcome(TickStatus.FAILED, decision, TickError(self.name, stage, e))

    def _on_tick(self) -> TickOutcome:
        outcome = self.monitor_and_scale()
        if outcome.failed:
            logger.error(str(outcome.error))
            self.sink.on_tick_error(self.name, outcome.error)
        return outcome

    def get_stats(self) -> Dict[str, Any]:
        last = self.last_decision
        return {
            "service": self.name,
            "state": self._state.value,
            "instances": self.target.current_instances(),
            "min_instances": self.target.min_instances,
            "max_instances": self.target.max_instances,
            "short_window_size": self.short_window.size(),
            "long_window_size": self.long_window.size(),
            "short_avg": self.short_window.average(),
            "long_avg": self.long_window.average(),
            "ticks": self.tick_count,
            "scale_events": self.scale_count,
            "tick_failures": self.failure_count,
            "last_action": last.action.value if last else None,
        }
