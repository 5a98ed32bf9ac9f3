# src/autoscaler/policy.py
import math

from .exceptions import ConfigurationError
from .models import PolicyConfig, ScalingAction, ScalingDecision


class ScalingPolicy:
    """
    Turns a short-window and a long-window utilization average into a
    scaling decision for one target.

    Rules are evaluated in order and the first one whose condition holds
    decides, even when its computed target equals the current count:

    1. Reactive scale-up: the short average is above ``scale_up_threshold``
       and outruns the long average by more than ``trend_margin``. The new
       count is ``ceil(current * scale_factor)``, capped at ``max_instances``.
    2. Reactive scale-down: the short average is below
       ``scale_down_threshold`` and trails the long average by more than
       ``trend_margin``. The new count is ``floor(current / scale_factor)``,
       floored at ``min_instances``.
    3. Proactive scale-up: the long average alone is above
       ``scale_up_threshold``. Adds a single instance.

    Up rounds with ``ceil`` and down with ``floor``, so a scale-down followed
    by a scale-up does not always return to the starting count (10 -> 6 -> 9
    with a factor of 1.5). Scale-up followed by scale-down always does.

    NaN averages fail every comparison they take part in. Two NaN averages
    produce no action, but a NaN short average next to a hot long average
    still takes the proactive rule, which reads only the long average.
    """

    def __init__(self, config: PolicyConfig, min_instances: int, max_instances: int):
        if min_instances < 1:
            raise ConfigurationError(f"min_instances must be >= 1, got {min_instances}")
        if max_instances < min_instances:
            raise ConfigurationError(
                f"max_instances ({max_instances}) must be >= min_instances ({min_instances})"
            )
        self.config = config
        self.min_instances = min_instances
        self.max_instances = max_instances

    def _clamp(self, count: int) -> int:
        return max(self.min_instances, min(self.max_instances, count))

    def decide(self, short_avg: float, long_avg: float, current: int) -> ScalingDecision:
        cfg = self.config
        effective = self._clamp(current)

        def result(action: ScalingAction, target: int) -> ScalingDecision:
            return ScalingDecision(action, current, target, short_avg, long_avg)

        if short_avg > cfg.scale_up_threshold and short_avg > long_avg + cfg.trend_margin:
            target = min(self.max_instances, math.ceil(effective * cfg.scale_factor))
            if target > effective:
                return result(ScalingAction.SCALE_UP, target)
            return ScalingDecision.no_action(current, short_avg, long_avg)

        if short_avg < cfg.scale_down_threshold and short_avg < long_avg - cfg.trend_margin:
            target = max(self.min_instances, math.floor(effective / cfg.scale_factor))
            if target < effective:
                return result(ScalingAction.SCALE_DOWN, target)
            return ScalingDecision.no_action(current, short_avg, long_avg)

        if long_avg > cfg.scale_up_threshold and effective < self.max_instances:
            return result(ScalingAction.PROACTIVE_SCALE_UP, min(self.max_instances, effective + 1))

        return ScalingDecision.no_action(current, short_avg, long_avg)
