import logging
from unittest.mock import MagicMock

import pytest

from src.autoscaler.exceptions import TickError
from src.autoscaler.models import DecisionEvent, ScalingAction, ScalingDecision
from src.autoscaler.sinks import DecisionHistory, FanOutSink
from src.log_handler.decision_logger import LoggingDecisionSink


@pytest.fixture
def event():
    decision = ScalingDecision(ScalingAction.SCALE_UP, 4, 6, 80.0, 60.0)
    return DecisionEvent(service="web", decision=decision)


def test_failing_sink_does_not_block_the_others(event):
    broken = MagicMock()
    broken.on_decision.side_effect = RuntimeError("sink down")
    broken.on_tick_error.side_effect = RuntimeError("sink down")
    history = DecisionHistory()
    sink = FanOutSink([broken, history])

    error = TickError("web", "policy", ValueError("bad sample"))
    sink.on_decision(event)
    sink.on_tick_error("web", error)

    broken.on_decision.assert_called_once_with(event)
    broken.on_tick_error.assert_called_once_with("web", error)
    assert history.recent() == [event]
    assert history.errors("web") == [error]


def test_history_is_bounded_and_newest_first():
    history = DecisionHistory(max_events=2)
    events = [
        DecisionEvent(service="web", decision=ScalingDecision(ScalingAction.SCALE_UP, n, n + 1, 80.0, 60.0))
        for n in range(1, 4)
    ]
    for e in events:
        history.on_decision(e)

    assert history.recent() == [events[2], events[1]]
    assert history.recent(limit=1) == [events[2]]
    assert history.recent(service="other") == []


def test_logging_sink_formats_decision(event, caplog):
    caplog.set_level(logging.INFO, logger="autoscaler.decisions")

    LoggingDecisionSink().on_decision(event)

    messages = [r.getMessage() for r in caplog.records if r.name == "autoscaler.decisions"]
    assert len(messages) == 1
    assert "web" in messages[0]
    assert "scale_up" in messages[0]
    assert "4 -> 6" in messages[0]
    assert "short_avg=80.00%" in messages[0]
    assert "long_avg=60.00%" in messages[0]


def test_logging_sink_reports_tick_error(caplog):
    caplog.set_level(logging.WARNING, logger="autoscaler.decisions")

    LoggingDecisionSink().on_tick_error("web", TickError("web", "scale", RuntimeError("boom")))

    record = next(r for r in caplog.records if r.name == "autoscaler.decisions")
    assert record.levelno == logging.WARNING
    assert "Tick failure for web" in record.getMessage()
    assert "Stage: scale" in record.getMessage()
