import json

import pytest

from src.autoscaler.config import AppSettings, load_service_configs
from src.autoscaler.exceptions import ConfigurationError, ServiceNotFoundError
from src.autoscaler.models import LoopState, ServiceConfig, TickStatus
from src.autoscaler.service import AutoscalerService


@pytest.fixture
def service():
    return AutoscalerService(
        [
            ServiceConfig(name="web", initial_instances=4, short_window=2, long_window=6, tick_period=60.0),
            ServiceConfig(name="worker", initial_instances=2, tick_period=60.0),
        ]
    )


def test_ingest_routes_to_named_service(service):
    assert service.ingest("web", 75.0) is True

    assert service.get_loop("web").short_window.snapshot() == [75.0]
    assert service.get_loop("worker").short_window.size() == 0


def test_unknown_service_raises(service):
    with pytest.raises(ServiceNotFoundError):
        service.ingest("missing", 10.0)
    with pytest.raises(ServiceNotFoundError):
        service.recent_decisions("missing")


def test_duplicate_service_names_rejected():
    with pytest.raises(ConfigurationError):
        AutoscalerService([ServiceConfig(name="web"), ServiceConfig(name="web")])


def test_services_scale_independently(service):
    for value in (30.0, 30.0, 30.0, 30.0, 90.0, 90.0):
        service.ingest("web", value)

    assert service.get_loop("web").monitor_and_scale().status == TickStatus.SCALED
    assert service.get_loop("worker").monitor_and_scale().status == TickStatus.NO_ACTION

    stats = {s["service"]: s for s in service.get_stats()}
    assert stats["web"]["instances"] == 6
    assert stats["worker"]["instances"] == 2

    decisions = service.recent_decisions()
    assert len(decisions) == 1
    assert decisions[0].service == "web"
    assert service.recent_decisions("worker") == []


@pytest.mark.asyncio
async def test_start_and_stop_all_loops(service):
    await service.start()
    assert all(loop.state == LoopState.RUNNING for loop in service.loops.values())

    await service.stop()
    assert all(loop.state == LoopState.STOPPED for loop in service.loops.values())


def test_service_config_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        ServiceConfig(name="web", min_instances=5, max_instances=2)
    with pytest.raises(ValueError):
        ServiceConfig(name="web", min_instances=2, max_instances=5, initial_instances=9)
    with pytest.raises(ValueError):
        ServiceConfig(name="web", tick_period=0)


def test_load_default_service_config():
    configs = load_service_configs(None)
    assert [c.name for c in configs] == ["default"]


def test_load_service_configs_from_file(tmp_path):
    path = tmp_path / "services.json"
    path.write_text(json.dumps({
        "services": [
            {
                "name": "api",
                "min_instances": 2,
                "max_instances": 20,
                "policy": {"scale_up_threshold": 80, "scale_down_threshold": 20, "scale_factor": 2.0},
                "short_window": 3,
                "long_window": 12,
                "tick_period": 5.0,
            },
            {"name": "batch"},
        ]
    }))

    configs = load_service_configs(str(path))

    assert [c.name for c in configs] == ["api", "batch"]
    assert configs[0].policy.scale_factor == 2.0
    assert configs[0].policy.trend_margin == 5.0
    assert configs[1].max_instances == 10


def test_load_service_configs_accepts_bare_list(tmp_path):
    path = tmp_path / "services.json"
    path.write_text(json.dumps([{"name": "api"}]))
    assert load_service_configs(str(path))[0].name == "api"


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"services": []}),
        json.dumps([{"name": "api", "policy": {"scale_factor": 0.9}}]),
        json.dumps([{"name": "api", "min_instances": 4, "max_instances": 1}]),
    ],
)
def test_load_service_configs_fails_fast(tmp_path, content):
    path = tmp_path / "services.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_service_configs(str(path))


def test_load_service_configs_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_service_configs(str(tmp_path / "absent.json"))


def test_app_settings_from_env(monkeypatch):
    monkeypatch.setenv("AUTOSCALER_PORT", "9100")
    monkeypatch.setenv("AUTOSCALER_LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("AUTOSCALER_CONFIG", raising=False)

    settings = AppSettings.from_env()

    assert settings.port == 9100
    assert settings.log_level == "DEBUG"
    assert settings.config_file is None


def test_app_settings_invalid_env(monkeypatch):
    monkeypatch.setenv("AUTOSCALER_PORT", "not-a-port")
    with pytest.raises(ConfigurationError):
        AppSettings.from_env()
