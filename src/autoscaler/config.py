# src/autoscaler/config.py
import json
import os
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from src.log_handler.logging_config import get_logger

from .exceptions import ConfigurationError
from .models import ServiceConfig

logger = get_logger(__name__)

CONFIG_ENV_VAR = "AUTOSCALER_CONFIG"


class AppSettings(BaseModel):
    config_file: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    history_size: int = Field(default=100, ge=1)

    @classmethod
    def from_env(cls) -> "AppSettings":
        values = {
            "config_file": os.environ.get(CONFIG_ENV_VAR),
            "log_level": os.environ.get("AUTOSCALER_LOG_LEVEL"),
            "log_file": os.environ.get("AUTOSCALER_LOG_FILE"),
            "host": os.environ.get("AUTOSCALER_HOST"),
            "port": os.environ.get("AUTOSCALER_PORT"),
            "history_size": os.environ.get("AUTOSCALER_HISTORY_SIZE"),
        }
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid environment settings: {e}") from e


def load_service_configs(path: Optional[str] = None) -> List[ServiceConfig]:
    """
    Load service definitions from a JSON file.

    The file holds either a list of service objects or an object with a
    ``services`` list. Without a path a single ``default`` service is used.
    """
    if path is None:
        logger.info("No service config file given, using a single default service")
        return [ServiceConfig(name="default")]

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Service config file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Service config file {path} is not valid JSON: {e}") from e

    entries = raw.get("services") if isinstance(raw, dict) else raw
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"Service config file {path} defines no services")

    try:
        configs = [ServiceConfig(**entry) for entry in entries]
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid service definition in {path}: {e}") from e

    logger.info(f"Loaded {len(configs)} service config(s) from {path}")
    return configs
