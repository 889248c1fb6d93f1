"""
Configuration Loading

Settings are read once from config/settings.json (or an explicit path) and
fixed for the lifetime of the engine. Missing file -> built-in defaults.
"""

import json
import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("Config")

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "settings.json")


class MqttSettings(BaseModel):
    enabled: bool = False
    broker: str = "localhost"
    port: int = Field(default=1883, gt=0)
    topic: str = "kinetic-twin/events"


class ApiSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, gt=0)


class SimulationSettings(BaseModel):
    tick_period_ms: int = Field(default=50, gt=0)
    scan_radius: int = Field(default=8, ge=0)
    stress_unit: float = Field(default=1024.0, gt=0)
    motor_speed: float = 128.0
    windmill_bonus: float = Field(default=1024.0, ge=0)
    handoff_enabled: bool = False
    mqtt: MqttSettings = MqttSettings()
    api: ApiSettings = ApiSettings()

    @property
    def tick_period(self) -> float:
        """Tick period in seconds."""
        return self.tick_period_ms / 1000.0


def load_settings(path: Optional[str] = None) -> SimulationSettings:
    """
    Raises:
        pydantic.ValidationError: settings file holds invalid values
    """
    config_path = path or DEFAULT_CONFIG_PATH
    try:
        with open(config_path, "r") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.warning(f"No settings at {config_path}; using defaults")
        return SimulationSettings()
    return SimulationSettings.model_validate(raw)


__all__ = ['SimulationSettings', 'MqttSettings', 'ApiSettings', 'load_settings']
