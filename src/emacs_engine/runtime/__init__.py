"""Runtime services: telemetry and configuration."""

from .config import EngineConfig

__all__ = ["EngineConfig", "config", "telemetry"]
