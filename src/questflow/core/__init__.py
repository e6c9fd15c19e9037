from .logging import configure_logging
from .settings import DEFAULT_ENGINE_CONFIG, EngineConfig, load_engine_config

__all__ = [
    "configure_logging",
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "load_engine_config",
]
