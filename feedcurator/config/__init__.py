"""Configuration management for feedcurator."""

from .loader import (
    CONFIG_ENV_VAR,
    Config,
    default_config_path,
    load_config,
    load_feed_seeds,
    save_config,
)
from .models import (
    AnalysisConfig,
    ConfigModel,
    FeedSeed,
    IngestionConfig,
    LLMConfig,
    PostgresConfig,
    ServerConfig,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "ConfigModel",
    "AnalysisConfig",
    "FeedSeed",
    "IngestionConfig",
    "LLMConfig",
    "PostgresConfig",
    "ServerConfig",
    "default_config_path",
    "load_config",
    "load_feed_seeds",
    "save_config",
]
