"""Configuration utilities for the gas deposit runner."""

from .loader import (
    AddressesConfig,
    ApiUrlsConfig,
    ChainConfig,
    ConfigError,
    DefaultsConfig,
    DepositConfig,
    RunnerConfig,
    load_config,
    parse_config,
)

__all__ = [
    "AddressesConfig",
    "ApiUrlsConfig",
    "ChainConfig",
    "ConfigError",
    "DefaultsConfig",
    "DepositConfig",
    "RunnerConfig",
    "load_config",
    "parse_config",
]
