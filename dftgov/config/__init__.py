"""
DFT Governor Configuration

Loads config.toml; environment variables override TOML values.
"""

from .loader import (
    AddressesConfig,
    GovernorConfig,
    LoggingConfig,
    ParametersConfig,
    StakingConfig,
    load_config,
)

__all__ = [
    "AddressesConfig",
    "GovernorConfig",
    "LoggingConfig",
    "ParametersConfig",
    "StakingConfig",
    "load_config",
]
