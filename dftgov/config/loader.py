"""
DFT Governor TOML Configuration Loader

Loads config.toml with environment variable overrides. Each [section] maps
to a dataclass with from_dict() and apply_env().

Environment variable mapping:
    [parameters] delay_after_deadline → DFTGOV_DELAY_AFTER_DEADLINE
    [parameters] dft_per_vote         → DFTGOV_DFT_PER_VOTE
    [addresses]  staking_wrapper      → DFTGOV_STAKING_WRAPPER
    [addresses]  amm_pair             → DFTGOV_AMM_PAIR
    [addresses]  dft_token            → DFTGOV_DFT_TOKEN
    [staking]    lp_pool_id           → DFTGOV_LP_POOL_ID
    [logging]    level                → DFTGOV_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # type: ignore[no-redef]

from ..constants import (
    DFTGOV_CONFIG_FILE,
    DEFAULT_DELAY_AFTER_DEADLINE,
    DEFAULT_DFT_PER_VOTE,
    STAKING_LP_POOL_ID,
    UINT256_MAX,
)
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ParametersConfig:
    """[parameters] section: defaults written by initialize()."""
    delay_after_deadline: int = DEFAULT_DELAY_AFTER_DEADLINE
    dft_per_vote: int = DEFAULT_DFT_PER_VOTE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParametersConfig":
        return cls(
            delay_after_deadline=int(data.get("delay_after_deadline", DEFAULT_DELAY_AFTER_DEADLINE)),
            dft_per_vote=int(data.get("dft_per_vote", DEFAULT_DFT_PER_VOTE)),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("DFTGOV_DELAY_AFTER_DEADLINE"):
            self.delay_after_deadline = int(v)
        if v := os.environ.get("DFTGOV_DFT_PER_VOTE"):
            self.dft_per_vote = int(v)


@dataclass
class AddressesConfig:
    """[addresses] section: collaborator endpoints pre-set at initialize()."""
    staking_wrapper: str = ""
    amm_pair: str = ""
    dft_token: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddressesConfig":
        return cls(
            staking_wrapper=data.get("staking_wrapper", ""),
            amm_pair=data.get("amm_pair", ""),
            dft_token=data.get("dft_token", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("DFTGOV_STAKING_WRAPPER"):
            self.staking_wrapper = v
        if v := os.environ.get("DFTGOV_AMM_PAIR"):
            self.amm_pair = v
        if v := os.environ.get("DFTGOV_DFT_TOKEN"):
            self.dft_token = v


@dataclass
class StakingConfig:
    """[staking] section."""
    lp_pool_id: int = STAKING_LP_POOL_ID

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StakingConfig":
        return cls(lp_pool_id=int(data.get("lp_pool_id", STAKING_LP_POOL_ID)))

    def apply_env(self) -> None:
        if v := os.environ.get("DFTGOV_LP_POOL_ID"):
            self.lp_pool_id = int(v)


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(level=str(data.get("level", "INFO")).upper())

    def apply_env(self) -> None:
        if v := os.environ.get("DFTGOV_LOG_LEVEL"):
            self.level = v.upper()


@dataclass
class GovernorConfig:
    """
    Unified governor configuration.

    Loads every section of config.toml and applies environment variable
    overrides. A ledger built without an explicit config uses the defaults.
    """
    parameters: ParametersConfig = field(default_factory=ParametersConfig)
    addresses: AddressesConfig = field(default_factory=AddressesConfig)
    staking: StakingConfig = field(default_factory=StakingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # --- factories --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernorConfig":
        """Create GovernorConfig from a parsed TOML dict."""
        return cls(
            parameters=ParametersConfig.from_dict(data.get("parameters", {})),
            addresses=AddressesConfig.from_dict(data.get("addresses", {})),
            staking=StakingConfig.from_dict(data.get("staking", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "GovernorConfig":
        """
        Load configuration from a TOML file.

        A missing file is not an error: defaults (with env overrides) are used.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("No config file at %s; using built-in defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            raw = tomli.load(f)

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.parameters.apply_env()
        self.addresses.apply_env()
        self.staking.apply_env()
        self.logging.apply_env()

    # --- validation -------------------------------------------------------

    def validate(self) -> bool:
        """
        Validate all configuration sections.

        Raises:
            ConfigurationError: on invalid config
        """
        p = self.parameters
        if not 0 <= p.delay_after_deadline <= UINT256_MAX:
            raise ConfigurationError("delay_after_deadline must be a uint256")
        if not 0 < p.dft_per_vote <= UINT256_MAX:
            raise ConfigurationError("dft_per_vote must be a positive uint256")
        if self.staking.lp_pool_id < 0:
            raise ConfigurationError("lp_pool_id must be >= 0")
        if self.logging.level not in _LOG_LEVELS:
            raise ConfigurationError(f"Invalid log level: {self.logging.level}")
        return True

    # --- serialisation ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": {
                "delay_after_deadline": self.parameters.delay_after_deadline,
                "dft_per_vote": self.parameters.dft_per_vote,
            },
            "addresses": {
                "staking_wrapper": self.addresses.staking_wrapper,
                "amm_pair": self.addresses.amm_pair,
                "dft_token": self.addresses.dft_token,
            },
            "staking": {"lp_pool_id": self.staking.lp_pool_id},
            "logging": {"level": self.logging.level},
        }


def load_config(path: Optional[str] = None) -> GovernorConfig:
    """
    Load governor configuration.

    Resolution order:
        1. Explicit *path* argument
        2. DFTGOV_CONFIG env var
        3. DFTGOV_CONFIG_FILE from .env (default ./config.toml)
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("DFTGOV_CONFIG", str(DFTGOV_CONFIG_FILE))

    cfg = GovernorConfig.from_file(path)
    cfg.validate()
    return cfg
