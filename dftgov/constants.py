"""
DFT Governor Constants

Ledger limits, governance defaults, and the handful of process settings read
from a ``.env`` file (state/config file locations and logging switches).
"""
from dotenv import dotenv_values

# ==================================================================================
# LEDGER LIMITS
# ==================================================================================
# Tallies, receipts, parameters and timestamps are uint256 values; anything
# outside this range is rejected or treated as fatal.
UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'


# ==================================================================================
# GOVERNANCE DEFAULTS
# ==================================================================================
# Applied by initialize() unless the ledger's configuration overrides them.
DEFAULT_DELAY_AFTER_DEADLINE = 3 * 24 * 60 * 60  # lock extends 3 days past proposal end
DEFAULT_DFT_PER_VOTE = 10**18  # 1 DFT (18 decimals) = 1 vote

# Staking wrapper pool that holds the DFT/LP pair shares
STAKING_LP_POOL_ID = 1


# ==================================================================================
# .ENV SETTINGS
# ==================================================================================
class ConfigString(str):
    """A .env string that remembers the built-in default it replaced."""

    def __new__(cls, value, default):
        obj = super().__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default


class ConfigBool(int):
    """A .env True/False flag that remembers its built-in default."""

    def __new__(cls, value, default):
        obj = super().__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__

    def __repr__(self):
        return repr(bool(self))

    __str__ = __repr__


_BOOL_WORDS = {"true": True, "false": False}

ENV_DEFAULTS = {
    # CLI
    'DFTGOV_STATE_FILE':        'governor-state.json',
    'DFTGOV_CONFIG_FILE':       'config.toml',
    # Logging
    'LOG_LEVEL':                'INFO',
    'LOG_FORMAT':               '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':          '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING': 'True',
    'LOG_FILE_OUTPUT':          'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5


def _env_setting(raw, default):
    """Wrap a .env value (None = unset) as ConfigBool for True/False, else ConfigString."""
    value = default if raw is None else raw
    flag = _BOOL_WORDS.get(value.strip().casefold())
    if flag is not None:
        return ConfigBool(flag, _BOOL_WORDS.get(default.casefold(), default))
    return ConfigString(value, default)


_env = dotenv_values(".env")

DFTGOV_STATE_FILE = _env_setting(_env.get('DFTGOV_STATE_FILE'), ENV_DEFAULTS['DFTGOV_STATE_FILE'])
DFTGOV_CONFIG_FILE = _env_setting(_env.get('DFTGOV_CONFIG_FILE'), ENV_DEFAULTS['DFTGOV_CONFIG_FILE'])
LOG_LEVEL = _env_setting(_env.get('LOG_LEVEL'), ENV_DEFAULTS['LOG_LEVEL'])
LOG_FORMAT = _env_setting(_env.get('LOG_FORMAT'), ENV_DEFAULTS['LOG_FORMAT'])
LOG_DATE_FORMAT = _env_setting(_env.get('LOG_DATE_FORMAT'), ENV_DEFAULTS['LOG_DATE_FORMAT'])
LOG_CONSOLE_HIGHLIGHTING = _env_setting(
    _env.get('LOG_CONSOLE_HIGHLIGHTING'), ENV_DEFAULTS['LOG_CONSOLE_HIGHLIGHTING']
)
LOG_FILE_OUTPUT = _env_setting(_env.get('LOG_FILE_OUTPUT'), ENV_DEFAULTS['LOG_FILE_OUTPUT'])
