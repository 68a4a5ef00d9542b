"""
Parameter store and address directory.

Both are admin-written key → value tables over a fixed set of keys.
Authorization is enforced by the ledger; these classes only hold values.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from ..constants import UINT256_MAX
from ..exceptions import ConfigurationError
from .journal import Journal


class ParameterKey(str, Enum):
    """Numeric governance parameters."""
    DELAY_AFTER_DEADLINE = "delayAfterDeadline"  # seconds added to proposal end when locking voters
    DFT_PER_VOTE = "dftPerVote"                  # DFT units per one vote


class AddressKey(str, Enum):
    """Collaborator endpoints."""
    STAKING_WRAPPER = "stakingWrapper"
    AMM_PAIR = "ammPair"
    DFT_TOKEN = "dftToken"


def _coerce_key(enum_cls, key):
    """Accept an enum member, its value ("dftPerVote") or its name ("DFT_PER_VOTE")."""
    if isinstance(key, enum_cls):
        return key
    if isinstance(key, str):
        try:
            return enum_cls(key)
        except ValueError:
            pass
        try:
            return enum_cls[key.upper().replace("-", "_")]
        except KeyError:
            pass
    raise ConfigurationError(
        f"Unknown {enum_cls.__name__} {key!r}; expected one of "
        f"{[k.value for k in enum_cls]}"
    )


def parameter_key(key: Union[ParameterKey, str]) -> ParameterKey:
    return _coerce_key(ParameterKey, key)


def address_key(key: Union[AddressKey, str]) -> AddressKey:
    return _coerce_key(AddressKey, key)


def require_uint(value: Any, what: str) -> int:
    """Return ``value`` if it is an int in the uint256 range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    if not 0 <= value <= UINT256_MAX:
        raise ConfigurationError(f"{what} out of uint256 range: {value}")
    return value


class ParameterStore:
    """Keyed numeric configuration. Unset keys read as 0."""

    def __init__(self, journal: Optional[Journal] = None):
        self._journal = journal if journal is not None else Journal()
        self._values: Dict[ParameterKey, int] = {}

    def get(self, key: Union[ParameterKey, str]) -> int:
        return self._values.get(parameter_key(key), 0)

    def set(self, key: Union[ParameterKey, str], value: int) -> int:
        """Overwrite ``key``; returns the previous value."""
        k = parameter_key(key)
        value = require_uint(value, k.value)
        if k is ParameterKey.DFT_PER_VOTE and value == 0:
            raise ConfigurationError("dftPerVote must be non-zero (it divides voting weight)")
        self._journal.record_item(self._values, k)
        previous = self._values.get(k, 0)
        self._values[k] = value
        return previous

    def to_dict(self) -> Dict[str, int]:
        return {k.value: v for k, v in self._values.items()}

    def load(self, data: Dict[str, int]) -> None:
        self._values = {parameter_key(k): int(v) for k, v in data.items()}

    def __repr__(self) -> str:
        return f"<ParameterStore {self.to_dict()}>"


class AddressDirectory:
    """Keyed collaborator addresses. Unset keys read as None."""

    def __init__(self, journal: Optional[Journal] = None):
        self._journal = journal if journal is not None else Journal()
        self._values: Dict[AddressKey, str] = {}

    def get(self, key: Union[AddressKey, str]) -> Optional[str]:
        return self._values.get(address_key(key))

    def is_set(self, key: Union[AddressKey, str]) -> bool:
        return self.get(key) is not None

    def set(self, key: Union[AddressKey, str], value: Optional[str]) -> Optional[str]:
        """
        Overwrite ``key``; None clears it. Returns the previous value.

        ``value`` is expected to be normalized by the caller.
        """
        k = address_key(key)
        self._journal.record_item(self._values, k)
        previous = self._values.get(k)
        if value is None:
            self._values.pop(k, None)
        else:
            self._values[k] = value
        return previous

    def to_dict(self) -> Dict[str, str]:
        return {k.value: v for k, v in self._values.items()}

    def load(self, data: Dict[str, str]) -> None:
        self._values = {address_key(k): v for k, v in data.items() if v}

    def __repr__(self) -> str:
        return f"<AddressDirectory {self.to_dict()}>"
