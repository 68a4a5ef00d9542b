"""
Vote weight oracle.

Converts a holder's external DFT position into voting weight:

    weight = (staked + accelerated + pool_share_value) // dftPerVote

The staking wrapper and AMM pair are external, untrusted collaborators.
Their addresses come from the AddressDirectory and are resolved to objects
through a CollaboratorRegistry.
"""

from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

from ..constants import STAKING_LP_POOL_ID, UINT256_MAX
from ..exceptions import ConfigurationError
from ..logger import get_logger
from .registry import AddressDirectory, AddressKey, ParameterKey, ParameterStore

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  COLLABORATOR INTERFACES
# ══════════════════════════════════════════════════════════════════════

@runtime_checkable
class StakingLedger(Protocol):
    """Read-only view of the staking wrapper."""

    def get_staked_amount(self, address: str) -> int: ...

    def get_accelerated_amount(self, address: str) -> int: ...

    def get_pool_share_amount(self, address: str, pool_id: int) -> int: ...


@runtime_checkable
class AmmPair(Protocol):
    """Read-only view of the DFT/x AMM pair."""

    def get_reserves(self) -> Tuple[int, int]: ...

    def token0(self) -> str: ...

    def total_supply(self) -> int: ...


class CollaboratorRegistry:
    """
    Address → collaborator object lookup.

    Stands in for the chain's account space: the ledger only stores
    addresses, and resolves them here when it needs to read.
    """

    def __init__(self, collaborators: Optional[Dict[str, Any]] = None):
        self._by_address: Dict[str, Any] = {}
        for address, obj in (collaborators or {}).items():
            self.register(address, obj)

    @staticmethod
    def _key(address: str) -> str:
        return address.lower()

    def register(self, address: str, collaborator: Any) -> None:
        self._by_address[self._key(address)] = collaborator
        logger.debug(f"Collaborator registered at {address}: {type(collaborator).__name__}")

    def unregister(self, address: str) -> None:
        self._by_address.pop(self._key(address), None)

    def get(self, address: str) -> Optional[Any]:
        return self._by_address.get(self._key(address))

    def resolve(self, address: str, expected: type) -> Any:
        obj = self.get(address)
        if obj is None:
            raise ConfigurationError(f"No collaborator deployed at {address}")
        if not isinstance(obj, expected):
            raise ConfigurationError(
                f"Collaborator at {address} does not implement {expected.__name__}"
            )
        return obj

    def __len__(self) -> int:
        return len(self._by_address)


def _as_amount(value: Any, source: str) -> int:
    """Collaborator results are untrusted: insist on a uint256."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT256_MAX:
        raise ConfigurationError(f"{source} returned an invalid amount: {value!r}")
    return value


# ══════════════════════════════════════════════════════════════════════
#  ORACLE
# ══════════════════════════════════════════════════════════════════════

class VoteWeightOracle:
    """
    Computes DFT holdings and voting weight from external collaborators.

    Every call reads the collaborators afresh; nothing is cached.
    """

    def __init__(
        self,
        parameters: ParameterStore,
        addresses: AddressDirectory,
        collaborators: CollaboratorRegistry,
        lp_pool_id: int = STAKING_LP_POOL_ID,
    ):
        self._parameters = parameters
        self._addresses = addresses
        self._collaborators = collaborators
        self.lp_pool_id = lp_pool_id

    def _staking(self) -> StakingLedger:
        address = self._addresses.get(AddressKey.STAKING_WRAPPER)
        if address is None:
            raise ConfigurationError("Staking wrapper address is not configured")
        return self._collaborators.resolve(address, StakingLedger)

    def _pool_amount(self, voter: str, staking: StakingLedger) -> int:
        """
        DFT value of the voter's staked LP shares.

        share * dft_reserve // total_supply, i.e. what the shares would
        redeem for on the DFT side of the pair. 0 when no pair is configured.
        """
        pair_address = self._addresses.get(AddressKey.AMM_PAIR)
        if pair_address is None:
            return 0
        pair = self._collaborators.resolve(pair_address, AmmPair)

        share = _as_amount(
            staking.get_pool_share_amount(voter, self.lp_pool_id), "get_pool_share_amount"
        )
        reserves = pair.get_reserves()
        reserve0 = _as_amount(reserves[0], "get_reserves")
        reserve1 = _as_amount(reserves[1], "get_reserves")
        total_supply = _as_amount(pair.total_supply(), "total_supply")
        if total_supply == 0:
            return 0

        dft_token = self._addresses.get(AddressKey.DFT_TOKEN)
        token0 = pair.token0()
        if dft_token is not None and isinstance(token0, str) and token0.lower() == dft_token.lower():
            dft_reserve = reserve0
        else:
            dft_reserve = reserve1
        return share * dft_reserve // total_supply

    def get_dft_amount(self, voter: str) -> int:
        staking = self._staking()
        staked = _as_amount(staking.get_staked_amount(voter), "get_staked_amount")
        accelerated = _as_amount(staking.get_accelerated_amount(voter), "get_accelerated_amount")
        return staked + accelerated + self._pool_amount(voter, staking)

    def get_votes(self, voter: str) -> int:
        divisor = self._parameters.get(ParameterKey.DFT_PER_VOTE)
        if divisor == 0:
            raise ConfigurationError("dftPerVote is zero; voting weight is undefined")
        return self.get_dft_amount(voter) // divisor
