"""
Governor Ledger

The store/context object that owns all persisted governor state and exposes
the public operation surface.

Execution model:
  - Operations are serialized by a re-entrant lock.
  - Every mutating operation is all-or-nothing: the registries journal each
    in-place change, the journal is rolled back if anything raises, and
    the operation's events are published only when it completes.
  - While an operation is in flight the ledger is marked busy, so a
    collaborator that calls back into a mutating operation during an
    oracle read gets ReentrancyError instead of a nested mutation.
"""

import hashlib
import json
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from ..address import is_zero_address, normalize_address
from ..config import GovernorConfig
from ..exceptions import (
    AlreadyInitializedError,
    CannotExitError,
    ConfigurationError,
    GovernorError,
    ReentrancyError,
    StateFileError,
    ZeroAddressError,
)
from ..logger import get_logger
from .access import AccessControl
from .journal import Journal
from .events import (
    AddressSet,
    AdminSet,
    GovernorExit,
    GovernorJoin,
    OwnershipTransferred,
    ParameterSet,
    ProposalCanceled,
    ProposalCreated,
    ProposalEndTimestampChanged,
)
from .membership import ExitCheck, Member, MembershipRegistry
from .oracle import CollaboratorRegistry, VoteWeightOracle
from .proposals import Proposal, ProposalInfo, ProposalRegistry, ProposalState, Receipt
from .registry import (
    AddressDirectory,
    AddressKey,
    ParameterKey,
    ParameterStore,
    address_key,
    parameter_key,
)
from .voting import VotingEngine

logger = get_logger(__name__)

STATE_VERSION = 1


def _system_clock() -> int:
    return int(time.time())


class GovernorLedger:
    """
    Token-weighted governance ledger.

    Usage:

        ledger = GovernorLedger(collaborators=registry, clock=clock)
        ledger.initialize(deployer)
        ledger.set_address(deployer, AddressKey.STAKING_WRAPPER, staking_addr)
        pid = ledger.propose(deployer, ProposalInfo("raise cap", start, end))
        ledger.join_governor(alice)
        ledger.vote(alice, pid, True, 10)
    """

    def __init__(
        self,
        config: Optional[GovernorConfig] = None,
        collaborators: Optional[CollaboratorRegistry] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            config: Defaults applied by initialize(); library defaults if None
            collaborators: Resolves staking wrapper / AMM pair addresses
            clock: Callable returning the current time in integer seconds
        """
        self.config = config or GovernorConfig()
        self.collaborators = collaborators if collaborators is not None else CollaboratorRegistry()
        self._clock = clock or _system_clock

        # Persisted state
        self._journal = Journal()
        self._access = AccessControl(self._journal)
        self._parameters = ParameterStore(self._journal)
        self._addresses = AddressDirectory(self._journal)
        self._proposals = ProposalRegistry(self._journal)
        self._members = MembershipRegistry(self._journal)

        self._oracle = VoteWeightOracle(
            self._parameters,
            self._addresses,
            self.collaborators,
            lp_pool_id=self.config.staking.lp_pool_id,
        )
        self._engine = VotingEngine(
            self._members, self._proposals, self._oracle, self._parameters, self.now
        )

        # Execution control
        self._lock = threading.RLock()
        self._busy = False
        self._pending_events: List[Any] = []
        self._events: List[Any] = []

    # ── Execution model ───────────────────────────────────────────────

    def now(self) -> int:
        return int(self._clock())

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._busy:
                raise ReentrancyError(f"{operation} called while another operation is in flight")
            self._busy = True
            self._pending_events = []
            self._journal.begin()
            try:
                yield
            except BaseException as e:
                self._journal.rollback()
                self._pending_events = []
                if isinstance(e, GovernorError):
                    logger.debug(f"{operation} rejected: {e}")
                raise
            else:
                self._journal.commit()
                self._events.extend(self._pending_events)
                self._pending_events = []
            finally:
                self._busy = False

    def _emit(self, event: Any) -> None:
        self._pending_events.append(event)

    @staticmethod
    def _address_arg(address: Optional[str]) -> str:
        """Normalize an identity argument; zero/empty is rejected."""
        if is_zero_address(address):
            raise ZeroAddressError("Address must not be zero")
        return normalize_address(address)

    # ── Access control ────────────────────────────────────────────────

    def initialize(self, caller: str) -> None:
        """
        One-time setup: owner = admin = caller, default parameters, and any
        collaborator addresses present in the config.
        """
        with self._transaction("initialize"):
            if self._access.initialized:
                raise AlreadyInitializedError("Governor is already initialized")
            caller = self._address_arg(caller)
            self._access.initialize(caller)

            params = self.config.parameters
            self._parameters.set(ParameterKey.DELAY_AFTER_DEADLINE, params.delay_after_deadline)
            self._parameters.set(ParameterKey.DFT_PER_VOTE, params.dft_per_vote)

            addrs = self.config.addresses
            for key, value in (
                (AddressKey.STAKING_WRAPPER, addrs.staking_wrapper),
                (AddressKey.AMM_PAIR, addrs.amm_pair),
                (AddressKey.DFT_TOKEN, addrs.dft_token),
            ):
                if not is_zero_address(value):
                    self._addresses.set(key, normalize_address(value))

            now = self.now()
            self._emit(OwnershipTransferred(None, caller, timestamp=now))
            self._emit(AdminSet(None, caller, timestamp=now))
            logger.info(f"Governor initialized by {caller}")

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._transaction("transfer_ownership"):
            self._access.require_owner(normalize_address(caller))
            new_owner = self._address_arg(new_owner)
            previous = self._access.transfer_ownership(new_owner)
            self._emit(OwnershipTransferred(previous, new_owner, timestamp=self.now()))
            logger.info(f"OwnershipTransferred: {previous} → {new_owner}")

    def set_admin(self, caller: str, new_admin: str) -> None:
        with self._transaction("set_admin"):
            self._access.require_owner(normalize_address(caller))
            new_admin = self._address_arg(new_admin)
            previous = self._access.set_admin(new_admin)
            self._emit(AdminSet(previous, new_admin, timestamp=self.now()))
            logger.info(f"AdminSet: {previous} → {new_admin}")

    @property
    def owner(self) -> Optional[str]:
        return self._access.owner

    @property
    def admin(self) -> Optional[str]:
        return self._access.admin

    @property
    def initialized(self) -> bool:
        return self._access.initialized

    # ── Parameters & addresses ────────────────────────────────────────

    def set_parameter(self, caller: str, key: Union[ParameterKey, str], value: int) -> None:
        with self._transaction("set_parameter"):
            self._access.require_admin(normalize_address(caller))
            k = parameter_key(key)
            self._parameters.set(k, value)
            self._emit(ParameterSet(k.value, value, timestamp=self.now()))
            logger.info(f"ParameterSet: {k.value} = {value}")

    def set_address(self, caller: str, key: Union[AddressKey, str], value: Optional[str]) -> None:
        """Zero/empty ``value`` clears the entry."""
        with self._transaction("set_address"):
            self._access.require_admin(normalize_address(caller))
            k = address_key(key)
            stored = None if is_zero_address(value) else normalize_address(value)
            self._addresses.set(k, stored)
            self._emit(AddressSet(k.value, stored, timestamp=self.now()))
            logger.info(f"AddressSet: {k.value} = {stored}")

    def get_parameter(self, key: Union[ParameterKey, str]) -> int:
        return self._parameters.get(key)

    def get_address(self, key: Union[AddressKey, str]) -> Optional[str]:
        return self._addresses.get(key)

    # ── Membership ────────────────────────────────────────────────────

    def join_governor(self, caller: str) -> None:
        with self._transaction("join_governor"):
            caller = normalize_address(caller)
            self._members.join(caller)
            self._emit(GovernorJoin(caller, timestamp=self.now()))
            logger.info(f"GovernorJoin: {caller}")

    def exit_governor(self, caller: str) -> None:
        with self._transaction("exit_governor"):
            caller = normalize_address(caller)
            check = self._members.can_exit(caller, self.now())
            if not check.eligible:
                raise CannotExitError(check)
            self._members.exit(caller)
            self._emit(GovernorExit(caller, timestamp=self.now()))
            logger.info(f"GovernorExit: {caller}")

    def is_in_governor(self, address: str) -> bool:
        return self._members.is_in_governor(normalize_address(address))

    def can_exit_governor(self, address: str) -> ExitCheck:
        with self._lock:
            return self._members.can_exit(normalize_address(address), self.now())

    def get_member(self, address: str) -> Member:
        return self._members.get(normalize_address(address))

    # ── Proposals ─────────────────────────────────────────────────────

    def propose(self, caller: str, info: ProposalInfo) -> int:
        with self._transaction("propose"):
            caller = normalize_address(caller)
            self._access.require_admin(caller)
            proposal = self._proposals.create(caller, info)
            self._emit(ProposalCreated(proposal.id, caller, info.description, timestamp=self.now()))
            logger.info(
                f"ProposalCreated: #{proposal.id} by {caller} "
                f"[{info.start_timestamp}, {info.end_timestamp})"
            )
            return proposal.id

    def cancel(self, caller: str, proposal_id: int) -> None:
        with self._transaction("cancel"):
            self._access.require_admin(normalize_address(caller))
            self._proposals.cancel(proposal_id)
            self._emit(ProposalCanceled(proposal_id, timestamp=self.now()))
            logger.info(f"ProposalCanceled: #{proposal_id}")

    def change_propose_end_timestamp(self, caller: str, proposal_id: int, new_end: int) -> None:
        with self._transaction("change_propose_end_timestamp"):
            self._access.require_admin(normalize_address(caller))
            previous = self._proposals.change_end_timestamp(proposal_id, new_end)
            self._emit(
                ProposalEndTimestampChanged(proposal_id, previous, new_end, timestamp=self.now())
            )
            logger.warning(f"Proposal #{proposal_id} end moved {previous} → {new_end}")

    def state(self, proposal_id: int) -> ProposalState:
        with self._lock:
            return self._proposals.state(proposal_id, self.now())

    @property
    def proposal_count(self) -> int:
        return self._proposals.count

    def get_proposal(self, proposal_id: int) -> Proposal:
        """Detached copy of the proposal record."""
        with self._lock:
            return Proposal.from_dict(self._proposals.require(proposal_id).to_dict())

    def get_receipt(self, proposal_id: int, voter: str) -> Receipt:
        with self._lock:
            return self._proposals.require(proposal_id).receipt(normalize_address(voter))

    # ── Voting ────────────────────────────────────────────────────────

    def vote(self, caller: str, proposal_id: int, support: bool, amount: int) -> None:
        with self._transaction("vote"):
            event = self._engine.cast_vote(normalize_address(caller), proposal_id, support, amount)
            self._emit(event)

    def get_votes(self, address: str) -> int:
        return self._oracle.get_votes(normalize_address(address))

    def get_dft_amount(self, address: str) -> int:
        return self._oracle.get_dft_amount(normalize_address(address))

    # ── Aggregation views ─────────────────────────────────────────────

    def aggregate_proposal_info(self, proposal_id: int) -> Tuple[int, int, int]:
        """(voter_count, for_votes, against_votes)"""
        with self._lock:
            return self._proposals.aggregate(proposal_id)

    def aggregate_proposal_voter_info(self, address: str, proposal_id: int) -> Tuple[int, int, int]:
        """(current weight, receipt for_votes, receipt against_votes)"""
        voter = normalize_address(address)
        with self._lock:
            receipt = self._proposals.require(proposal_id).receipt(voter)
        return self._oracle.get_votes(voter), receipt.for_votes, receipt.against_votes

    # ── Events ────────────────────────────────────────────────────────

    @property
    def events(self) -> List[Any]:
        return list(self._events)

    # ── Persistence ───────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Full persisted state (parameter/address tables, identities, proposals, members)."""
        return {
            "version": STATE_VERSION,
            **self._access.to_dict(),
            "parameters": self._parameters.to_dict(),
            "addresses": self._addresses.to_dict(),
            **self._proposals.to_dict(),
            "members": self._members.to_dict(),
        }

    def _load_state(self, data: Dict[str, Any]) -> None:
        self._access.load(data)
        self._parameters.load(data.get("parameters", {}))
        self._addresses.load(data.get("addresses", {}))
        self._proposals.load(data)
        self._members.load(data.get("members", {}))

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[GovernorConfig] = None,
        collaborators: Optional[CollaboratorRegistry] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "GovernorLedger":
        if data.get("version") != STATE_VERSION:
            raise StateFileError(f"Unsupported state version: {data.get('version')!r}")
        ledger = cls(config=config, collaborators=collaborators, clock=clock)
        try:
            ledger._load_state(data)
        except (AttributeError, KeyError, TypeError, ValueError, ConfigurationError) as e:
            raise StateFileError(f"Malformed governor state: {e}") from e
        return ledger

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with self._lock:
            payload = json.dumps(self.to_dict(), indent=2, sort_keys=True)
        path.write_text(payload, encoding="utf-8")
        logger.debug(f"Governor state written to {path}")

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        config: Optional[GovernorConfig] = None,
        collaborators: Optional[CollaboratorRegistry] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "GovernorLedger":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StateFileError(f"Cannot read governor state {path}: {e}") from e
        if not isinstance(data, dict):
            raise StateFileError(f"Governor state {path} is not a JSON object")
        return cls.from_dict(data, config=config, collaborators=collaborators, clock=clock)

    def compute_state_root(self) -> str:
        """
        Deterministic commitment to the persisted state.

        Returns:
            64-char hex string (blake2b-256)
        """
        with self._lock:
            canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.blake2b(canonical.encode(), digest_size=32).hexdigest()

    def __repr__(self) -> str:
        return (
            f"<GovernorLedger owner={self.owner} proposals={self.proposal_count} "
            f"members={self._members.count}>"
        )
