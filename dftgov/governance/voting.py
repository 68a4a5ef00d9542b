"""
Token-weighted voting engine.

A member may split their weight across for/against on a proposal and vote
several times, as long as the receipt total never exceeds the weight read
at the moment of the vote. Each vote pushes the member's exit lock out to
the proposal's end plus the configured delay.
"""

from typing import Callable

from ..constants import UINT256_MAX
from ..exceptions import (
    InvalidVoteAmountError,
    NotGovernorMemberError,
    ProposalNotActiveError,
    VoteExceedsWeightError,
)
from ..logger import get_logger
from .events import VoteCast
from .membership import MembershipRegistry
from .oracle import VoteWeightOracle
from .proposals import ProposalRegistry, ProposalState
from .registry import ParameterKey, ParameterStore

logger = get_logger(__name__)


class VotingEngine:
    """
    Orchestrates a vote: membership check, state check, weight check,
    receipt/tally update, lock extension.

    All checks, including the single oracle read, complete before the first
    mutation. The caller (GovernorLedger) provides atomicity and
    serialization around cast_vote().
    """

    def __init__(
        self,
        membership: MembershipRegistry,
        proposals: ProposalRegistry,
        oracle: VoteWeightOracle,
        parameters: ParameterStore,
        clock: Callable[[], int],
    ):
        self._membership = membership
        self._proposals = proposals
        self._oracle = oracle
        self._parameters = parameters
        self._clock = clock

    def cast_vote(self, voter: str, proposal_id: int, support: bool, amount: int) -> VoteCast:
        """
        Record ``amount`` votes by ``voter`` on ``proposal_id``.

        A zero amount is refused with InvalidVoteAmountError even though it
        would fit the voter's weight. Accepting it would extend the voter's
        lock and store an empty receipt, and ``voter_count`` would then no
        longer equal the number of non-empty receipts.

        Args:
            voter: Normalized voter address
            proposal_id: Target proposal
            support: True for, False against
            amount: Positive number of votes to add

        Raises:
            InvalidVoteAmountError, NotGovernorMemberError,
            ProposalNotActiveError, InvalidProposalIdError,
            VoteExceedsWeightError
        """
        if not isinstance(support, bool):
            raise InvalidVoteAmountError(f"support must be a bool, got {support!r}")
        if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= UINT256_MAX:
            raise InvalidVoteAmountError(f"Vote amount must be a positive integer, got {amount!r}")

        if not self._membership.is_in_governor(voter):
            raise NotGovernorMemberError(f"{voter} has not joined the governor")

        now = self._clock()
        state = self._proposals.state(proposal_id, now)
        if state != ProposalState.ACTIVE:
            raise ProposalNotActiveError(proposal_id, state)

        proposal = self._proposals.require(proposal_id)
        receipt = proposal.receipt(voter)

        # Single snapshot of external holdings; not re-read below.
        weight = self._oracle.get_votes(voter)
        if receipt.total + amount > weight:
            raise VoteExceedsWeightError(voter, proposal_id, receipt.total + amount, weight)

        updated = self._proposals.apply_vote(proposal_id, voter, support, amount)
        deadline = self._membership.extend_lock(
            voter,
            proposal.end_timestamp,
            self._parameters.get(ParameterKey.DELAY_AFTER_DEADLINE),
        )

        logger.info(
            f"VoteCast: {voter} → {'FOR' if support else 'AGAINST'} {amount} on proposal "
            f"#{proposal_id} (receipt {updated.for_votes}/{updated.against_votes}, "
            f"weight={weight}, locked until {deadline})"
        )
        return VoteCast(
            voter=voter,
            proposal_id=proposal_id,
            support=support,
            amount=amount,
            timestamp=now,
        )
