"""
Governance Proposals

Defines the proposal record, per-voter receipts, and the lifecycle state
function. Lifecycle is never stored: state() is recomputed from the record
and the current time on every read.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from ..constants import UINT256_MAX
from ..exceptions import InvalidProposalIdError, InvariantViolation
from .journal import Journal
from .registry import require_uint


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalState(IntEnum):
    """Derived lifecycle stage."""
    PENDING = 0     # Before start_timestamp
    ACTIVE = 1      # Voting window open
    DEFEATED = 2    # Window closed, for <= against (ties defeat)
    SUCCEED = 3     # Window closed, for > against
    CANCELED = 4    # Canceled by admin; overrides timing


# ══════════════════════════════════════════════════════════════════════
#  RECORDS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProposalInfo:
    """Admin-supplied input to propose()."""
    description: str
    start_timestamp: int
    end_timestamp: int

    def __post_init__(self):
        if not isinstance(self.description, str):
            raise TypeError("description must be a string")
        require_uint(self.start_timestamp, "start_timestamp")
        require_uint(self.end_timestamp, "end_timestamp")


@dataclass
class Receipt:
    """A voter's recorded for/against amounts on one proposal."""
    for_votes: int = 0
    against_votes: int = 0

    @property
    def total(self) -> int:
        return self.for_votes + self.against_votes

    @property
    def is_empty(self) -> bool:
        return self.for_votes == 0 and self.against_votes == 0

    def to_dict(self) -> Dict[str, int]:
        return {"forVotes": self.for_votes, "againstVotes": self.against_votes}


@dataclass
class Proposal:
    """
    Governance proposal record.

    Fields:
        id:               Sequential id, starting at 1
        proposer:         Admin address that created it
        description:      Free text
        start_timestamp:  Voting opens at this time (inclusive)
        end_timestamp:    Voting closes at this time (exclusive)
        for_votes:        Sum of all receipts' for_votes
        against_votes:    Sum of all receipts' against_votes
        voter_count:      Distinct voters with a non-empty receipt
        canceled:         Set by cancel()
        executed:         Part of the record; nothing in this ledger sets it
        receipts:         voter → Receipt
    """
    id: int
    proposer: str
    description: str
    start_timestamp: int
    end_timestamp: int
    for_votes: int = 0
    against_votes: int = 0
    voter_count: int = 0
    canceled: bool = False
    executed: bool = False
    receipts: Dict[str, Receipt] = field(default_factory=dict, repr=False)

    def receipt(self, voter: str) -> Receipt:
        """Copy of ``voter``'s receipt (zero receipt if they never voted)."""
        r = self.receipts.get(voter)
        if r is None:
            return Receipt()
        return Receipt(r.for_votes, r.against_votes)

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "proposer": self.proposer,
            "description": self.description,
            "startTimestamp": self.start_timestamp,
            "endTimestamp": self.end_timestamp,
            "forVotes": self.for_votes,
            "againstVotes": self.against_votes,
            "voterCount": self.voter_count,
            "canceled": self.canceled,
            "executed": self.executed,
            "receipts": {v: r.to_dict() for v, r in self.receipts.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        return cls(
            id=int(data["id"]),
            proposer=data["proposer"],
            description=data.get("description", ""),
            start_timestamp=int(data["startTimestamp"]),
            end_timestamp=int(data["endTimestamp"]),
            for_votes=int(data.get("forVotes", 0)),
            against_votes=int(data.get("againstVotes", 0)),
            voter_count=int(data.get("voterCount", 0)),
            canceled=bool(data.get("canceled", False)),
            executed=bool(data.get("executed", False)),
            receipts={
                v: Receipt(int(r.get("forVotes", 0)), int(r.get("againstVotes", 0)))
                for v, r in data.get("receipts", {}).items()
            },
        )

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} for={self.for_votes} against={self.against_votes} "
            f"voters={self.voter_count} canceled={self.canceled}>"
        )


def proposal_state(proposal: Proposal, now: int) -> ProposalState:
    """Lifecycle stage of ``proposal`` at time ``now``."""
    if proposal.canceled:
        return ProposalState.CANCELED
    if now < proposal.start_timestamp:
        return ProposalState.PENDING
    if now < proposal.end_timestamp:
        return ProposalState.ACTIVE
    if proposal.for_votes <= proposal.against_votes:
        return ProposalState.DEFEATED
    return ProposalState.SUCCEED


# ══════════════════════════════════════════════════════════════════════
#  REGISTRY
# ══════════════════════════════════════════════════════════════════════

class ProposalRegistry:
    """
    Proposal table keyed by id.

    Ids come from a monotonic counter: the first proposal is 1, and an id is
    never reused. Proposals are never deleted.
    """

    def __init__(self, journal: Optional[Journal] = None):
        self._journal = journal if journal is not None else Journal()
        self._proposals: Dict[int, Proposal] = {}
        self._count: int = 0

    @property
    def count(self) -> int:
        return self._count

    def require(self, proposal_id: int) -> Proposal:
        """Stored proposal for ``proposal_id``; InvalidProposalIdError if out of range."""
        if (
            isinstance(proposal_id, bool)
            or not isinstance(proposal_id, int)
            or not 1 <= proposal_id <= self._count
        ):
            raise InvalidProposalIdError(proposal_id, self._count)
        return self._proposals[proposal_id]

    def create(self, proposer: str, info: ProposalInfo) -> Proposal:
        self._journal.record_attrs(self, "_count")
        self._count += 1
        self._journal.record_item(self._proposals, self._count)
        proposal = Proposal(
            id=self._count,
            proposer=proposer,
            description=info.description,
            start_timestamp=info.start_timestamp,
            end_timestamp=info.end_timestamp,
        )
        self._proposals[proposal.id] = proposal
        return proposal

    def cancel(self, proposal_id: int) -> Proposal:
        proposal = self.require(proposal_id)
        self._journal.record_attrs(proposal, "canceled")
        proposal.canceled = True
        return proposal

    def change_end_timestamp(self, proposal_id: int, new_end: int) -> int:
        """Returns the previous end timestamp."""
        proposal = self.require(proposal_id)
        require_uint(new_end, "end_timestamp")
        self._journal.record_attrs(proposal, "end_timestamp")
        previous, proposal.end_timestamp = proposal.end_timestamp, new_end
        return previous

    def state(self, proposal_id: int, now: int) -> ProposalState:
        return proposal_state(self.require(proposal_id), now)

    def apply_vote(self, proposal_id: int, voter: str, support: bool, amount: int) -> Receipt:
        """
        Add ``amount`` to ``voter``'s receipt and the proposal tally.

        Counts the voter the first time their receipt becomes non-empty.
        Callers must have validated membership, state and weight already.
        """
        proposal = self.require(proposal_id)
        receipt = proposal.receipts.get(voter)
        first_vote = receipt is None or receipt.is_empty

        if support:
            new_side = (receipt.for_votes if receipt else 0) + amount
            new_total = proposal.for_votes + amount
        else:
            new_side = (receipt.against_votes if receipt else 0) + amount
            new_total = proposal.against_votes + amount
        if new_side > UINT256_MAX or new_total > UINT256_MAX:
            raise InvariantViolation(
                f"Tally overflow on proposal #{proposal_id} "
                f"(receipt={new_side}, total={new_total})"
            )

        self._journal.record_attrs(proposal, "for_votes", "against_votes", "voter_count")
        if receipt is None:
            self._journal.record_item(proposal.receipts, voter)
            receipt = proposal.receipts[voter] = Receipt()
        else:
            self._journal.record_attrs(receipt, "for_votes", "against_votes")
        if support:
            receipt.for_votes = new_side
            proposal.for_votes = new_total
        else:
            receipt.against_votes = new_side
            proposal.against_votes = new_total
        if first_vote and not receipt.is_empty:
            proposal.voter_count += 1
        return Receipt(receipt.for_votes, receipt.against_votes)

    def aggregate(self, proposal_id: int) -> Tuple[int, int, int]:
        p = self.require(proposal_id)
        return p.voter_count, p.for_votes, p.against_votes

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalCount": self._count,
            "proposals": [self._proposals[i].to_dict() for i in range(1, self._count + 1)],
        }

    def load(self, data: Dict[str, Any]) -> None:
        proposals = [Proposal.from_dict(p) for p in data.get("proposals", [])]
        count = int(data.get("proposalCount", len(proposals)))
        ids = [p.id for p in proposals]
        if ids != list(range(1, count + 1)):
            raise ValueError(f"proposal ids must be dense 1..{count}, got {ids}")
        self._proposals = {p.id: p for p in proposals}
        self._count = count

    def __repr__(self) -> str:
        return f"<ProposalRegistry proposals={self._count}>"
