"""
Governor events

Observable side effects of ledger operations. An event is appended to the
ledger's log only when the operation that produced it completes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class OwnershipTransferred:
    """Emitted when the owner changes (including at initialization)."""
    previous_owner: Optional[str]
    new_owner: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "OwnershipTransferred",
            "previousOwner": self.previous_owner,
            "newOwner": self.new_owner,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AdminSet:
    """Emitted when the admin changes (including at initialization)."""
    previous_admin: Optional[str]
    new_admin: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "AdminSet",
            "previousAdmin": self.previous_admin,
            "newAdmin": self.new_admin,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ParameterSet:
    key: str
    value: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ParameterSet",
            "key": self.key,
            "value": self.value,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AddressSet:
    key: str
    value: Optional[str]
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "AddressSet",
            "key": self.key,
            "value": self.value,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class GovernorJoin:
    member: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "GovernorJoin", "member": self.member, "timestamp": self.timestamp}


@dataclass(frozen=True)
class GovernorExit:
    member: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"event": "GovernorExit", "member": self.member, "timestamp": self.timestamp}


@dataclass(frozen=True)
class ProposalCreated:
    proposal_id: int
    proposer: str
    description: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalCreated",
            "proposalId": self.proposal_id,
            "proposer": self.proposer,
            "description": self.description,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalCanceled:
    proposal_id: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalCanceled",
            "proposalId": self.proposal_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalEndTimestampChanged:
    """Emitted by the admin escape hatch that moves a proposal's end time."""
    proposal_id: int
    previous_end: int
    new_end: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalEndTimestampChanged",
            "proposalId": self.proposal_id,
            "previousEnd": self.previous_end,
            "newEnd": self.new_end,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class VoteCast:
    """Emitted on every accepted vote."""
    voter: str
    proposal_id: int
    support: bool
    amount: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "VoteCast",
            "voter": self.voter,
            "proposalId": self.proposal_id,
            "support": self.support,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }
