"""
DFT Governor — token-weighted governance

Provides:
  - AccessControl                              (access.py)
  - ParameterStore / AddressDirectory          (registry.py)
  - Member / ExitCheck / MembershipRegistry    (membership.py)
  - Proposal / Receipt / ProposalState         (proposals.py)
  - VoteWeightOracle / CollaboratorRegistry    (oracle.py)
  - VotingEngine                               (voting.py)
  - Journal                                    (journal.py)
  - GovernorLedger                             (ledger.py)
"""

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
    VoteCast,
)
from .ledger import GovernorLedger
from .membership import ExitCheck, ExitStatus, Member, MembershipRegistry
from .oracle import AmmPair, CollaboratorRegistry, StakingLedger, VoteWeightOracle
from .proposals import (
    Proposal,
    ProposalInfo,
    ProposalRegistry,
    ProposalState,
    Receipt,
    proposal_state,
)
from .registry import AddressDirectory, AddressKey, ParameterKey, ParameterStore
from .voting import VotingEngine

__all__ = [
    # Access & configuration tables
    "AccessControl",
    "AddressDirectory",
    "AddressKey",
    "ParameterKey",
    "ParameterStore",
    # Membership
    "ExitCheck",
    "ExitStatus",
    "Member",
    "MembershipRegistry",
    # Proposals
    "Proposal",
    "ProposalInfo",
    "ProposalRegistry",
    "ProposalState",
    "Receipt",
    "proposal_state",
    # Voting
    "AmmPair",
    "CollaboratorRegistry",
    "StakingLedger",
    "VoteWeightOracle",
    "VotingEngine",
    # Ledger
    "GovernorLedger",
    "Journal",
    # Events
    "AddressSet",
    "AdminSet",
    "GovernorExit",
    "GovernorJoin",
    "OwnershipTransferred",
    "ParameterSet",
    "ProposalCanceled",
    "ProposalCreated",
    "ProposalEndTimestampChanged",
    "VoteCast",
]
