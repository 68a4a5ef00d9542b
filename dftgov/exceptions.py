"""
DFT Governor Exceptions

Every caller-facing failure raised by the ledger derives from GovernorError.
A failed operation leaves the ledger exactly as it was before the call.
"""


class GovernorError(Exception):
    """Base exception for the governor ledger."""
    pass


class AlreadyInitializedError(GovernorError):
    """initialize() was called on a ledger that is already initialized."""
    pass


class NotAuthorizedError(GovernorError):
    """Caller lacks the owner or admin capability."""
    pass


class ZeroAddressError(GovernorError):
    """Owner or admin would be set to the zero address."""
    pass


class InvalidAddressError(GovernorError):
    """Value is not a valid hex address."""
    pass


class InvalidProposalIdError(GovernorError):
    """Proposal id is outside [1, proposal_count]."""

    def __init__(self, proposal_id, proposal_count: int):
        super().__init__(
            f"Invalid proposal id {proposal_id!r} (valid range 1..{proposal_count})"
        )
        self.proposal_id = proposal_id
        self.proposal_count = proposal_count


class NotGovernorMemberError(GovernorError):
    """Voter has not joined the governor."""
    pass


class ProposalNotActiveError(GovernorError):
    """Proposal is not in its voting window."""

    def __init__(self, proposal_id: int, state):
        super().__init__(f"Proposal #{proposal_id} is not active (state={state.name})")
        self.proposal_id = proposal_id
        self.state = state


class VoteExceedsWeightError(GovernorError):
    """Cumulative receipt would exceed the voter's current weight."""

    def __init__(self, voter: str, proposal_id: int, requested: int, weight: int):
        super().__init__(
            f"{voter} cannot place {requested} votes on proposal #{proposal_id} "
            f"(current weight {weight})"
        )
        self.voter = voter
        self.proposal_id = proposal_id
        self.requested = requested
        self.weight = weight


class InvalidVoteAmountError(GovernorError):
    """Vote amount is not a positive integer."""
    pass


class CannotExitError(GovernorError):
    """Member may not leave the governor yet. ``check`` holds the reason."""

    def __init__(self, check):
        super().__init__(f"Cannot exit governor: {check}")
        self.check = check


class ReentrancyError(GovernorError):
    """A collaborator tried to mutate the ledger from inside an operation."""
    pass


class ConfigurationError(GovernorError):
    """Ledger parameters or collaborator addresses are unusable."""
    pass


class StateFileError(GovernorError):
    """Persisted ledger state could not be read."""
    pass


class InvariantViolation(AssertionError):
    """
    A ledger invariant broke (e.g. a tally left the uint256 range).

    Not a GovernorError: this signals an impossible state, not a bad request.
    """
    pass
