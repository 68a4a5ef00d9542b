"""
Governor membership — join / exit lifecycle and vote locks.

A member who votes is locked in until the voted proposal's end time plus
the configured delay; the lock only ever moves forward.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

from ..constants import UINT256_MAX
from ..exceptions import ConfigurationError
from .journal import Journal


@dataclass
class Member:
    joined: bool = False
    locked_deadline: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"joined": self.joined, "lockedDeadline": self.locked_deadline}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Member":
        return cls(
            joined=bool(data.get("joined", False)),
            locked_deadline=int(data.get("lockedDeadline", 0)),
        )


class ExitStatus(IntEnum):
    ELIGIBLE = 0
    NOT_IN_GOVERNOR = 1
    LOCKED_UNTIL = 2


@dataclass(frozen=True)
class ExitCheck:
    """Result of can_exit_governor(). ``deadline`` is set for LOCKED_UNTIL."""
    status: ExitStatus
    deadline: Optional[int] = None

    @property
    def eligible(self) -> bool:
        return self.status == ExitStatus.ELIGIBLE

    def __str__(self) -> str:
        if self.status == ExitStatus.LOCKED_UNTIL:
            return f"LockedUntil({self.deadline})"
        if self.status == ExitStatus.NOT_IN_GOVERNOR:
            return "NotInGovernor"
        return "Eligible"


class MembershipRegistry:

    def __init__(self, journal: Optional[Journal] = None):
        self._journal = journal if journal is not None else Journal()
        self._members: Dict[str, Member] = {}

    def get(self, voter: str) -> Member:
        """Copy of the member record (default record if never joined)."""
        m = self._members.get(voter)
        if m is None:
            return Member()
        return Member(joined=m.joined, locked_deadline=m.locked_deadline)

    def is_in_governor(self, voter: str) -> bool:
        m = self._members.get(voter)
        return m is not None and m.joined

    def can_exit(self, voter: str, now: int) -> ExitCheck:
        m = self._members.get(voter)
        if m is None or not m.joined:
            return ExitCheck(ExitStatus.NOT_IN_GOVERNOR)
        if now < m.locked_deadline:
            return ExitCheck(ExitStatus.LOCKED_UNTIL, m.locked_deadline)
        return ExitCheck(ExitStatus.ELIGIBLE)

    def join(self, voter: str) -> None:
        m = self._members.get(voter)
        if m is None:
            self._journal.record_item(self._members, voter)
            m = self._members[voter] = Member()
        else:
            self._journal.record_attrs(m, "joined")
        m.joined = True

    def exit(self, voter: str) -> None:
        m = self._members[voter]
        self._journal.record_attrs(m, "joined")
        m.joined = False

    def extend_lock(self, voter: str, proposal_end: int, delay: int) -> int:
        """Ratchet the voter's lock to ``proposal_end + delay``; returns the new deadline."""
        m = self._members[voter]
        target = proposal_end + delay
        if target > UINT256_MAX:
            raise ConfigurationError(f"lock deadline for {voter} overflows uint256: {target}")
        self._journal.record_attrs(m, "locked_deadline")
        m.locked_deadline = max(m.locked_deadline, target)
        return m.locked_deadline

    @property
    def count(self) -> int:
        return sum(1 for m in self._members.values() if m.joined)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {addr: m.to_dict() for addr, m in self._members.items()}

    def load(self, data: Dict[str, Dict[str, Any]]) -> None:
        self._members = {addr: Member.from_dict(m) for addr, m in data.items()}
