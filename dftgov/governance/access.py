"""
Owner / admin identities and the one-time initialization gate.
"""

from typing import Any, Dict, Optional

from ..exceptions import AlreadyInitializedError, NotAuthorizedError
from .journal import Journal


class AccessControl:
    """
    Capability guards for the ledger.

    The owner manages identities (owner, admin); the admin manages proposals,
    parameters and addresses. Both start as the initializing caller.
    """

    def __init__(self, journal: Optional[Journal] = None):
        self._journal = journal if journal is not None else Journal()
        self.owner: Optional[str] = None
        self.admin: Optional[str] = None
        self.initialized: bool = False

    def initialize(self, caller: str) -> None:
        if self.initialized:
            raise AlreadyInitializedError("Governor is already initialized")
        self._journal.record_attrs(self, "owner", "admin", "initialized")
        self.owner = caller
        self.admin = caller
        self.initialized = True

    # ── Guards ────────────────────────────────────────────────────────

    def require_owner(self, caller: str) -> None:
        if self.owner is None or caller != self.owner:
            raise NotAuthorizedError(f"{caller} is not the owner")

    def require_admin(self, caller: str) -> None:
        if self.admin is None or caller != self.admin:
            raise NotAuthorizedError(f"{caller} is not the admin")

    # ── Identity changes ──────────────────────────────────────────────

    def transfer_ownership(self, new_owner: str) -> Optional[str]:
        self._journal.record_attrs(self, "owner")
        previous, self.owner = self.owner, new_owner
        return previous

    def set_admin(self, new_admin: str) -> Optional[str]:
        self._journal.record_attrs(self, "admin")
        previous, self.admin = self.admin, new_admin
        return previous

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "owner": self.owner,
            "admin": self.admin,
        }

    def load(self, data: Dict[str, Any]) -> None:
        self.initialized = bool(data.get("initialized", False))
        self.owner = data.get("owner")
        self.admin = data.get("admin")
