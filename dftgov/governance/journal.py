"""
Per-operation undo journal.

Registries record how to undo each in-place mutation while an operation is
open; the ledger rolls the entries back (newest first) if the operation
fails and discards them if it completes. Cost is proportional to what the
operation touched, not to the size of the ledger.
"""

from typing import Any, Callable, List, MutableMapping

_MISSING = object()


class Journal:

    def __init__(self):
        self._undo: List[Callable[[], None]] = []
        self.active = False

    def begin(self) -> None:
        self._undo = []
        self.active = True

    def commit(self) -> None:
        self._undo = []
        self.active = False

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()
        self.active = False

    def record(self, undo: Callable[[], None]) -> None:
        if self.active:
            self._undo.append(undo)

    def record_attrs(self, obj: Any, *names: str) -> None:
        """Remember the current values of ``obj``'s attributes ``names``."""
        if not self.active:
            return
        saved = {name: getattr(obj, name) for name in names}

        def undo():
            for name, value in saved.items():
                setattr(obj, name, value)
        self._undo.append(undo)

    def record_item(self, mapping: MutableMapping, key: Any) -> None:
        """Remember ``mapping[key]`` (or its absence)."""
        if not self.active:
            return
        previous = mapping.get(key, _MISSING)

        def undo():
            if previous is _MISSING:
                mapping.pop(key, None)
            else:
                mapping[key] = previous
        self._undo.append(undo)

    def __len__(self) -> int:
        return len(self._undo)
