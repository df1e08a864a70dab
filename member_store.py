# member_store.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional

from member_model import Member

logger = logging.getLogger("member-store")


class MemberStore:
    """
    Mapping email -> Member.
    Handlers chỉ nói chuyện với interface này, để sau có thể thay bằng DB.
    """

    def get(self, email: str) -> Optional[Member]:
        raise NotImplementedError

    def put(self, email: str, member: Member) -> bool:
        """Stores `member`; returns True if an existing record was replaced."""
        raise NotImplementedError

    def delete(self, email: str) -> bool:
        """Returns False when nothing was stored under `email`."""
        raise NotImplementedError

    def update(self, email: str, change: Callable[[Member], Member]) -> Member:
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    def __contains__(self, email: object) -> bool:
        return isinstance(email, str) and self.get(email) is not None


class InMemoryMemberStore(MemberStore):
    """Process-local store; state is lost on restart."""

    def __init__(self) -> None:
        self._members: Dict[str, Member] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Optional[Member]:
        with self._lock:
            member = self._members.get(email)
            return member.model_copy() if member is not None else None

    def put(self, email: str, member: Member) -> bool:
        with self._lock:
            replaced = email in self._members
            self._members[email] = member.model_copy()
        return replaced

    def delete(self, email: str) -> bool:
        with self._lock:
            return self._members.pop(email, None) is not None

    def update(self, email: str, change: Callable[[Member], Member]) -> Member:
        """Apply `change` to the stored record under the lock. KeyError if absent."""
        with self._lock:
            current = self._members[email]
            updated = change(current.model_copy())
            self._members[email] = updated
            return updated.model_copy()

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)
