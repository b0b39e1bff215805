from __future__ import annotations
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional
from .contracts import User, UserRepoPort
from .errors import DuplicateEmail, UserNotFound


def _email_key(email: str) -> str:
    return email.strip().casefold()


class InMemoryUserRepo(UserRepoPort):
    """Thread-safe in-memory user store.

    Assigns id and created_at on add() and enforces email uniqueness under its
    lock, so a racing duplicate registration fails here even if the caller's
    exists_by_email() pre-check passed. Emails compare case-insensitively.
    """

    def __init__(self):
        self._by_id: Dict[str, User] = {}
        self._id_by_email: Dict[str, str] = {}
        self._lock = threading.RLock()

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._id_by_email.get(_email_key(email))
            return self._by_id.get(user_id) if user_id else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._by_id.get(user_id)

    def list_all(self) -> List[User]:
        with self._lock:
            return list(self._by_id.values())

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return _email_key(email) in self._id_by_email

    def add(self, user: User) -> User:
        with self._lock:
            key = _email_key(user.email)
            if key in self._id_by_email:
                raise DuplicateEmail()
            stored = user.model_copy(update={
                "id": str(uuid.uuid4()),
                "created_at": datetime.now(timezone.utc),
            })
            self._by_id[stored.id] = stored
            self._id_by_email[key] = stored.id
            return stored

    def update(self, user: User) -> User:
        with self._lock:
            current = self._by_id.get(user.id)
            if current is None:
                raise UserNotFound()
            new_key = _email_key(user.email)
            owner = self._id_by_email.get(new_key)
            if owner is not None and owner != user.id:
                raise DuplicateEmail()
            # id and created_at are immutable
            stored = user.model_copy(update={"created_at": current.created_at})
            del self._id_by_email[_email_key(current.email)]
            self._id_by_email[new_key] = stored.id
            self._by_id[stored.id] = stored
            return stored
