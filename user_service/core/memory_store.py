# user_service/core/memory_store.py

from threading import Lock
from datetime import datetime
from user_service.core.store import UserStore, user_conflict, user_not_found
from user_service.models.user import User


class InMemoryUserStore(UserStore):
    """
    Dict-backed store with the same contract as SQLUserStore.
    Hands out copies so callers never share state with the store.
    """

    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1
        self._lock = Lock()

    def _taken(self, user: User) -> bool:
        return any(
            other.id != user.id and (other.username == user.username or other.email == user.email)
            for other in self._users.values()
        )

    def get_all(self) -> list[User]:
        with self._lock:
            users = sorted(self._users.values(), key=lambda u: (u.created_at, u.id), reverse=True)
            return [u.copy() for u in users]

    def get_by_id(self, user_id: int) -> User:
        with self._lock:
            if user_id not in self._users:
                raise user_not_found(user_id)
            return self._users[user_id].copy()

    def get_by_username(self, username: str) -> User:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user.copy()
        raise user_not_found(username)

    def create(self, user: User) -> User:
        with self._lock:
            stored = user.copy()
            stored.id = None
            if self._taken(stored):
                raise user_conflict()
            now = datetime.now()
            stored.id = self._next_id
            stored.created_at = now
            stored.updated_at = now
            self._users[stored.id] = stored
            self._next_id += 1
            return stored.copy()

    def update(self, user: User) -> User:
        with self._lock:
            stored = self._users.get(user.id)
            if stored is None:
                raise user_not_found(user.id)
            if self._taken(user):
                raise user_conflict()
            stored.username = user.username
            stored.email = user.email
            stored.updated_at = datetime.now()
            return stored.copy()

    def delete(self, user_id: int) -> None:
        with self._lock:
            if self._users.pop(user_id, None) is None:
                raise user_not_found(user_id)

    def __len__(self):
        with self._lock:
            return len(self._users)
