# user_service/core/store.py

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from user_service.core.errors import ConflictError, NotFoundError, StoreError
from user_service.models.user import User


logger = logging.getLogger(__name__)


# -------------------------------
# Store Contract
# -------------------------------

class UserStore(ABC):
    """
    Persistence boundary for user records.

    Implementations raise NotFoundError for missing ids/usernames,
    ConflictError when a username or email is already taken, and
    StoreError for any other persistence failure.
    """

    @abstractmethod
    def get_all(self) -> list[User]:
        """Returns every user, newest first. An empty store yields []."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> User:
        ...

    @abstractmethod
    def get_by_username(self, username: str) -> User:
        """Case-sensitive exact match."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Assigns the id and both timestamps."""

    @abstractmethod
    def update(self, user: User) -> User:
        """Persists username and email and refreshes updated_at."""

    @abstractmethod
    def delete(self, user_id: int) -> None:
        ...


def user_not_found(key) -> NotFoundError:
    return NotFoundError(f"No user matches {key!r}", error="User not found")


def user_conflict() -> ConflictError:
    return ConflictError("Username or email is already taken", error="User already exists")


# -------------------------------
# SQLAlchemy Implementation
# -------------------------------

class SQLUserStore(UserStore):
    """
    Store backed by the `users` table. Uses the caller's session, which is
    scoped to one request and closed by `get_db`.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[User]:
        try:
            return (
                self.db.query(User)
                .order_by(User.created_at.desc(), User.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to query users: {e}") from e

    def get_by_id(self, user_id: int) -> User:
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get user {user_id}: {e}") from e
        if user is None:
            raise user_not_found(user_id)
        return user

    def get_by_username(self, username: str) -> User:
        try:
            user = self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get user {username!r}: {e}") from e
        if user is None:
            raise user_not_found(username)
        return user

    def create(self, user: User) -> User:
        now = datetime.now()
        user.created_at = now
        user.updated_at = now
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Rejected duplicate user %r: %s", user.username, e.orig)
            raise user_conflict() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to create user: {e}") from e
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        user_id = user.id
        user.updated_at = datetime.now()
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(username=user.username, email=user.email, updated_at=user.updated_at)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                raise user_not_found(user_id)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Rejected update of user %s: %s", user_id, e.orig)
            raise user_conflict() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to update user {user_id}: {e}") from e
        return self.get_by_id(user_id)

    def delete(self, user_id: int) -> None:
        stmt = delete(User).where(User.id == user_id)
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                raise user_not_found(user_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"failed to delete user {user_id}: {e}") from e
