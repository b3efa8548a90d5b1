"""
User Store
==========

Read access (plus a small write path for seeding) to user documents, looked
up by exact equality on either 'id' or 'email'.

Two backends:
- InMemoryUserStore: dict-backed, for development and tests
- RedisUserStore: JSON documents in Redis with an email -> id index key
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis

from config import Settings, get_settings
from exceptions import StorageError, UserAlreadyExistsError
from models import User


logger = logging.getLogger(__name__)


class UserStore(ABC):
    """Lookup of user records by id or by email."""

    backend_name = "abstract"

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this id, or None."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user with exactly this email, or None."""

    @abstractmethod
    def save(self, user: User) -> User:
        """
        Insert a new user record.

        Raises:
            UserAlreadyExistsError: If the id or email is already taken
        """

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Remove a user record. Returns False if it did not exist."""

    def ping(self) -> bool:
        """Check that the backend is reachable."""
        return True


class InMemoryUserStore(UserStore):
    """
    Non-persistent user store.

    Safe to share between the request threads FastAPI runs sync endpoints on.
    """

    backend_name = "memory"

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            if user_id is None:
                return None
            return self._users.get(user_id)

    def save(self, user: User) -> User:
        with self._lock:
            if user.id in self._users:
                raise UserAlreadyExistsError("id", user.id)
            if user.email in self._ids_by_email:
                raise UserAlreadyExistsError("email", user.email)
            self._users[user.id] = user
            self._ids_by_email[user.email] = user.id
        return user

    def delete(self, user_id: str) -> bool:
        with self._lock:
            user = self._users.pop(user_id, None)
            if user is None:
                return False
            self._ids_by_email.pop(user.email, None)
        return True


class RedisUserStore(UserStore):
    """
    User documents stored as JSON strings in Redis.

    Key layout:
        {prefix}:user:{id}          -> JSON user document
        {prefix}:user-email:{email} -> user id
    """

    backend_name = "redis"

    def __init__(self, client: redis.Redis, key_prefix: str = "membaza"):
        self.redis_client = client
        self.key_prefix = key_prefix

    def _user_key(self, user_id: str) -> str:
        return f"{self.key_prefix}:user:{user_id}"

    def _email_key(self, email: str) -> str:
        return f"{self.key_prefix}:user-email:{email}"

    def _load(self, user_id: str) -> Optional[User]:
        data = self.redis_client.get(self._user_key(user_id))
        if not data:
            return None
        return User.model_validate(json.loads(data))

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self._load(user_id)
        except redis.RedisError as e:
            raise StorageError(self.backend_name, str(e))

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            user_id = self.redis_client.get(self._email_key(email))
            if user_id is None:
                return None
            user = self._load(user_id)
        except redis.RedisError as e:
            raise StorageError(self.backend_name, str(e))

        if user is None or user.email != email:
            # Index entry left behind by a removed or re-keyed document
            logger.warning(f"Stale email index entry for user '{user_id}'")
            return None
        return user

    def save(self, user: User) -> User:
        """
        Write the document and its email index in one MULTI/EXEC.

        Both keys are WATCHed, so either both land or neither does. A
        concurrent save touching either key aborts the transaction and the
        checks are re-run.
        """
        user_key = self._user_key(user.id)
        email_key = self._email_key(user.email)

        while True:
            try:
                with self.redis_client.pipeline() as pipe:
                    pipe.watch(user_key, email_key)
                    if pipe.exists(user_key):
                        raise UserAlreadyExistsError("id", user.id)
                    if pipe.exists(email_key):
                        raise UserAlreadyExistsError("email", user.email)
                    pipe.multi()
                    pipe.set(user_key, user.model_dump_json())
                    pipe.set(email_key, user.id)
                    pipe.execute()
                return user
            except redis.WatchError:
                logger.debug(f"Concurrent write on '{user.id}', retrying save")
                continue
            except redis.RedisError as e:
                raise StorageError(self.backend_name, str(e))

    def delete(self, user_id: str) -> bool:
        try:
            user = self._load(user_id)
            if user is None:
                return False
            self.redis_client.delete(self._user_key(user_id), self._email_key(user.email))
        except redis.RedisError as e:
            raise StorageError(self.backend_name, str(e))
        return True

    def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            raise StorageError(self.backend_name, str(e))


def create_user_store(settings: Optional[Settings] = None) -> UserStore:
    """
    Factory for the configured user store backend.

    Args:
        settings: Application settings (uses the cached settings if None)

    Returns:
        UserStore: In-memory or Redis-backed store
    """
    settings = settings or get_settings()

    if settings.user_store_backend == "redis":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password or None,
            decode_responses=True,
            socket_connect_timeout=2
        )
        logger.info(
            f"Using Redis user store at {settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
        )
        return RedisUserStore(client, key_prefix=settings.redis_key_prefix)

    logger.info("Using in-memory user store")
    return InMemoryUserStore()
