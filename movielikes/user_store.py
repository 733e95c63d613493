from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger("movie_likes.users")


class UserNotFoundError(LookupError):
    def __init__(self, user_id: str):
        super().__init__(f"User '{user_id}' not found")
        self.user_id = user_id


class User:
    """A named user and the movies they like.

    ``likes`` is guarded by a lock owned by this record, so liking movies for
    one user never waits on another user. Mutate through the store.
    """

    __slots__ = ("id", "name", "_likes", "_lock")

    def __init__(self, *, id: str, name: str):
        self.id = id
        self.name = name
        self._likes: List[str] = []
        self._lock = threading.Lock()

    @property
    def likes(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._likes)

    def like(self, ref_id: str) -> bool:
        """Append ``ref_id`` unless already present. Returns True if appended."""
        with self._lock:
            if ref_id in self._likes:
                return False
            self._likes.append(ref_id)
            return True

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, likes={list(self.likes)!r})"


class IdAllocator:
    """Monotonic integer counter; each value is handed out exactly once."""

    def __init__(self, start: int = 1):
        self._lock = threading.Lock()
        self._next = int(start)

    def next(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return str(value)

    def peek(self) -> int:
        with self._lock:
            return self._next


DEFAULT_SEED_USERS: Tuple[Tuple[str, str], ...] = (
    ("1", "Chris"),
    ("2", "Steph"),
    ("3", "Peter"),
    ("4", "Tas"),
    ("5", "Billy"),
    ("6", "Cameron"),
)


def default_seed() -> List[User]:
    return [User(id=uid, name=name) for uid, name in DEFAULT_SEED_USERS]


class InMemoryUserStore:
    """Thread-safe in-memory user directory.

    Storage semantics:
    - Stored only in the API process memory (cleared on restart).
    - ``create`` takes the allocator lock, builds the record, then takes the
      insertion lock to publish it. Lookups read a fully built record or nothing.
    - ``like`` only takes the target user's own lock.
    - No two locks are ever held at the same time.
    """

    def __init__(self, *, seed: Optional[Iterable[User]] = None, start_id: Optional[int] = None):
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}

        highest = 0
        for user in seed or ():
            if user.id in self._users:
                raise ValueError(f"Duplicate seeded user id: {user.id}")
            self._users[user.id] = user
            if user.id.isdecimal():
                highest = max(highest, int(user.id))
        self._seeded_count = len(self._users)

        if start_id is None:
            start_id = highest + 1
        elif start_id <= highest:
            raise ValueError(f"start_id must be greater than every seeded id (got {start_id}, highest seeded {highest})")

        self._ids = IdAllocator(start_id)

    @classmethod
    def with_default_seed(cls) -> "InMemoryUserStore":
        return cls(seed=default_seed())

    @property
    def seeded_count(self) -> int:
        return self._seeded_count

    @property
    def next_id(self) -> int:
        return self._ids.peek()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def exists(self, user_id: str) -> bool:
        return self._users.get(user_id) is not None

    def get(self, user_id: str) -> User:
        # Records are fully constructed before insertion, and a dict read never
        # sees a key without its value.
        user = self._users.get(user_id)
        if user is None:
            logger.debug("User lookup missed", extra={"user_id": user_id})
            raise UserNotFoundError(user_id)
        return user

    def create(self, name: str) -> User:
        n = (name or "").strip()
        if not n:
            raise ValueError("Name is required")
        user = User(id=self._ids.next(), name=n)
        with self._lock:
            self._users[user.id] = user
        logger.info("Created user", extra={"user_id": user.id})
        return user

    def like(self, user_id: str, ref_id: str) -> bool:
        """Record that ``user_id`` likes ``ref_id``.

        Idempotent: returns False (and changes nothing) if it was already liked.
        Raises UserNotFoundError for unknown users, checked before anything
        else. ``ref_id`` is stored exactly as given; an empty one is a ValueError.
        """
        user = self.get(user_id)
        if not ref_id:
            raise ValueError("Reference id is required")
        return user.like(ref_id)
