"""
Session and Order Stores
========================

Key-value stores for conversation state and confirmed orders. The command
interpreter only talks to the abstract interfaces below, so a persistent
backend (Redis, a database table) can replace the in-memory versions without
touching command handling.

Storage Model:
--------------
- **SessionStore**: user_id -> ChatSession. Sessions are created lazily on
  first contact and never deleted. State lives for the process lifetime.

- **OrderStore**: order_id -> Order. Orders are immutable once added and are
  retained for the process lifetime, independent of any session.

Thread Safety:
--------------
Map access is guarded by a store-wide ``threading.Lock``. On top of that,
``SessionStore.lock(user_id)`` hands out one lock per user; callers hold it
for the whole read-modify-write of a command so that two messages from the
same user can never interleave. Different users never contend.

Usage:
------
    sessions = InMemorySessionStore()
    with sessions.lock(user_id):
        session = sessions.get_or_create(user_id)
        session.add_item(item, 2)
        sessions.save(session)
"""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .state import ChatSession, Order


logger = logging.getLogger(__name__)


# =============================================================================
# Interfaces
# =============================================================================

class SessionStore(ABC):
    """Abstract per-user session storage."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[ChatSession]:
        """Return the session for ``user_id`` or None."""

    @abstractmethod
    def get_or_create(self, user_id: str) -> ChatSession:
        """Return the session for ``user_id``, creating an empty one if needed."""

    @abstractmethod
    def save(self, session: ChatSession) -> None:
        """Persist changes made to ``session``."""

    @abstractmethod
    def lock(self, user_id: str):
        """Context manager serializing mutations for one user."""

    @abstractmethod
    def all_sessions(self) -> List[ChatSession]:
        pass


class OrderStore(ABC):
    """Abstract order storage keyed by order id."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Store a new order. Raises ValueError if the id is taken."""

    @abstractmethod
    def get(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    def all_orders(self) -> List[Order]:
        """All orders, oldest first."""

    def __contains__(self, order_id: str) -> bool:
        return self.get(order_id) is not None


# =============================================================================
# In-Memory Implementations
# =============================================================================

class InMemorySessionStore(SessionStore):

    def __init__(self) -> None:
        self._sessions: Dict[str, ChatSession] = {}
        self._user_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[ChatSession]:
        with self._lock:
            return self._sessions.get(user_id)

    def get_or_create(self, user_id: str) -> ChatSession:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = ChatSession(user_id=user_id)
                self._sessions[user_id] = session
                logger.debug("Created session for %s", user_id)
            return session

    def save(self, session: ChatSession) -> None:
        # Sessions are held by reference; saving just (re)registers the object
        with self._lock:
            self._sessions[session.user_id] = session

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        with self._lock:
            user_lock = self._user_locks.setdefault(user_id, threading.Lock())
        with user_lock:
            yield

    def all_sessions(self) -> List[ChatSession]:
        with self._lock:
            return list(self._sessions.values())

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
            self._user_locks.clear()


class InMemoryOrderStore(OrderStore):

    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()

    def add(self, order: Order) -> None:
        with self._lock:
            if order.order_id in self._orders:
                raise ValueError(f"Order id already exists: {order.order_id}")
            self._orders[order.order_id] = order
        logger.info("Stored order %s", order.order_id)

    def get(self, order_id: str) -> Optional[Order]:
        if not order_id:
            return None
        with self._lock:
            return self._orders.get(order_id.upper())

    def all_orders(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()
