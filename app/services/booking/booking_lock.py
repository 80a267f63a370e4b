# ===== app/services/booking/booking_lock.py =====
"""
Serialises the check-then-insert of bookings per (business_id, booking_date).

Contention is naturally partitioned by business and day, so that pair is the
lock key; nothing is locked across businesses. Slot listing never locks.

Backends:
  database - PostgreSQL transaction-scoped advisory lock, released on
             commit/rollback. Other dialects fall back to the local backend.
  redis    - redis-py Lock, for multi-process deployments without PostgreSQL.
  local    - in-process threading.Lock per key (single process, tests).
"""
import hashlib
import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterator, Optional, Tuple
from uuid import UUID

import redis
from redis.exceptions import LockError
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config.redis import RedisKeys
from app.config.settings import Settings
from app.core.exceptions import TimeSlotUnavailableError

logger = logging.getLogger(__name__)


def advisory_lock_key(business_id: UUID, booking_date: date) -> int:
    """Stable signed 64-bit key for pg_advisory_xact_lock"""
    digest = hashlib.blake2b(f"{business_id}:{booking_date.isoformat()}".encode(), digest_size=8).digest()
    return int.from_bytes(digest, "big", signed=True)


class BookingLock:
    """Base class; `acquire` returns a context manager held until after commit"""

    def acquire(self, db: Session, business_id: UUID, booking_date: date):
        raise NotImplementedError


class LocalBookingLock(BookingLock):
    """
    One threading.Lock per key, kept only while someone holds or waits for
    it, so the registry does not grow with every date ever booked.
    """

    def __init__(self, blocking_timeout: float = 5):
        self.blocking_timeout = blocking_timeout
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[Tuple[str, date], list] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, key: Tuple[str, date]) -> threading.Lock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: Tuple[str, date]) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def acquire(self, db: Session, business_id: UUID, booking_date: date) -> Iterator[None]:
        key = (str(business_id), booking_date)
        lock = self._checkout(key)
        try:
            if not lock.acquire(timeout=self.blocking_timeout):
                logger.warning(f"Timed out waiting for booking lock {business_id} {booking_date}")
                raise TimeSlotUnavailableError()
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)


class DatabaseBookingLock(BookingLock):

    def __init__(self, fallback: Optional[BookingLock] = None):
        self.fallback = fallback or LocalBookingLock()

    @contextmanager
    def acquire(self, db: Session, business_id: UUID, booking_date: date) -> Iterator[None]:
        if db.get_bind().dialect.name != "postgresql":
            with self.fallback.acquire(db, business_id, booking_date):
                yield
            return

        # Lives as long as the current transaction
        db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": advisory_lock_key(business_id, booking_date)}
        )
        yield


class RedisBookingLock(BookingLock):

    def __init__(self, client: redis.Redis, timeout: float = 10, blocking_timeout: float = 5):
        self.client = client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @contextmanager
    def acquire(self, db: Session, business_id: UUID, booking_date: date) -> Iterator[None]:
        name = RedisKeys.BOOKING_LOCK.format(
            business_id=business_id,
            booking_date=booking_date.isoformat()
        )
        lock = self.client.lock(name, timeout=self.timeout, blocking_timeout=self.blocking_timeout)

        if not lock.acquire():
            logger.warning(f"Timed out waiting for booking lock {name}")
            raise TimeSlotUnavailableError()
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError:
                # Expired before release; the transaction has already finished
                logger.warning(f"Booking lock {name} expired before release")


def build_booking_lock(settings: Settings, redis_client: Optional[redis.Redis] = None) -> BookingLock:
    """Pick the lock backend configured in BOOKING_LOCK_BACKEND"""
    backend = settings.BOOKING_LOCK_BACKEND.lower()
    local = LocalBookingLock(blocking_timeout=settings.BOOKING_LOCK_BLOCKING_TIMEOUT_SECONDS)

    if backend == "redis":
        if redis_client is None:
            raise ValueError("BOOKING_LOCK_BACKEND=redis requires a Redis client")
        return RedisBookingLock(
            redis_client,
            timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS,
            blocking_timeout=settings.BOOKING_LOCK_BLOCKING_TIMEOUT_SECONDS,
        )
    if backend == "database":
        return DatabaseBookingLock(fallback=local)
    if backend == "local":
        return local

    raise ValueError(f"Unknown BOOKING_LOCK_BACKEND '{settings.BOOKING_LOCK_BACKEND}'")
