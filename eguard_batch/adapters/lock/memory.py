"""In-memory lock adapter."""

import logging
import threading
import time
import uuid

from eguard_batch.adapters.base import LockAdapter
from eguard_batch.utils.logging import ContextLogger

logger = ContextLogger(logging.getLogger(__name__), {"component": "InMemoryLockAdapter"})


class InMemoryLockAdapter(LockAdapter):
    """
    Process-local lock adapter with ownership tracking and TTL expiry.

    Guards against two launches of the same job in one process. Use
    RedisLockAdapter when several processes share a job repository.

    Example:
        >>> lock = InMemoryLockAdapter()
        >>> if lock.acquire("eventJob", ttl_seconds=300):
        ...     try:
        ...         pass  # run the job
        ...     finally:
        ...         lock.release("eventJob")
    """

    def __init__(self) -> None:
        # lock_key -> (owner_id, expiry_time)
        self._locks: dict[str, tuple[str, float]] = {}
        self._mutex = threading.Lock()
        self._condition = threading.Condition(self._mutex)
        self.instance_token = str(uuid.uuid4())

    def acquire(
        self,
        lock_key: str,
        ttl_seconds: int,
        blocking: bool = False,
        timeout: float | None = None,
        owner_id: str | None = None,
    ) -> bool:
        """
        Acquire a lock.

        Args:
            lock_key: Lock identifier
            ttl_seconds: Lock expiry time in seconds
            blocking: If True, wait for the lock to become available
            timeout: Max wait time in seconds (None = wait forever)
            owner_id: Optional owner identifier (uses instance token if None)

        Returns:
            True if lock acquired, False otherwise
        """
        token = owner_id or self.instance_token
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._condition:
            while True:
                self._cleanup_expired_lock(lock_key)
                if lock_key not in self._locks:
                    self._locks[lock_key] = (token, time.time() + ttl_seconds)
                    return True

                if not blocking:
                    return False

                remaining = None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False

                # Woken by release() or by the timeout
                self._condition.wait(timeout=remaining)

    def release(self, lock_key: str, owner_id: str | None = None) -> bool:
        """
        Release a lock held by ``owner_id``.

        Returns:
            True if lock released, False if it is not held by this owner
        """
        token = owner_id or self.instance_token

        with self._condition:
            held = self._locks.get(lock_key)
            if held is None or held[0] != token:
                return False

            del self._locks[lock_key]
            self._condition.notify_all()
            return True

    def is_locked(self, lock_key: str) -> bool:
        with self._condition:
            self._cleanup_expired_lock(lock_key)
            return lock_key in self._locks

    def _cleanup_expired_lock(self, lock_key: str) -> None:
        """Drop an expired lock (must be called with the condition held)."""
        held = self._locks.get(lock_key)
        if held is not None and held[1] < time.time():
            logger.warning("Lock expired before release", lock_key=lock_key)
            del self._locks[lock_key]
