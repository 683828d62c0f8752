"""Redis-based distributed lock adapter."""

import time
import uuid
from typing import Any

import redis

from eguard_batch.adapters.base import LockAdapter

# Atomic release with ownership check; wakes one blocked acquirer
LUA_RELEASE_SCRIPT = """
    local token = redis.call('get', KEYS[1])
    if not token or token ~= ARGV[1] then
        return 0
    end
    redis.call('del', KEYS[1])
    redis.call('lpush', KEYS[2], '1')
    redis.call('expire', KEYS[2], 1)
    return 1
"""


class RedisLockAdapter(LockAdapter):
    """
    Distributed lock so a job runs in at most one process at a time.

    Uses ``SET NX EX`` with a per-instance ownership token, and a Lua script
    for release so a process never deletes a lock it does not own.

    Example:
        >>> lock = RedisLockAdapter.from_url("redis://localhost:6379/0")
        >>> launcher = JobLauncher(lock_adapter=lock)
    """

    def __init__(self, redis_client: Any, key_prefix: str = "eguard:") -> None:
        """
        Args:
            redis_client: redis.Redis client instance
            key_prefix: Prefix added to every lock key
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.instance_token = str(uuid.uuid4())

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "eguard:") -> "RedisLockAdapter":
        """Build the adapter with a client created from a redis:// URL."""
        return cls(redis.Redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def acquire(
        self,
        lock_key: str,
        ttl_seconds: int,
        blocking: bool = False,
        timeout: float | None = None,
        owner_id: str | None = None,
    ) -> bool:
        """
        Acquire the lock.

        Blocking mode waits on a signal list with BLPOP instead of spinning.

        Args:
            lock_key: Lock identifier (will be prefixed)
            ttl_seconds: Lock expiry time in seconds
            blocking: If True, wait for the lock to become available
            timeout: Max wait time in seconds (None = wait forever)
            owner_id: Optional owner identifier (uses instance token if None)

        Returns:
            True if lock acquired, False otherwise
        """
        full_key = f"{self.key_prefix}{lock_key}"
        signal_key = f"{full_key}:signal"
        token = owner_id or self.instance_token

        acquired = self.redis.set(name=full_key, value=token, nx=True, ex=ttl_seconds)
        if acquired or not blocking:
            return bool(acquired)

        start_time = time.monotonic()
        remaining_timeout = timeout

        while True:
            # BLPOP timeout 0 blocks forever; keep at least one second
            wait = 0 if remaining_timeout is None else max(1, int(remaining_timeout))
            self.redis.blpop(signal_key, timeout=wait)

            if self.redis.set(name=full_key, value=token, nx=True, ex=ttl_seconds):
                return True

            if timeout is not None:
                remaining_timeout = timeout - (time.monotonic() - start_time)
                if remaining_timeout <= 0:
                    return False

    def release(self, lock_key: str, owner_id: str | None = None) -> bool:
        """
        Release the lock if this owner holds it.

        Returns:
            True if lock released, False if it doesn't exist or has another owner
        """
        full_key = f"{self.key_prefix}{lock_key}"
        signal_key = f"{full_key}:signal"
        token = owner_id or self.instance_token

        result = self.redis.eval(LUA_RELEASE_SCRIPT, 2, full_key, signal_key, token)
        return result == 1
