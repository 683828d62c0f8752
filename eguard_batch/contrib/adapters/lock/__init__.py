"""Redis lock adapter."""

from eguard_batch.contrib.adapters.lock.redis import RedisLockAdapter

__all__ = ["RedisLockAdapter"]
