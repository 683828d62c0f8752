"""Lock adapters."""

from eguard_batch.adapters.lock.memory import InMemoryLockAdapter

__all__ = ["InMemoryLockAdapter"]
