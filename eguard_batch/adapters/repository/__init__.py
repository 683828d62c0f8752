"""Job repository adapters."""

from eguard_batch.adapters.repository.memory import InMemoryJobRepository

__all__ = ["InMemoryJobRepository"]
