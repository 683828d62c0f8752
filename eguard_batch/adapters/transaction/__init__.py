"""Transaction manager adapters."""

from eguard_batch.adapters.transaction.memory import InMemoryTransactionManager

__all__ = ["InMemoryTransactionManager"]
