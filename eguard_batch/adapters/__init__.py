"""Adapter contracts and in-memory implementations."""

from eguard_batch.adapters.base import (
    JobRepository,
    LockAdapter,
    TransactionalResource,
    TransactionManager,
    TransactionStatus,
)

__all__ = [
    "JobRepository",
    "TransactionManager",
    "TransactionStatus",
    "TransactionalResource",
    "LockAdapter",
]
