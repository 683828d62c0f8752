"""In-memory transaction manager built on resource snapshots."""

import logging
import threading
from collections.abc import Iterable

from eguard_batch.adapters.base import (
    TransactionalResource,
    TransactionManager,
    TransactionStatus,
)
from eguard_batch.core.common.exceptions import TransactionError
from eguard_batch.utils.logging import ContextLogger

logger = ContextLogger(logging.getLogger(__name__), {"component": "InMemoryTransactionManager"})


class InMemoryTransactionManager(TransactionManager):
    """
    Snapshot based transaction manager for in-memory resources.

    ``begin()`` captures a snapshot of every registered resource,
    ``rollback()`` restores them and ``commit()`` discards the snapshots.
    One transaction may be active at a time; there is no isolation between
    threads touching the same resources.

    Example:
        >>> events = InMemoryEventRepository()
        >>> tm = InMemoryTransactionManager([events])
        >>> with tm.transaction():
        ...     events.save(event)
    """

    def __init__(self, resources: Iterable[TransactionalResource] = ()) -> None:
        self._resources: list[TransactionalResource] = []
        self._snapshots: dict[int, list[tuple[TransactionalResource, object]]] = {}
        self._active: TransactionStatus | None = None
        self._mutex = threading.Lock()
        self.commit_count = 0
        self.rollback_count = 0

        for resource in resources:
            self.register(resource)

    def register(self, resource: TransactionalResource) -> None:
        """Enlist a resource in every future transaction."""
        if not isinstance(resource, TransactionalResource):
            raise TypeError(
                f"{type(resource).__name__} does not implement TransactionalResource"
            )
        with self._mutex:
            if resource not in self._resources:
                self._resources.append(resource)

    @property
    def resources(self) -> list[TransactionalResource]:
        return list(self._resources)

    def is_active(self) -> bool:
        return self._active is not None

    def begin(self) -> TransactionStatus:
        with self._mutex:
            if self._active is not None:
                raise TransactionError(
                    f"Transaction {self._active.transaction_id} is already active"
                )
            status = TransactionStatus()
            self._snapshots[status.transaction_id] = [
                (resource, resource.snapshot()) for resource in self._resources
            ]
            self._active = status
            return status

    def commit(self, status: TransactionStatus) -> None:
        self._ensure_active(status)
        if status.rollback_only:
            self.rollback(status)
            raise TransactionError(
                f"Transaction {status.transaction_id} was marked rollback-only"
            )
        with self._mutex:
            self._snapshots.pop(status.transaction_id, None)
            self._finish(status)
            self.commit_count += 1

    def rollback(self, status: TransactionStatus) -> None:
        self._ensure_active(status)
        with self._mutex:
            snapshots = self._snapshots.pop(status.transaction_id, [])
            try:
                for resource, snapshot in reversed(snapshots):
                    resource.restore(snapshot)
            finally:
                self._finish(status)
                self.rollback_count += 1
        logger.debug("Rolled back transaction", transaction_id=status.transaction_id)

    def _finish(self, status: TransactionStatus) -> None:
        """Mark status completed and clear the active slot (must hold mutex)."""
        status.completed = True
        if self._active is status:
            self._active = None
