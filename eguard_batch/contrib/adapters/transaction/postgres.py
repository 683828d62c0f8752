"""PostgreSQL transaction manager backed by a psycopg2 connection."""

import threading
from typing import Any

import psycopg2
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from eguard_batch.adapters.base import TransactionManager, TransactionStatus
from eguard_batch.core.common.exceptions import TransactionError


@retry(
    retry=retry_if_exception_type(psycopg2.OperationalError),
    stop=stop_after_attempt(3),
    wait=wait_random_exponential(multiplier=0.5, min=0.5, max=5),
    reraise=True,
)
def _connect(dsn: str, **kwargs: Any) -> Any:
    """Open a connection, retrying transient connection failures."""
    return psycopg2.connect(dsn, **kwargs)


class PostgreSQLTransactionManager(TransactionManager):
    """
    Transaction manager around one psycopg2 connection.

    psycopg2 opens a transaction implicitly on the first statement, so
    ``begin()`` only switches autocommit off and hands out a status; the
    tasklet's repositories must share ``transaction_manager.connection``.

    Example:
        >>> tm = PostgreSQLTransactionManager.from_dsn("postgresql://localhost/eguard")
        >>> with tm.transaction():
        ...     with tm.connection.cursor() as cur:
        ...         cur.execute("UPDATE event SET resolved = true WHERE id = %s", (1,))
    """

    def __init__(self, connection: Any) -> None:
        """
        Args:
            connection: psycopg2 connection object
        """
        self.connection = connection
        self._active: TransactionStatus | None = None
        self._mutex = threading.Lock()

    @classmethod
    def from_dsn(cls, dsn: str, **connect_kwargs: Any) -> "PostgreSQLTransactionManager":
        """
        Connect and wrap the new connection.

        Raises:
            psycopg2.OperationalError: If the server stays unreachable after retries
        """
        return cls(_connect(dsn, **connect_kwargs))

    def begin(self) -> TransactionStatus:
        with self._mutex:
            if self.connection.closed:
                raise TransactionError("Cannot begin a transaction on a closed connection")
            if self._active is not None:
                raise TransactionError(
                    f"Transaction {self._active.transaction_id} is already active"
                )
            try:
                self.connection.autocommit = False
            except psycopg2.Error as e:
                raise TransactionError(f"Failed to begin transaction: {e}") from e

            status = TransactionStatus(resource=self.connection)
            self._active = status
            return status

    def commit(self, status: TransactionStatus) -> None:
        self._ensure_active(status)
        if status.rollback_only:
            self.rollback(status)
            raise TransactionError(
                f"Transaction {status.transaction_id} was marked rollback-only"
            )
        try:
            self.connection.commit()
        except psycopg2.Error as e:
            # Leave status active so the caller can roll back
            raise TransactionError(f"Failed to commit transaction: {e}") from e
        self._finish(status)

    def rollback(self, status: TransactionStatus) -> None:
        self._ensure_active(status)
        try:
            self.connection.rollback()
        except psycopg2.Error as e:
            raise TransactionError(f"Failed to roll back transaction: {e}") from e
        finally:
            self._finish(status)

    def close(self) -> None:
        """Close the underlying connection."""
        if not self.connection.closed:
            self.connection.close()

    def _finish(self, status: TransactionStatus) -> None:
        with self._mutex:
            status.completed = True
            if self._active is status:
                self._active = None
