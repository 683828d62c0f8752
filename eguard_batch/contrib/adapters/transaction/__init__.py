"""PostgreSQL transaction manager."""

from eguard_batch.contrib.adapters.transaction.postgres import PostgreSQLTransactionManager

__all__ = ["PostgreSQLTransactionManager"]
