"""Unit tests for PostgreSQLTransactionManager (mocked psycopg2 connection)."""

from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from eguard_batch import TransactionError
from eguard_batch.contrib.adapters.transaction import PostgreSQLTransactionManager


@pytest.fixture
def connection():
    conn = MagicMock()
    conn.closed = 0
    return conn


@pytest.fixture
def manager(connection):
    return PostgreSQLTransactionManager(connection)


class TestPostgreSQLTransactionManager:
    """Tests for begin / commit / rollback against the connection."""

    def test_begin_disables_autocommit(self, manager, connection):
        status = manager.begin()

        assert connection.autocommit is False
        assert status.resource is connection
        assert not status.completed

    def test_begin_on_closed_connection(self, manager, connection):
        connection.closed = 1

        with pytest.raises(TransactionError, match="closed connection"):
            manager.begin()

    def test_nested_begin(self, manager):
        manager.begin()

        with pytest.raises(TransactionError, match="already active"):
            manager.begin()

    def test_commit(self, manager, connection):
        status = manager.begin()
        manager.commit(status)

        connection.commit.assert_called_once()
        assert status.completed

    def test_rollback(self, manager, connection):
        status = manager.begin()
        manager.rollback(status)

        connection.rollback.assert_called_once()
        assert status.completed

    def test_commit_error_is_wrapped(self, manager, connection):
        connection.commit.side_effect = psycopg2.OperationalError("server closed the connection")
        status = manager.begin()

        with pytest.raises(TransactionError, match="Failed to commit"):
            manager.commit(status)

        # Still active so the caller can roll back
        assert not status.completed
        manager.rollback(status)
        assert status.completed

    def test_rollback_error_is_wrapped(self, manager, connection):
        connection.rollback.side_effect = psycopg2.InterfaceError("connection already closed")
        status = manager.begin()

        with pytest.raises(TransactionError, match="Failed to roll back"):
            manager.rollback(status)

        assert status.completed
        # A new transaction can start after the failed rollback
        manager.begin()

    def test_rollback_only_commit(self, manager, connection):
        status = manager.begin()
        status.set_rollback_only()

        with pytest.raises(TransactionError, match="rollback-only"):
            manager.commit(status)

        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()

    def test_transaction_context(self, manager, connection):
        with pytest.raises(ValueError):
            with manager.transaction():
                raise ValueError("bad row")

        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()

    def test_close(self, manager, connection):
        manager.close()
        connection.close.assert_called_once()

    def test_close_already_closed(self, manager, connection):
        connection.closed = 1
        manager.close()
        connection.close.assert_not_called()


class TestFromDsn:
    """Tests for connection creation with retry."""

    def test_from_dsn(self, connection):
        with patch("eguard_batch.contrib.adapters.transaction.postgres.psycopg2.connect") as connect:
            connect.return_value = connection
            manager = PostgreSQLTransactionManager.from_dsn("postgresql://localhost/eguard")

        connect.assert_called_once_with("postgresql://localhost/eguard")
        assert manager.connection is connection

    def test_from_dsn_retries_operational_errors(self, connection):
        with patch("eguard_batch.contrib.adapters.transaction.postgres.psycopg2.connect") as connect:
            connect.side_effect = [psycopg2.OperationalError("starting up"), connection]
            manager = PostgreSQLTransactionManager.from_dsn("postgresql://localhost/eguard")

        assert connect.call_count == 2
        assert manager.connection is connection

    def test_from_dsn_does_not_retry_other_errors(self):
        with patch("eguard_batch.contrib.adapters.transaction.postgres.psycopg2.connect") as connect:
            connect.side_effect = psycopg2.ProgrammingError("invalid dsn")

            with pytest.raises(psycopg2.ProgrammingError):
                PostgreSQLTransactionManager.from_dsn("bogus")

        assert connect.call_count == 1
