"""Unit tests for InMemoryTransactionManager."""

import logging

import pytest

from eguard_batch import InMemoryTransactionManager, TransactionError
from eguard_batch.adapters.base import TransactionalResource


class Counter(TransactionalResource):
    """Minimal transactional resource."""

    def __init__(self):
        self.value = 0

    def snapshot(self):
        return self.value

    def restore(self, snapshot):
        self.value = snapshot


@pytest.fixture
def counter():
    return Counter()


@pytest.fixture
def manager(counter):
    return InMemoryTransactionManager([counter])


class TestInMemoryTransactionManager:
    """Tests for begin / commit / rollback."""

    def test_commit_keeps_changes(self, manager, counter):
        status = manager.begin()
        counter.value = 5
        manager.commit(status)

        assert counter.value == 5
        assert status.completed
        assert manager.commit_count == 1
        assert not manager.is_active()

    def test_rollback_restores_snapshot(self, manager, counter):
        counter.value = 1
        status = manager.begin()
        counter.value = 5
        manager.rollback(status)

        assert counter.value == 1
        assert status.completed
        assert manager.rollback_count == 1

    def test_rollback_log_carries_context(self, manager, capsys, caplog):
        with caplog.at_level(logging.DEBUG, logger="eguard_batch"):
            status = manager.begin()
            manager.rollback(status)

        record = next(r for r in caplog.records if r.getMessage() == "Rolled back transaction")
        assert record.context == (
            f"component=InMemoryTransactionManager, transaction_id={status.transaction_id}"
        )
        assert "Logging error" not in capsys.readouterr().err

    def test_one_active_transaction(self, manager):
        manager.begin()

        with pytest.raises(TransactionError, match="already active"):
            manager.begin()

    def test_commit_twice(self, manager):
        status = manager.begin()
        manager.commit(status)

        with pytest.raises(TransactionError, match="already completed"):
            manager.commit(status)

    def test_rollback_after_commit(self, manager):
        status = manager.begin()
        manager.commit(status)

        with pytest.raises(TransactionError):
            manager.rollback(status)

    def test_rollback_only(self, manager, counter):
        status = manager.begin()
        counter.value = 5
        status.set_rollback_only()

        with pytest.raises(TransactionError, match="rollback-only"):
            manager.commit(status)

        assert counter.value == 0
        assert status.completed
        assert not manager.is_active()

    def test_register_rejects_plain_objects(self, manager):
        with pytest.raises(TypeError, match="TransactionalResource"):
            manager.register(object())

    def test_register_is_idempotent(self, manager, counter):
        manager.register(counter)
        assert manager.resources == [counter]

    def test_resource_registered_later(self):
        manager = InMemoryTransactionManager()
        counter = Counter()
        manager.register(counter)

        status = manager.begin()
        counter.value = 3
        manager.rollback(status)

        assert counter.value == 0


class TestTransactionContext:
    """Tests for the transaction() context manager."""

    def test_commits_on_success(self, manager, counter):
        with manager.transaction():
            counter.value = 2

        assert counter.value == 2
        assert manager.commit_count == 1

    def test_rolls_back_on_error(self, manager, counter):
        with pytest.raises(RuntimeError):
            with manager.transaction():
                counter.value = 2
                raise RuntimeError("boom")

        assert counter.value == 0
        assert manager.rollback_count == 1
        assert not manager.is_active()
