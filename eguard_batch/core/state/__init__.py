"""Execution state components."""

from eguard_batch.core.state.enums import BatchStatus

__all__ = ["BatchStatus"]
