"""Batch tasklets."""

from eguard_batch.tasklets.event import EventTasklet

__all__ = ["EventTasklet"]
