"""Adapters that depend on external services."""
