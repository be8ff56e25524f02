"""Utility helpers for time operations."""

from .time import epoch_seconds, utc_now

__all__ = ["utc_now", "epoch_seconds"]
