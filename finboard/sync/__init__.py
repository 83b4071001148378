"""Optimistic mutations and debounce timers."""

from finboard.sync.debounce import DebounceSlot
from finboard.sync.optimistic import OptimisticCollection

__all__ = ["DebounceSlot", "OptimisticCollection"]
