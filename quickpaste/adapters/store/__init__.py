"""Paste store adapters - one interface, in-memory and Redis backends."""

from quickpaste.adapters.store.base import AbstractPasteStore
from quickpaste.adapters.store.factory import create_paste_store
from quickpaste.adapters.store.in_memory import InMemoryPasteStore
from quickpaste.adapters.store.reaper import PasteReaper
from quickpaste.adapters.store.redis_store import RedisPasteStore

__all__ = [
    "AbstractPasteStore",
    "InMemoryPasteStore",
    "PasteReaper",
    "RedisPasteStore",
    "create_paste_store",
]
