"""Persistence for projects, blocks and sections."""

from .kv import KeyValueStore, Store

__all__ = ["KeyValueStore", "Store"]
