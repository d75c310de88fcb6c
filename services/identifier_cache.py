"""
In-memory name -> ID cache backed by a JSON map file.

One instance holds the category map, another the product map. Both are
shared by every request, so all access goes through a lock.
"""

import threading
from pathlib import Path
from typing import Optional

import structlog

from services.map_store import load_map, save_map

logger = structlog.get_logger(__name__)


class IdentifierCache:
    """
    Name/SKU -> WooCommerce ID mapping.

    Keys are exact, case-sensitive strings. Several keys may point to the
    same ID (a product's name and its SKU). Every mutation persists the
    whole map; a failed save leaves the in-memory state as it is.
    """

    def __init__(self, name: str, path: Path):
        self.name = name
        self.path = Path(path)
        self._entries: dict[str, int] = {}
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()

    # ===================
    # LIFECYCLE
    # ===================

    def load(self) -> int:
        """Replace the in-memory map with the file contents. Returns entry count."""
        entries = load_map(self.path)
        with self._lock:
            self._entries = entries
        logger.info("identifier_cache_loaded", cache=self.name, entries=len(entries))
        return len(entries)

    def persist(self) -> bool:
        """Save a snapshot of the map. Never raises."""
        # Serialized so an older snapshot never lands after a newer one
        with self._save_lock:
            return save_map(self.path, self.snapshot())

    # ===================
    # READS
    # ===================

    def get(self, key: str) -> Optional[int]:
        with self._lock:
            return self._entries.get(key)

    def snapshot(self) -> dict[str, int]:
        """Copy of the current map."""
        with self._lock:
            return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ===================
    # WRITES
    # ===================

    def remember(self, entries: dict[str, int]) -> None:
        """
        Add or overwrite entries, then persist the full map.

        Empty keys are ignored.
        """
        entries = {k: v for k, v in entries.items() if k}
        if not entries:
            return

        with self._lock:
            self._entries.update(entries)

        logger.debug("identifier_cache_updated", cache=self.name, keys=list(entries))
        self.persist()

    def replace(self, entries: dict[str, int]) -> None:
        """
        Swap in a complete new map, then persist it.

        Readers see either the old map or the new one, never a mix.
        """
        new_entries = dict(entries)
        with self._lock:
            self._entries = new_entries

        logger.info("identifier_cache_replaced", cache=self.name, entries=len(new_entries))
        self.persist()
