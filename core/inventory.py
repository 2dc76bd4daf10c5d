"""In-memory cache of the lights last fetched from the bridge.

The inventory is a snapshot, not a live view: it only changes when the
session fetches lights again, and a fetch replaces the whole sequence.
Positions in the snapshot are the indices used by light commands.
"""

import threading
from datetime import datetime

from models.types import Light


class LightInventory:
    """Ordered, replace-only snapshot of the bridge's lights."""

    def __init__(self):
        self._lights: tuple[Light, ...] = ()
        self._lock = threading.Lock()
        self.last_updated: datetime | None = None

    def replace(self, lights):
        """Swap in a new snapshot. The previous one is discarded, never merged."""
        snapshot = tuple(lights)
        with self._lock:
            self._lights = snapshot
            self.last_updated = datetime.now()

    def snapshot(self) -> tuple[Light, ...]:
        return self._lights

    def find_by_name(self, name: str) -> int | None:
        """Return the index of the light with this name (case-insensitive)."""
        for index, light in enumerate(self._lights):
            if light.name.lower() == name.lower():
                return index
        return None

    def __len__(self) -> int:
        return len(self._lights)

    def __getitem__(self, index: int) -> Light:
        return self._lights[index]

    def __iter__(self):
        return iter(self._lights)
