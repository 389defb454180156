from __future__ import annotations
import threading


class HeightClock:
    # Interface
    def current_height(self) -> int: ...


class ManualClock(HeightClock):
    """
    Monotonic block-height counter driven by the host.

    Registries only ever read it; the embedding ledger (or a test)
    advances it.
    """

    def __init__(self, height: int = 0):
        if height < 0:
            raise ValueError("height must be non-negative")
        self._height = height
        self._lock = threading.Lock()

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError("clock cannot move backwards")
        with self._lock:
            self._height += blocks
            return self._height

    def set(self, height: int) -> int:
        with self._lock:
            if height < self._height:
                raise ValueError(f"clock cannot move backwards ({self._height} -> {height})")
            self._height = height
            return self._height
