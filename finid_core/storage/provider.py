# finid_core/storage/provider.py
from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class StorageProvider:
    """
    Key-value interface shared by every registry.

    Records live in namespaces (e.g. "consent.grants") under string keys;
    values are JSON-compatible dicts. Writes made inside transaction()
    become visible together or not at all.
    """

    # Interface
    def get(self, ns: str, key: str) -> Optional[Dict[str, Any]]: ...
    def put(self, ns: str, key: str, value: Dict[str, Any]) -> None: ...
    def log_event(self, event_type: str, payload: Dict[str, Any]) -> None: ...
    def seen_msg(self, msg_id: str) -> bool: ...
    def mark_msg(self, msg_id: str) -> None: ...

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield

    def close(self) -> None:
        return
