import copy
import threading
from contextlib import contextmanager
from typing import Any, Dict, Optional
from finid_core.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    """
    Dict backend. Writes made inside transaction() are staged in an
    overlay owned by the writing thread and merged into the committed
    records on success; other threads only ever read committed values.
    """

    def __init__(self):
        self.records: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.audit = []
        self.replay = set()
        self._commit_lock = threading.Lock()
        self._local = threading.local()

    def _tx(self) -> Optional[Dict[str, Any]]:
        return getattr(self._local, "tx", None)

    def get(self, ns: str, key: str) -> Optional[Dict[str, Any]]:
        tx = self._tx()
        if tx is not None and (ns, key) in tx["writes"]:
            value = tx["writes"][(ns, key)]
        else:
            value = self.records.get(ns, {}).get(key)
        return copy.deepcopy(value) if value is not None else None

    def put(self, ns: str, key: str, value: Dict[str, Any]) -> None:
        value = copy.deepcopy(value)
        tx = self._tx()
        if tx is not None:
            tx["writes"][(ns, key)] = value
            return
        with self._commit_lock:
            self.records.setdefault(ns, {})[key] = value

    @contextmanager
    def transaction(self):
        if self._tx() is not None:
            # nested: joins the outer transaction
            yield
            return
        self._local.tx = {"writes": {}, "audit": []}
        try:
            yield
            tx = self._local.tx
            with self._commit_lock:
                for (ns, key), value in tx["writes"].items():
                    self.records.setdefault(ns, {})[key] = value
                self.audit.extend(tx["audit"])
        finally:
            self._local.tx = None

    # audit
    def log_event(self, event_type: str, payload: Dict[str, Any]):
        tx = self._tx()
        if tx is not None:
            tx["audit"].append((event_type, payload))
            return
        with self._commit_lock:
            self.audit.append((event_type, payload))

    # replay guard
    def seen_msg(self, msg_id: str) -> bool:
        return msg_id in self.replay

    def mark_msg(self, msg_id: str):
        with self._commit_lock:
            self.replay.add(msg_id)
