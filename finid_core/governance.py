"""
finid_core.governance
---------------------
Shared machinery for the three registries:

- one admin per registry, initialised to the deployer and transferable
- admin-managed authority flags (authorized issuers, trusted sources)
- atomic check-then-write: every mutation runs under the registry's
  writer lock and inside a storage transaction, and a rejected check
  produces no write
- RegistryError -> Result translation at the operation boundary

Reads never take the lock and never fail.
"""

from __future__ import annotations
import threading
from typing import Any, Callable, Optional
from finid_core.clock import HeightClock
from finid_core.errors import RegistryError, Result, Unauthorized, NotFound
from finid_core.logger import registry_logger
from finid_core.models import AuthorityRecord
from finid_core.storage.provider import StorageProvider


class Registry:
    name: str = "registry"

    def __init__(self, admin: str, clock: HeightClock, storage: StorageProvider):
        self.clock = clock
        self.storage = storage
        self._lock = threading.RLock()
        self.log = registry_logger(self.name, clock)

        # A persisted admin survives restarts; the deployer only seeds it.
        if self.storage.get(self._ns("meta"), "admin") is None:
            with self.storage.transaction():
                self.storage.put(self._ns("meta"), "admin", {"admin": admin})
                self.storage.log_event(f"{self.name}.deploy", {"admin": admin})

    def _ns(self, table: str) -> str:
        return f"{self.name}.{table}"

    def height(self) -> int:
        return self.clock.current_height()

    # ------------------------------------------------------------------
    # Admin governance
    # ------------------------------------------------------------------
    def get_admin(self) -> str:
        return self.storage.get(self._ns("meta"), "admin")["admin"]

    def is_admin(self, principal: str) -> bool:
        return principal == self.get_admin()

    def _require_admin(self, caller: str, action: str) -> None:
        if not self.is_admin(caller):
            raise Unauthorized(f"{action}: caller {caller} is not the {self.name} admin")

    def transfer_admin(self, caller: str, new_admin: str) -> Result:
        def op():
            self._require_admin(caller, "transfer_admin")
            self.storage.put(self._ns("meta"), "admin", {"admin": new_admin})
            self._audit("admin.transfer", {"from": caller, "to": new_admin})
        return self._mutate("ADMIN TRANSFER", op)

    # ------------------------------------------------------------------
    # Authority flags
    # ------------------------------------------------------------------
    def _authority(self, table: str, subject: str) -> Optional[AuthorityRecord]:
        raw = self.storage.get(self._ns(table), subject)
        return AuthorityRecord.from_dict(raw) if raw else None

    def _set_authority(self, caller: str, table: str, subject: str, authorized: bool) -> None:
        """Admin-only flag write. Clearing a flag requires an existing record."""
        self._require_admin(caller, f"{table} update")
        current = self._authority(table, subject)
        if not authorized and current is None:
            raise NotFound(f"{table}: {subject} was never registered")
        if current is not None and current.authorized == authorized:
            return
        rec = AuthorityRecord(subject=subject, authorized=authorized)
        self.storage.put(self._ns(table), subject, rec.to_dict())
        self._audit(f"{table}.{'grant' if authorized else 'revoke'}", {"subject": subject, "by": caller})

    # ------------------------------------------------------------------
    # Boundary helpers
    # ------------------------------------------------------------------
    def _audit(self, event: str, payload: dict) -> None:
        payload = dict(payload, height=self.height())
        self.storage.log_event(f"{self.name}.{event}", payload)

    def _mutate(self, tag: str, op: Callable[[], Any]) -> Result:
        with self._lock:
            try:
                with self.storage.transaction():
                    value = op()
            except RegistryError as e:
                self.log.warning(f"[{tag} DENIED] {e.name}: {e}")
                return Result.failure(e)
        self.log.info(f"[{tag}] ok")
        return Result.success(value)
