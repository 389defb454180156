"""
finid_core.consent
------------------
ConsentRegistry: self-sovereign consent grants keyed by
(user, data_type, recipient).

The caller is always the data subject; there is no way to grant or
revoke on someone else's behalf except the admin-or-self bulk revoke.

A secondary index (user -> granted keys) is written in the same
transaction as every grant and revoke; bulk_revoke_all_consents reads it.
"""

from __future__ import annotations
from dataclasses import replace
from typing import List, Optional, Tuple
from finid_core.errors import NotFound, Result, Unauthorized
from finid_core.governance import Registry
from finid_core.models import ConsentGrant
from finid_core.utils import record_key


class ConsentRegistry(Registry):
    name = "consent"

    # --- secondary index ---

    def _granted_keys(self, user: str) -> List[Tuple[str, str]]:
        raw = self.storage.get(self._ns("index"), user)
        return [tuple(k) for k in raw["keys"]] if raw else []

    def _store_index(self, user: str, keys: List[Tuple[str, str]]) -> None:
        self.storage.put(self._ns("index"), user, {"keys": [list(k) for k in keys]})

    def _store(self, grant: ConsentGrant) -> None:
        self.storage.put(self._ns("grants"), record_key(grant.user, grant.data_type, grant.recipient), grant.to_dict())

    # --- operations ---

    def grant_consent(self, caller: str, data_type: str, recipient: str, expiration_offset: int, purpose: str) -> Result:
        if expiration_offset < 0:
            raise ValueError("expiration_offset must be non-negative")

        def op():
            now = self.height()
            grant = ConsentGrant(
                user=caller,
                data_type=data_type,
                recipient=recipient,
                granted=True,
                timestamp=now,
                expiration=now + expiration_offset,
                purpose=purpose,
            )
            self._store(grant)
            keys = self._granted_keys(caller)
            if (data_type, recipient) not in keys:
                self._store_index(caller, keys + [(data_type, recipient)])
            self._audit("grant", {"user": caller, "data_type": data_type, "recipient": recipient,
                                          "expiration": grant.expiration})
            return grant
        return self._mutate("CONSENT GRANT", op)

    def revoke_consent(self, caller: str, data_type: str, recipient: str) -> Result:
        def op():
            grant = self.get_consent_details(caller, data_type, recipient)
            if grant is None:
                raise NotFound(f"no consent from {caller} for {data_type} -> {recipient}")
            revoked = replace(grant, granted=False)
            self._store(revoked)
            keys = self._granted_keys(caller)
            if (data_type, recipient) in keys:
                self._store_index(caller, [k for k in keys if k != (data_type, recipient)])
            self._audit("revoke", {"user": caller, "data_type": data_type, "recipient": recipient})
            return revoked
        return self._mutate("CONSENT REVOKE", op)

    def bulk_revoke_all_consents(self, caller: str, user: str) -> Result:
        """Revoke every grant currently held for user. Value is the number revoked."""
        def op():
            if caller != user and not self.is_admin(caller):
                raise Unauthorized(f"{caller} may not revoke consents of {user}")
            keys = self._granted_keys(user)
            count = 0
            for data_type, recipient in keys:
                grant = self.get_consent_details(user, data_type, recipient)
                if grant is None or not grant.granted:
                    continue
                self._store(replace(grant, granted=False))
                count += 1
            self._store_index(user, [])
            self._audit("bulk_revoke", {"user": user, "by": caller, "revoked": count})
            return count
        return self._mutate("CONSENT BULK REVOKE", op)

    # --- reads ---

    def get_consent_details(self, user: str, data_type: str, recipient: str) -> Optional[ConsentGrant]:
        raw = self.storage.get(self._ns("grants"), record_key(user, data_type, recipient))
        return ConsentGrant.from_dict(raw) if raw else None

    def is_consent_valid(self, user: str, data_type: str, recipient: str) -> bool:
        grant = self.get_consent_details(user, data_type, recipient)
        return bool(grant and grant.is_valid(self.height()))
