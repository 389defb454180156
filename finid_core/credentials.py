"""
finid_core.credentials
----------------------
CredentialRegistry: admin-authorized issuers and the credentials they
issue to users, keyed by (user, credential_id).

Only the issuer that wrote a credential may revoke it. Withdrawing an
issuer's authorization does not touch credentials it already issued.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional
from finid_core.errors import Forbidden, NotFound, Result
from finid_core.governance import Registry
from finid_core.models import Credential
from finid_core.utils import record_key


class CredentialRegistry(Registry):
    name = "credential"

    # --- issuers ---

    def authorize_issuer(self, caller: str, issuer: str) -> Result:
        return self._mutate("ISSUER AUTH", lambda: self._set_authority(caller, "issuers", issuer, True))

    def revoke_issuer_authorization(self, caller: str, issuer: str) -> Result:
        return self._mutate("ISSUER REVOKE", lambda: self._set_authority(caller, "issuers", issuer, False))

    def is_authorized(self, issuer: str) -> bool:
        rec = self._authority("issuers", issuer)
        return bool(rec and rec.authorized)

    # --- credentials ---

    def issue_credential(self, caller: str, user: str, credential_id: str, data: str, validity_period: int) -> Result:
        if validity_period < 0:
            raise ValueError("validity_period must be non-negative")

        def op():
            if not self.is_authorized(caller):
                raise Forbidden(f"{caller} is not an authorized issuer")
            now = self.height()
            cred = Credential(
                user=user,
                credential_id=credential_id,
                issuer=caller,
                data=data,
                issued_at=now,
                expires_at=now + validity_period,
            )
            self.storage.put(self._ns("credentials"), record_key(user, credential_id), cred.to_dict())
            self._audit("issue", {"user": user, "credential_id": credential_id, "issuer": caller,
                                             "expires_at": cred.expires_at})
            return cred
        return self._mutate("CREDENTIAL ISSUE", op)

    def revoke_credential(self, caller: str, user: str, credential_id: str) -> Result:
        def op():
            cred = self.get_credential(user, credential_id)
            if cred is None:
                raise NotFound(f"no credential {credential_id} for {user}")
            if cred.issuer != caller:
                raise Forbidden(f"only issuer {cred.issuer} may revoke {credential_id}")
            revoked = replace(cred, revoked=True)
            self.storage.put(self._ns("credentials"), record_key(user, credential_id), revoked.to_dict())
            self._audit("revoke", {"user": user, "credential_id": credential_id, "by": caller})
            return revoked
        return self._mutate("CREDENTIAL REVOKE", op)

    def get_credential(self, user: str, credential_id: str) -> Optional[Credential]:
        raw = self.storage.get(self._ns("credentials"), record_key(user, credential_id))
        return Credential.from_dict(raw) if raw else None

    def is_credential_valid(self, user: str, credential_id: str) -> bool:
        cred = self.get_credential(user, credential_id)
        return bool(cred and cred.is_valid(self.height()))
