"""
finid_core.identity
-------------------
IdentityRegistry: trusted verification sources, self-submitted user
information and admin-issued verification status.

Verification is one-way; there is no operation that clears it.
"""

from __future__ import annotations
from typing import Optional
from finid_core.errors import Forbidden, NotFound, Result
from finid_core.governance import Registry
from finid_core.models import TrustedSource, UserInformation, VerificationStatus


class IdentityRegistry(Registry):
    name = "identity"

    # --- trusted sources ---

    def add_trusted_source(self, caller: str, source_id: str) -> Result:
        return self._mutate("SOURCE ADD", lambda: self._set_authority(caller, "sources", source_id, True))

    def remove_trusted_source(self, caller: str, source_id: str) -> Result:
        return self._mutate("SOURCE REMOVE", lambda: self._set_authority(caller, "sources", source_id, False))

    def get_trusted_source(self, source_id: str) -> Optional[TrustedSource]:
        rec = self._authority("sources", source_id)
        if rec is None:
            return None
        return TrustedSource(source_id=rec.subject, active=rec.authorized)

    def is_trusted_source(self, source_id: str) -> bool:
        src = self.get_trusted_source(source_id)
        return bool(src and src.active)

    # --- user information ---

    def submit_information(self, caller: str, name: str, document_hash: bytes, source_id: str) -> Result:
        # Validates the hash before anything is checked or written
        info = UserInformation(user=caller, name=name, document_hash=document_hash, verification_source=source_id)

        def op():
            src = self.get_trusted_source(source_id)
            if src is None:
                raise NotFound(f"unknown verification source {source_id}")
            if not src.active:
                raise Forbidden(f"verification source {source_id} is not active")
            self.storage.put(self._ns("users"), caller, info.to_dict())
            self._audit("info.submit", {"user": caller, "source": source_id})
        return self._mutate("INFO SUBMIT", op)

    def get_user_information(self, user: str) -> Optional[UserInformation]:
        raw = self.storage.get(self._ns("users"), user)
        return UserInformation.from_dict(raw) if raw else None

    # --- verification ---

    def verify_user(self, caller: str, user: str) -> Result:
        def op():
            self._require_admin(caller, "verify_user")
            if self.get_user_information(user) is None:
                raise NotFound(f"no information submitted for {user}")
            status = VerificationStatus(user=user, verified=True, timestamp=self.height())
            self.storage.put(self._ns("status"), user, status.to_dict())
            self._audit("user.verify", {"user": user, "by": caller})
            return status
        return self._mutate("USER VERIFY", op)

    def get_verification_status(self, user: str) -> Optional[VerificationStatus]:
        raw = self.storage.get(self._ns("status"), user)
        return VerificationStatus.from_dict(raw) if raw else None

    def is_verified(self, user: str) -> bool:
        status = self.get_verification_status(user)
        return bool(status and status.verified)
