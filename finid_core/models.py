"""
finid_core.models
-----------------
Record types held by the registries.

Records are immutable values. Registries never mutate a stored record;
an update builds a new value from the previous one (dataclasses.replace)
and stores it under the same key.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict
from finid_core.constants import DOCUMENT_HASH_LEN
from finid_core.utils import b64e, b64d


@dataclass(frozen=True)
class AuthorityRecord:
    """Membership of a principal in an admin-managed privileged set."""
    subject: str
    authorized: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthorityRecord":
        return cls(subject=data["subject"], authorized=bool(data["authorized"]))


@dataclass(frozen=True)
class TrustedSource:
    source_id: str
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrustedSource":
        return cls(source_id=data["source_id"], active=bool(data["active"]))


@dataclass(frozen=True)
class UserInformation:
    user: str
    name: str
    document_hash: bytes
    verification_source: str

    def __post_init__(self):
        if not isinstance(self.document_hash, bytes) or len(self.document_hash) != DOCUMENT_HASH_LEN:
            raise ValueError(f"document_hash must be {DOCUMENT_HASH_LEN} bytes")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["document_hash"] = b64e(self.document_hash)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserInformation":
        return cls(
            user=data["user"],
            name=data["name"],
            document_hash=b64d(data["document_hash"]),
            verification_source=data["verification_source"],
        )


@dataclass(frozen=True)
class VerificationStatus:
    user: str
    verified: bool
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerificationStatus":
        return cls(user=data["user"], verified=bool(data["verified"]), timestamp=int(data["timestamp"]))


@dataclass(frozen=True)
class Credential:
    user: str
    credential_id: str
    issuer: str
    data: str
    issued_at: int
    expires_at: int
    revoked: bool = False

    def is_valid(self, height: int) -> bool:
        return not self.revoked and height <= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Credential":
        return cls(
            user=data["user"],
            credential_id=data["credential_id"],
            issuer=data["issuer"],
            data=data["data"],
            issued_at=int(data["issued_at"]),
            expires_at=int(data["expires_at"]),
            revoked=bool(data["revoked"]),
        )


@dataclass(frozen=True)
class ConsentGrant:
    user: str
    data_type: str
    recipient: str
    granted: bool
    timestamp: int
    expiration: int
    purpose: str = ""

    def is_valid(self, height: int) -> bool:
        return self.granted and height <= self.expiration

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsentGrant":
        return cls(
            user=data["user"],
            data_type=data["data_type"],
            recipient=data["recipient"],
            granted=bool(data["granted"]),
            timestamp=int(data["timestamp"]),
            expiration=int(data["expiration"]),
            purpose=data.get("purpose", ""),
        )
