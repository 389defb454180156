"""
finid_core.envelope
-------------------
Defines the Envelope class, a signed registry call request.

The producer is the principal the call is attributed to; the subject
names the registry operation (e.g. "consent.grant") and the payload
holds its arguments.

Key features:
- Deterministic canonicalization for signing
- Replay-safe identifiers (msg_id, ts)
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional
from .constants import SCHEMA_VERSION
from .utils import new_id, now_ts, canonical_json


@dataclass
class Envelope:
    schema_ver: str = SCHEMA_VERSION
    msg_id: str = field(default_factory=new_id)
    ts: str = field(default_factory=now_ts)
    producer: str = ""          # caller principal
    subject: str = ""           # e.g., "credential.issue"
    key_id: str = ""            # identifies signing key/pubkey
    sig: Optional[str] = None   # base64 signature (over canonical body)
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_sig: bool = True) -> Dict[str, Any]:
        d = asdict(self)
        if not include_sig:
            d["sig"] = None
        return d

    def to_signing_bytes(self) -> bytes:
        # msg_id is covered by the signature
        body = {
            "msg_id": self.msg_id,
            "producer": self.producer,
            "subject": self.subject,
            "payload": self.payload,
        }
        return canonical_json(body)

    @classmethod
    def from_dict(cls, data: dict) -> "Envelope":
        """Reconstruct Envelope from dict (inverse of to_dict)."""
        return cls(
            schema_ver=data.get("schema_ver", SCHEMA_VERSION),
            msg_id=data.get("msg_id") or new_id(),
            ts=data.get("ts", now_ts()),
            producer=data.get("producer", ""),
            subject=data.get("subject", ""),
            key_id=data.get("key_id", ""),
            sig=data.get("sig"),
            payload=dict(data.get("payload") or {}),
        )
