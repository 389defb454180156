"""
finid_core.utils
----------------
Lightweight helpers for UUID generation, timestamping, base64 utilities, and canonical JSON serialization.
Canonical JSON is also used to encode composite record keys for storage.
"""

from __future__ import annotations
import base64, json, time, uuid, hashlib
from typing import Any, Dict

def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))

def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def new_id() -> str:
    return uuid.uuid4().hex

def canonical_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON for signing
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")

def record_key(*parts: str) -> str:
    """Encode a (possibly composite) record key as a stable string."""
    if len(parts) == 1:
        return parts[0]
    return json.dumps(list(parts), separators=(",", ":"), ensure_ascii=False)

def document_hash(data: bytes) -> bytes:
    """32-byte SHA-256 digest of an identity document, as stored in UserInformation."""
    return hashlib.sha256(data).digest()
