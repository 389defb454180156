"""
finid_core.crypto
-----------------
Ed25519 primitives used to attribute registry calls to a principal:

- ed25519_generate / ed25519_sign / ed25519_verify
- sign_envelope(), verify_envelope()
- compute_pubkey_fingerprint() for stable key ids
"""

from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ed25519
import hashlib
from .utils import b64e, b64d
from .envelope import Envelope

# --------- Ed25519 (sign/verify) ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    pk = sk.public_key()
    return sk.private_bytes_raw(), pk.public_bytes_raw()

def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    sk = ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw)
    return sk.sign(data)

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False

# --------- Envelope helpers ----------
def sign_envelope(env: Envelope, priv_raw: bytes, key_id: str) -> Envelope:
    env.key_id = key_id
    sig = ed25519_sign(priv_raw, env.to_signing_bytes())
    env.sig = b64e(sig)
    return env

def verify_envelope(env: Envelope, pub_raw: bytes) -> bool:
    if not env.sig:
        return False
    return ed25519_verify(pub_raw, b64d(env.sig), env.to_signing_bytes())

def compute_pubkey_fingerprint(pub_raw: bytes) -> str:
    """
    Stable fingerprint for an Ed25519 public key: hex SHA-256,
    truncated to 32 chars. Suitable as an envelope key_id.
    """
    return hashlib.sha256(pub_raw).hexdigest()[:32]
