"""
finid_core.auth
---------------
Resolves the caller principal for a registry call from a signed Envelope.

Registries take the caller as a plain argument; hosts that receive calls
over an untrusted channel use authenticate_caller() first and pass the
returned principal on.
"""

from __future__ import annotations
from finid_core.crypto import verify_envelope, compute_pubkey_fingerprint
from finid_core.envelope import Envelope
from finid_core.errors import Unauthorized
from finid_core.logger import get_logger
from finid_core.storage.provider import StorageProvider

log = get_logger("FinID.Auth")


def authenticate_caller(env: Envelope, pub_raw: bytes, storage: StorageProvider) -> str:
    if not env.producer:
        raise Unauthorized("envelope has no producer")
    if env.key_id and env.key_id != compute_pubkey_fingerprint(pub_raw):
        log.warning(f"[AUTH] key mismatch producer={env.producer} key_id={env.key_id}")
        raise Unauthorized("envelope key_id does not match the supplied public key")
    if not verify_envelope(env, pub_raw):
        log.warning(f"[AUTH] bad signature producer={env.producer} msg_id={env.msg_id}")
        raise Unauthorized("envelope signature is invalid")
    if storage.seen_msg(env.msg_id):
        log.warning(f"[AUTH] replay producer={env.producer} msg_id={env.msg_id}")
        raise Unauthorized(f"message {env.msg_id} was already processed")

    storage.mark_msg(env.msg_id)
    log.debug(f"[AUTH] ok producer={env.producer} subject={env.subject}")
    return env.producer
