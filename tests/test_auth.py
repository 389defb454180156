import pytest
from tests._principals import ADMIN, ISSUER
from finid_core.auth import authenticate_caller
from finid_core.clock import ManualClock
from finid_core.credentials import CredentialRegistry
from finid_core.crypto import ed25519_generate, sign_envelope, verify_envelope, compute_pubkey_fingerprint
from finid_core.envelope import Envelope
from finid_core.errors import Unauthorized
from finid_core.storage import InMemoryStorage


def _signed(producer, priv, pub, subject="credential.authorize_issuer", payload=None):
    env = Envelope(producer=producer, subject=subject, payload=payload or {"issuer": ISSUER})
    return sign_envelope(env, priv, compute_pubkey_fingerprint(pub))


def test_sign_verify():
    priv, pub = ed25519_generate()
    env = _signed(ADMIN, priv, pub)
    assert verify_envelope(env, pub)


def test_envelope_dict_roundtrip_keeps_signature():
    priv, pub = ed25519_generate()
    env = Envelope.from_dict(_signed(ADMIN, priv, pub).to_dict())
    assert verify_envelope(env, pub)


def test_authenticated_call_reaches_registry():
    priv, pub = ed25519_generate()
    store = InMemoryStorage()
    reg = CredentialRegistry(admin=ADMIN, clock=ManualClock(), storage=store)

    env = _signed(ADMIN, priv, pub)
    caller = authenticate_caller(env, pub, store)
    assert caller == ADMIN
    assert reg.authorize_issuer(caller, env.payload["issuer"]).ok


def test_tampered_payload_rejected():
    priv, pub = ed25519_generate()
    env = _signed(ADMIN, priv, pub)
    env.payload["issuer"] = "someone-else"
    with pytest.raises(Unauthorized):
        authenticate_caller(env, pub, InMemoryStorage())


def test_forged_producer_rejected():
    priv, pub = ed25519_generate()
    env = _signed(ISSUER, priv, pub)
    env.producer = ADMIN
    with pytest.raises(Unauthorized):
        authenticate_caller(env, pub, InMemoryStorage())


def test_wrong_key_rejected():
    priv, pub = ed25519_generate()
    _, other_pub = ed25519_generate()
    env = _signed(ADMIN, priv, pub)
    with pytest.raises(Unauthorized):
        authenticate_caller(env, other_pub, InMemoryStorage())


def test_replay_rejected(caplog):
    priv, pub = ed25519_generate()
    store = InMemoryStorage()
    env = _signed(ADMIN, priv, pub)
    authenticate_caller(env, pub, store)
    with pytest.raises(Unauthorized):
        authenticate_caller(env, pub, store)
    assert "[AUTH] replay" in caplog.text


def test_unsigned_envelope_rejected():
    _, pub = ed25519_generate()
    env = Envelope(producer=ADMIN, subject="identity.verify_user", payload={})
    with pytest.raises(Unauthorized):
        authenticate_caller(env, pub, InMemoryStorage())
