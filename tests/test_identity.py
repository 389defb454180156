import copy
import pytest
from tests._principals import ADMIN, USER, OTHER
from finid_core.errors import Forbidden, NotFound, Unauthorized
from finid_core.identity import IdentityRegistry
from finid_core.utils import document_hash

DOC = document_hash(b"passport-scan")


@pytest.fixture
def reg(clock, store):
    return IdentityRegistry(admin=ADMIN, clock=clock, storage=store)


def test_add_trusted_source(reg):
    res = reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    assert res.ok
    assert reg.is_trusted_source("GOVERNMENT_ID")
    assert reg.get_trusted_source("GOVERNMENT_ID").active is True


def test_add_trusted_source_is_idempotent(reg, store):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    events = len(store.audit)
    assert reg.add_trusted_source(ADMIN, "GOVERNMENT_ID").ok
    assert len(store.audit) == events


def test_add_trusted_source_requires_admin(reg, store):
    before = copy.deepcopy(store.records)
    res = reg.add_trusted_source(USER, "GOVERNMENT_ID")
    assert not res.ok
    assert isinstance(res.error, Unauthorized)
    assert store.records == before
    assert not reg.is_trusted_source("GOVERNMENT_ID")


def test_remove_trusted_source(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    assert reg.remove_trusted_source(ADMIN, "GOVERNMENT_ID").ok
    assert reg.get_trusted_source("GOVERNMENT_ID").active is False
    assert not reg.is_trusted_source("GOVERNMENT_ID")


def test_remove_unknown_source_is_not_found(reg):
    res = reg.remove_trusted_source(ADMIN, "NOPE")
    assert isinstance(res.error, NotFound)
    assert reg.get_trusted_source("NOPE") is None


def test_submit_information(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    res = reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    assert res.ok
    info = reg.get_user_information(USER)
    assert info.name == "John Doe"
    assert info.document_hash == DOC
    assert info.verification_source == "GOVERNMENT_ID"


def test_submit_information_overwrites(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.add_trusted_source(ADMIN, "BANK")
    reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    reg.submit_information(USER, "John Q. Doe", DOC, "BANK")
    info = reg.get_user_information(USER)
    assert info.name == "John Q. Doe"
    assert info.verification_source == "BANK"


def test_submit_information_unknown_source(reg):
    res = reg.submit_information(USER, "John Doe", DOC, "UNKNOWN")
    assert isinstance(res.error, NotFound)
    assert reg.get_user_information(USER) is None


def test_submit_information_inactive_source(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.remove_trusted_source(ADMIN, "GOVERNMENT_ID")
    res = reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    assert isinstance(res.error, Forbidden)
    assert res.code == 102
    assert reg.get_user_information(USER) is None


def test_submit_information_rejects_bad_hash(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    with pytest.raises(ValueError):
        reg.submit_information(USER, "John Doe", b"short", "GOVERNMENT_ID")
    assert reg.get_user_information(USER) is None


def test_verify_user(reg, clock):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    clock.set(120)
    res = reg.verify_user(ADMIN, USER)
    assert res.ok
    assert reg.is_verified(USER)
    assert reg.get_verification_status(USER).timestamp == 120
    assert res.value.verified is True


def test_verify_user_requires_admin(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    res = reg.verify_user(OTHER, USER)
    assert isinstance(res.error, Unauthorized)
    assert res.code == 100
    assert not reg.is_verified(USER)


def test_verify_user_without_information(reg):
    res = reg.verify_user(ADMIN, USER)
    assert isinstance(res.error, NotFound)
    assert res.code == 101
    assert reg.get_verification_status(USER) is None


def test_is_verified_unknown_user_is_false(reg):
    assert reg.is_verified("nobody") is False
    assert reg.get_user_information("nobody") is None


def test_source_deactivation_is_not_retroactive(reg):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.submit_information(USER, "John Doe", DOC, "GOVERNMENT_ID")
    reg.remove_trusted_source(ADMIN, "GOVERNMENT_ID")

    assert reg.get_user_information(USER).verification_source == "GOVERNMENT_ID"
    assert reg.verify_user(ADMIN, USER).ok
    assert reg.is_verified(USER)


def test_mutations_are_logged(reg, caplog):
    reg.add_trusted_source(ADMIN, "GOVERNMENT_ID")
    reg.add_trusted_source(USER, "OTHER_ID")
    assert "[SOURCE ADD] ok" in caplog.text
    assert "[SOURCE ADD DENIED] unauthorized" in caplog.text
