import pytest

from tableside.services import passwords
from tableside.services.admin_bootstrap import upsert_admin_user
from tableside.services.passwords import (
    Pbkdf2Hash,
    hash_password,
    is_password_hash,
    staff_password_hash,
    verify_password,
)


def test_hash_and_verify():
    hashed = hash_password("s3cret")

    assert hashed != "s3cret"
    assert is_password_hash(hashed)
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_pbkdf2_fallback_when_bcrypt_unavailable(monkeypatch):
    monkeypatch.setattr(passwords, "_pwd_context", None)

    hashed = hash_password("s3cret")

    assert hashed.startswith("pbkdf2$")
    assert Pbkdf2Hash.parse(hashed).iterations == passwords.PBKDF2_ITERATIONS
    assert verify_password("s3cret", hashed)
    assert not verify_password("other", hashed)


@pytest.mark.parametrize("stored", ["", "pbkdf2$notanumber$zz$zz", "pbkdf2$1$ab", "plaintext"])
def test_verify_rejects_empty_and_malformed_hashes(stored):
    assert not verify_password("x", stored)


def test_staff_password_hash_keeps_existing_hashes():
    existing = hash_password("abc")
    assert staff_password_hash(existing) == existing
    assert staff_password_hash("abc") != "abc"
    assert verify_password("abc", staff_password_hash("abc"))


def test_upsert_admin_creates_then_updates(db_session):
    admin, created = upsert_admin_user(
        db_session, username="chef", email=None, full_name="Head Chef", password="first"
    )
    assert created
    assert admin.created_at is not None
    assert admin.session_version == 0
    assert verify_password("first", admin.password_hash)

    same, created_again = upsert_admin_user(
        db_session, username="chef", email="chef@example.com", full_name="Chef", password=None
    )
    assert not created_again
    assert same.id == admin.id
    assert same.email == "chef@example.com"
    assert same.session_version == 0
    assert verify_password("first", same.password_hash)


def test_password_change_revokes_sessions(db_session):
    admin, _ = upsert_admin_user(db_session, username="chef", email=None, full_name="Chef", password="first")

    updated, _ = upsert_admin_user(db_session, username="chef", email=None, full_name="Chef", password="second")

    assert updated.session_version == 1
    assert verify_password("second", updated.password_hash)


def test_upsert_admin_requires_password_for_new_user(db_session):
    with pytest.raises(ValueError):
        upsert_admin_user(db_session, username="new", email=None, full_name="New", password=None)
