import asyncio
from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from commons_youth.auth.jwt import (
    can_manage,
    can_view,
    create_access_token,
    create_refresh_token,
    ensure_can_manage,
    get_current_user,
    get_optional_user,
    hash_password,
    verify_password,
    verify_token,
)


@pytest.fixture
def owner():
    return SimpleNamespace(id=uuid4(), role="user")


@pytest.fixture
def stranger():
    return SimpleNamespace(id=uuid4(), role="user")


@pytest.fixture
def admin():
    return SimpleNamespace(id=uuid4(), role="admin")


def test_password_hashing():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_access_token_round_trip():
    token = create_access_token("user-1", "admin")
    payload = verify_token(token, "access")
    assert payload["sub"] == "user-1"
    assert payload["role"] == "admin"


def test_refresh_token_is_not_an_access_token():
    token = create_refresh_token("user-1")
    assert verify_token(token, "refresh")["sub"] == "user-1"
    with pytest.raises(HTTPException) as excinfo:
        verify_token(token, "access")
    assert excinfo.value.status_code == 401


def test_expired_or_garbage_token_is_rejected():
    expired = create_access_token("user-1", "user", expires_delta=timedelta(seconds=-5))
    for token in (expired, "not-a-token"):
        with pytest.raises(HTTPException) as excinfo:
            verify_token(token)
        assert excinfo.value.status_code == 401


def test_owner_and_admin_can_manage(owner, stranger, admin):
    record = SimpleNamespace(owner_id=owner.id, is_hidden=False)
    assert can_manage(record, owner)
    assert can_manage(record, admin)
    assert not can_manage(record, stranger)
    assert not can_manage(record, None)

    with pytest.raises(HTTPException) as excinfo:
        ensure_can_manage(record, stranger)
    assert excinfo.value.status_code == 403


def test_hidden_records_are_visible_to_owner_and_admin_only(owner, stranger, admin):
    hidden = SimpleNamespace(owner_id=owner.id, is_hidden=True)
    assert can_view(hidden, owner)
    assert can_view(hidden, admin)
    assert not can_view(hidden, stranger)
    assert not can_view(hidden, None)
    assert can_view(SimpleNamespace(owner_id=owner.id, is_hidden=False), None)


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_optional_user_treats_bad_tokens_as_anonymous():
    expired = create_access_token(str(uuid4()), "user", expires_delta=timedelta(seconds=-5))
    refresh = create_refresh_token(str(uuid4()))
    for token in (expired, refresh, "not-a-token"):
        assert asyncio.run(get_optional_user(bearer(token), db=None)) is None


def test_optional_user_without_credentials_is_anonymous():
    assert asyncio.run(get_optional_user(None, db=None)) is None


def test_current_user_still_rejects_bad_tokens():
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(get_current_user(bearer("not-a-token"), db=None))
    assert excinfo.value.status_code == 401
