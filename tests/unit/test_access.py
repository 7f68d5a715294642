"""Unit tests for authentication and capability checks."""

import uuid
from datetime import timedelta

import pytest
from jose import jwt
from sqlalchemy import select

from medexplain.core.access import (
    Principal,
    decode_access_token,
    is_admin,
    list_admins,
    owned_by,
    require_admin,
    resolve_principal,
)
from medexplain.core.errors import Forbidden, Unauthorized
from medexplain.db import SavedAnswer


class TestDecodeAccessToken:
    def test_valid_token(self, make_token) -> None:
        user_id = uuid.uuid4()
        decoded_id, email = decode_access_token(make_token(user_id, email="a@b.org"))
        assert decoded_id == user_id
        assert email == "a@b.org"

    def test_expired_token(self, make_token) -> None:
        token = make_token(uuid.uuid4(), expires_in=timedelta(seconds=-10))
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_wrong_secret(self) -> None:
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "aud": "authenticated"},
            "not-the-secret",
            algorithm="HS256",
        )
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_wrong_audience(self, make_token) -> None:
        token = make_token(uuid.uuid4(), aud="someone-else")
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_subject_must_be_uuid(self, make_token) -> None:
        token = make_token(uuid.uuid4(), sub="service-account")
        with pytest.raises(Unauthorized):
            decode_access_token(token)

    def test_garbage(self) -> None:
        with pytest.raises(Unauthorized):
            decode_access_token("not-a-jwt")


class TestAdminMembership:
    async def test_is_admin(self, db_session, admin, admin_row, user) -> None:
        assert await is_admin(db_session, admin.user_id) is True
        assert await is_admin(db_session, user.user_id) is False

    async def test_resolve_principal(self, db_session, make_token, admin, admin_row) -> None:
        principal = await resolve_principal(db_session, make_token(admin.user_id, email=admin.email))
        assert principal == Principal(user_id=admin.user_id, is_admin=True, email=admin.email)

    async def test_list_admins_requires_admin(self, db_session, admin, admin_row, user) -> None:
        admins = await list_admins(db_session, admin)
        assert [a.user_id for a in admins] == [admin.user_id]

        with pytest.raises(Forbidden):
            await list_admins(db_session, user)


def test_require_admin(admin, user) -> None:
    require_admin(admin)
    with pytest.raises(Forbidden):
        require_admin(user)


def test_owned_by_filters_on_user_id(user) -> None:
    stmt = select(SavedAnswer).where(owned_by(SavedAnswer, user))
    compiled = stmt.compile()
    assert "saved_answers.user_id = :user_id_1" in str(compiled)
    assert compiled.params["user_id_1"] == user.user_id
