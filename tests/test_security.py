"""Tests for password hashing, tokens and the user service."""

from datetime import timedelta

import pytest
from jose import jwt

from shortener.core.exceptions import AuthenticationError, UserAlreadyExistsError
from shortener.core.security import (
    create_access_token,
    decode_access_token,
    generate_api_key,
    hash_password,
    verify_password,
)
from shortener.core.setting import settings
from shortener.services.user_service import UserService


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("other-pass", hashed)

    def test_verify_handles_garbage(self):
        assert not verify_password("anything", "")
        assert not verify_password("", hash_password("x" * 8))
        assert not verify_password("anything", "not-a-bcrypt-hash")


class TestTokens:

    def test_round_trip(self):
        assert decode_access_token(create_access_token(42)) == 42

    def test_expired_token(self):
        token = create_access_token(42, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_token_signed_with_another_key(self):
        token = jwt.encode({"sub": "42"}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_token_without_subject(self):
        token = jwt.encode({"scope": "x"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_api_keys_are_unique(self):
        keys = {generate_api_key() for _ in range(100)}
        assert len(keys) == 100
        assert all(len(key) == 64 for key in keys)


class TestUserService:

    @pytest.mark.asyncio
    async def test_register_and_authenticate(self, session):
        service = UserService(session)
        user = await service.register(" Carol@Example.com ", "password1")

        assert user.email == "carol@example.com"
        assert user.api_key
        assert (await service.authenticate("carol@example.com", "password1")).id == user.id
        assert (await service.get_by_api_key(user.api_key)).id == user.id

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, session):
        service = UserService(session)
        await service.register("dave@example.com", "password1")
        with pytest.raises(UserAlreadyExistsError):
            await service.register("DAVE@example.com", "password2")

    @pytest.mark.asyncio
    async def test_wrong_password(self, session):
        service = UserService(session)
        await service.register("erin@example.com", "password1")
        with pytest.raises(AuthenticationError):
            await service.authenticate("erin@example.com", "password2")

    @pytest.mark.asyncio
    async def test_default_user_is_idempotent(self, session):
        service = UserService(session)
        first = await service.get_or_create_default_user()
        second = await service.get_or_create_default_user()

        assert first.id == second.id
        assert first.is_default
        assert first.email == settings.DEFAULT_USER_EMAIL

    @pytest.mark.asyncio
    async def test_default_user_cannot_log_in(self, session):
        service = UserService(session)
        await service.get_or_create_default_user()
        with pytest.raises(AuthenticationError):
            await service.authenticate(settings.DEFAULT_USER_EMAIL, "anything")
