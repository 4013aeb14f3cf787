"""
Tests for short URL creation and the mapping store.

Run against a real (temporary) SQLite database so the unique index on
short_code is what actually detects collisions.
"""

from datetime import timedelta

import pytest

from shortener.core.exceptions import (
    CodeTakenError,
    DuplicateCodeError,
    GenerationExhaustedError,
    InvalidExpirationError,
    InvalidShortCodeError,
    InvalidURLError,
)
from shortener.core.setting import settings
from shortener.db.models import utcnow
from shortener.services.mapping_store import InsertStatus, MappingStore
from shortener.services.url_service import URLShorteningService

from conftest import ScriptedGenerator

TOLERANCE = timedelta(seconds=5)


class TestMappingStore:

    @pytest.mark.asyncio
    async def test_insert_then_find(self, session, default_user):
        store = MappingStore(session)
        expires_at = utcnow() + timedelta(days=1)

        result = await store.insert("abc12345", "https://example.com", default_user.id, expires_at)

        assert result.status is InsertStatus.INSERTED
        assert result.mapping.id is not None
        assert result.mapping.clicks == 0

        found = await store.find_by_code("abc12345")
        assert found.original_url == "https://example.com"
        assert found.owner_id == default_user.id

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_a_result_not_an_exception(self, session, default_user):
        store = MappingStore(session)
        expires_at = utcnow() + timedelta(days=1)
        await store.insert("dupe0001", "https://one.example.com", default_user.id, expires_at)

        result = await store.insert("dupe0001", "https://two.example.com", default_user.id, expires_at)

        assert result.status is InsertStatus.ALREADY_EXISTS
        assert not result.inserted
        assert result.mapping is None
        assert (await store.find_by_code("dupe0001")).original_url == "https://one.example.com"

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, session):
        assert await MappingStore(session).find_by_code("nothere1") is None

    @pytest.mark.asyncio
    async def test_rejects_relative_url(self, session, default_user):
        with pytest.raises(InvalidURLError):
            await MappingStore(session).insert(
                "badurl01", "example.com", default_user.id, utcnow() + timedelta(days=1)
            )

    @pytest.mark.asyncio
    async def test_rejects_expiry_not_after_creation(self, session, default_user):
        now = utcnow()
        with pytest.raises(InvalidExpirationError):
            await MappingStore(session).insert(
                "past0001", "https://example.com", default_user.id, now, created_at=now
            )

    @pytest.mark.asyncio
    async def test_increment_returns_new_total(self, session, default_user):
        store = MappingStore(session)
        await store.insert("count001", "https://example.com", default_user.id, utcnow() + timedelta(days=1))

        assert await store.increment_clicks("count001") == 1
        assert await store.increment_clicks("count001") == 2


class TestCreateShortURL:

    @pytest.mark.asyncio
    async def test_generated_code(self, session, default_user):
        mapping = await URLShorteningService(session).create_short_url(
            "https://example.com/page", owner=default_user
        )

        assert len(mapping.short_code) == 8
        assert mapping.short_code.isalnum()
        assert mapping.original_url == "https://example.com/page"
        assert mapping.clicks == 0

    @pytest.mark.asyncio
    async def test_missing_scheme_gets_https(self, session, default_user):
        mapping = await URLShorteningService(session).create_short_url(
            "example.com/page", owner=default_user
        )
        assert mapping.original_url == "https://example.com/page"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["ftp://example.com", "not a url", "javascript:alert(1)", "http://localhost"])
    async def test_invalid_url(self, session, default_user, url):
        with pytest.raises(InvalidURLError):
            await URLShorteningService(session).create_short_url(url, owner=default_user)

    @pytest.mark.asyncio
    async def test_default_expiration_is_thirty_days(self, session, default_user):
        mapping = await URLShorteningService(session).create_short_url(
            "https://example.com", owner=default_user
        )
        assert abs(mapping.expires_at - (mapping.created_at + timedelta(days=30))) < TOLERANCE

    @pytest.mark.asyncio
    async def test_authenticated_expiration(self, session, registered_user):
        mapping = await URLShorteningService(session).create_short_url(
            "https://example.com", owner=registered_user, authenticated=True, expires_in="2w"
        )
        assert abs(mapping.expires_at - (mapping.created_at + timedelta(days=14))) < TOLERANCE

    @pytest.mark.asyncio
    async def test_anonymous_expiration_request_ignored(self, session, default_user):
        mapping = await URLShorteningService(session).create_short_url(
            "https://example.com", owner=default_user, authenticated=False, expires_in="1y"
        )
        assert abs(mapping.expires_at - (mapping.created_at + timedelta(days=30))) < TOLERANCE

    @pytest.mark.asyncio
    async def test_malformed_expiration(self, session, registered_user):
        with pytest.raises(InvalidExpirationError):
            await URLShorteningService(session).create_short_url(
                "https://example.com", owner=registered_user, authenticated=True, expires_in="soon"
            )

    @pytest.mark.asyncio
    async def test_custom_code(self, session, registered_user):
        mapping = await URLShorteningService(session).create_short_url(
            "https://example.com", owner=registered_user, authenticated=True, custom_code="my-link"
        )
        assert mapping.short_code == "my-link"

    @pytest.mark.asyncio
    async def test_custom_code_collision(self, session, registered_user):
        service = URLShorteningService(session)
        first = await service.create_short_url(
            "https://one.example.com", owner=registered_user, authenticated=True, custom_code="abc"
        )
        first_id = first.id

        with pytest.raises(CodeTakenError) as exc_info:
            await service.create_short_url(
                "https://two.example.com", owner=registered_user, authenticated=True, custom_code="abc"
            )
        assert isinstance(exc_info.value, DuplicateCodeError)

        untouched = await MappingStore(session).find_by_code("abc")
        assert untouched.id == first_id
        assert untouched.original_url == "https://one.example.com"

    @pytest.mark.asyncio
    async def test_custom_code_collision_with_same_url_is_still_an_error(self, session, registered_user):
        service = URLShorteningService(session)
        await service.create_short_url("https://example.com", owner=registered_user, custom_code="same")

        with pytest.raises(CodeTakenError):
            await service.create_short_url("https://example.com", owner=registered_user, custom_code="same")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["ab", "has space", "slash/code", "docs"])
    async def test_invalid_custom_code(self, session, registered_user, code):
        with pytest.raises(InvalidShortCodeError):
            await URLShorteningService(session).create_short_url(
                "https://example.com", owner=registered_user, custom_code=code
            )

    @pytest.mark.asyncio
    async def test_generated_collision_is_retried(self, session, default_user):
        first = await URLShorteningService(
            session, code_generator=ScriptedGenerator(["Repeat01"])
        ).create_short_url("https://one.example.com", owner=default_user)
        # The collision rolls the session back and expires every loaded object
        first_code = first.short_code

        generator = ScriptedGenerator(["Repeat01", "Fresh002"])
        second = await URLShorteningService(
            session, code_generator=generator
        ).create_short_url("https://two.example.com", owner=default_user)

        assert generator.calls == 2
        assert first_code == "Repeat01"
        assert second.short_code == "Fresh002"
        assert second.original_url == "https://two.example.com"
        assert (await MappingStore(session).find_by_code("Repeat01")).original_url == "https://one.example.com"

    @pytest.mark.asyncio
    async def test_collision_is_logged(self, session, default_user, caplog):
        await URLShorteningService(
            session, code_generator=ScriptedGenerator(["Logged01"])
        ).create_short_url("https://example.com", owner=default_user)

        with caplog.at_level("WARNING", logger="shortener"):
            await URLShorteningService(
                session, code_generator=ScriptedGenerator(["Logged01", "Logged02"])
            ).create_short_url("https://example.com", owner=default_user)

        assert "collision" in caplog.text

    @pytest.mark.asyncio
    async def test_generation_exhausted(self, session, default_user):
        await URLShorteningService(
            session, code_generator=ScriptedGenerator(["Taken001"])
        ).create_short_url("https://example.com", owner=default_user)

        generator = ScriptedGenerator(["Taken001"] * 10)
        service = URLShorteningService(session, code_generator=generator, max_attempts=3)

        with pytest.raises(GenerationExhaustedError) as exc_info:
            await service.create_short_url("https://example.com/other", owner=default_user)

        assert exc_info.value.attempts == 3
        assert generator.calls == 3

    @pytest.mark.asyncio
    async def test_codes_are_unique_across_many_creations(self, session, default_user):
        service = URLShorteningService(session)
        codes = set()
        for i in range(50):
            mapping = await service.create_short_url(f"https://example.com/{i}", owner=default_user)
            codes.add(mapping.short_code)
        assert len(codes) == 50


class TestServiceSettings:

    @pytest.mark.asyncio
    async def test_explicit_values_are_kept(self, session):
        service = URLShorteningService(session, max_attempts=1, default_expiration_days=1)
        assert service.max_attempts == 1
        assert service.default_expiration_days == 1

    @pytest.mark.asyncio
    async def test_defaults_come_from_settings(self, session):
        service = URLShorteningService(session)
        assert service.max_attempts == settings.SHORT_CODE_MAX_ATTEMPTS
        assert service.default_expiration_days == settings.DEFAULT_EXPIRATION_DAYS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {"max_attempts": 0},
        {"default_expiration_days": 0},
        {"max_attempts": -1},
    ])
    async def test_zero_is_not_replaced_by_default(self, session, kwargs):
        with pytest.raises(ValueError):
            URLShorteningService(session, **kwargs)
