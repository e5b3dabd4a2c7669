"""Tests for the auth strategies and the session state they produce."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from facilitydesk.config import AppConfig
from facilitydesk.core.auth import (
    BackendAuthProvider,
    FixtureAuthProvider,
    build_auth_provider,
)
from facilitydesk.schemas.entities import Role
from tests.conftest import TEST_SECRET, make_token


@pytest.fixture
def provider(fixture_source, hub):
    return BackendAuthProvider(fixture_source.users, hub, TEST_SECRET)


@pytest.mark.asyncio
async def test_valid_token_resolves_profile(provider):
    state = await provider.get_auth_state(make_token())
    assert state.signed_in
    assert state.user_id == "dev-user"
    assert state.email == "demo@newsec.se"
    assert state.profile.name == "Demo Användare"
    assert state.role == Role.MANAGER
    assert state.is_loading is False


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
async def test_missing_or_garbage_token_is_signed_out(provider, token):
    state = await provider.get_auth_state(token)
    assert not state.signed_in
    assert state.profile is None
    assert state.role is None


@pytest.mark.asyncio
async def test_wrong_secret_and_expired_tokens_are_rejected(provider):
    assert not (await provider.get_auth_state(make_token(secret="other"))).signed_in

    expired = jwt.encode(
        {"sub": "dev-user", "exp": datetime.now(timezone.utc) - timedelta(minutes=5)},
        TEST_SECRET, algorithm="HS256",
    )
    assert not (await provider.get_auth_state(expired)).signed_in


@pytest.mark.asyncio
async def test_signed_in_without_profile(provider):
    state = await provider.get_auth_state(make_token(user_id="stranger", email="x@y.se"))
    assert state.signed_in
    assert state.profile is None
    assert state.email == "x@y.se"


@pytest.mark.asyncio
async def test_profile_cache_invalidated_by_user_changes(provider, fixture_source, hub):
    await provider.start()
    assert (await provider.get_auth_state(make_token())).role == Role.MANAGER

    await fixture_source.users.update("dev-user", {"role": Role.ADMIN})
    await hub.drain()
    assert (await provider.get_auth_state(make_token())).role == Role.ADMIN

    await provider.stop()
    assert hub.subscriber_count("users") == 0


@pytest.mark.asyncio
async def test_fixture_provider_is_dev_admin():
    state = await FixtureAuthProvider().get_auth_state(None)
    assert state.user_id == "dev-user"
    assert state.role == Role.ADMIN
    assert state.email == "dev@test.se"


@pytest.mark.asyncio
async def test_build_auth_provider_from_config(fixture_source, hub):
    bypass = AppConfig(DEV_BYPASS_AUTH=True)
    strict = AppConfig(DEV_BYPASS_AUTH=False, JWT_SECRET=TEST_SECRET)
    assert isinstance(build_auth_provider(bypass, fixture_source.users, hub), FixtureAuthProvider)
    assert isinstance(build_auth_provider(strict, fixture_source.users, hub), BackendAuthProvider)
