"""Tests for PostHog feature flag handling."""

import pytest

from src.cache import FileCache
from src.modules.posthog.client import PostHogError
from src.modules.posthog.flags import (
    FEATURE_FLAGS_CACHE_KEY,
    FeatureFlag,
    FeatureFlagService,
    get_active_flags,
)
from tests.utils.fakes import FakePostHogClient

RAW_FLAGS = {
    "results": [
        {"id": 1, "key": "new-dashboard", "name": "New dashboard", "active": True},
        {"id": 2, "key": "beta-chat", "name": None, "active": False},
        {"id": 3, "key": "old-flag", "name": "Old", "active": True, "deleted": True},
    ]
}


@pytest.fixture
def cache(tmp_path) -> FileCache:
    return FileCache(tmp_path / "flags.json")


@pytest.fixture
def client() -> FakePostHogClient:
    client = FakePostHogClient()
    client.on("GET", "feature_flags/", lambda _: RAW_FLAGS)
    return client


def test_flag_from_api_defaults():
    flag = FeatureFlag.from_api({"id": 7, "key": "x"})

    assert flag == FeatureFlag(id=7, key="x", name="", active=False)


def test_get_active_flags_maps_keys():
    flags = [FeatureFlag(1, "a", "A", True), FeatureFlag(2, "b", "B", False)]

    assert get_active_flags(flags) == {"a": True, "b": False}


@pytest.mark.asyncio
async def test_list_flags_skips_deleted_and_caches(client, cache):
    service = FeatureFlagService(client=client, cache=cache)

    first = await service.list_flags()
    second = await service.list_flags()

    assert [flag.key for flag in first] == ["new-dashboard", "beta-chat"]
    assert second == first
    assert len(client.requests) == 1


@pytest.mark.asyncio
async def test_is_active(client, cache):
    service = FeatureFlagService(client=client, cache=cache)

    assert await service.is_active("new-dashboard") is True
    assert await service.is_active("beta-chat") is False
    assert await service.is_active("missing") is False


@pytest.mark.asyncio
async def test_active_flags_empty_when_posthog_fails(client, cache):
    client.fail = True

    assert await FeatureFlagService(client=client, cache=cache).get_active_flags() == {}


@pytest.mark.asyncio
async def test_list_flags_raises_when_posthog_fails(client, cache):
    client.fail = True

    with pytest.raises(PostHogError):
        await FeatureFlagService(client=client, cache=cache).list_flags()


@pytest.mark.asyncio
async def test_toggle_invalidates_cache(client, cache):
    client.on(
        "PATCH",
        "feature_flags/2/",
        lambda payload: {"id": 2, "key": "beta-chat", "active": payload["active"]},
    )
    service = FeatureFlagService(client=client, cache=cache)
    await service.list_flags()
    assert cache.get(FEATURE_FLAGS_CACHE_KEY) is not None

    flag = await service.toggle_flag(2, True)

    assert flag.active is True
    assert client.requests[-1] == ("PATCH", "feature_flags/2/", {"active": True})
    assert cache.get(FEATURE_FLAGS_CACHE_KEY) is None
