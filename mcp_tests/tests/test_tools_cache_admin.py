import pytest

from core.cache import ResponseCache
from core.errors import ValidationError
from tools import cache_admin as cache_admin_tool


@pytest.fixture
def cache(clock):
    c = ResponseCache(max_entries=10, clock=clock)
    c.set("https://api/v1/subjects:{}", {"subjects": []})
    c.set("https://api/v1/courses:{}", {"courses": []}, 0)
    return c


@pytest.mark.asyncio
async def test_stats(dummy_mcp, cache):
    cache_admin_tool.register(dummy_mcp, cache=cache)

    stats = await dummy_mcp.tools["get_cache_stats"]()

    assert stats["size"] == 2
    assert stats["max_size"] == 10
    assert stats["utilization_rate"] == 20.0
    assert set(stats) == {
        "size", "max_size", "total_size_bytes", "hits", "misses",
        "evictions", "hit_rate", "utilization_rate",
    }


@pytest.mark.asyncio
async def test_prune_invalidate_and_clear(dummy_mcp, cache):
    cache_admin_tool.register(dummy_mcp, cache=cache)

    assert await dummy_mcp.tools["prune_cache"]() == {"entriesRemoved": 1}
    assert await dummy_mcp.tools["invalidate_cache"](pattern="/v1/subjects") == {"entriesRemoved": 1}

    cache.set("k", 1)
    assert await dummy_mcp.tools["clear_cache"]() == {"entriesRemoved": 1}
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_invalidate_requires_pattern(dummy_mcp, cache):
    cache_admin_tool.register(dummy_mcp, cache=cache)

    with pytest.raises(ValidationError):
        await dummy_mcp.tools["invalidate_cache"](pattern=" ")
