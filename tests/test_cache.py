import pytest

from app.core.cache import CacheKeys, CacheLayer


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def layer(clock: FakeClock) -> CacheLayer:
    return CacheLayer(default_ttl=300, check_period=120, timer=clock)


def test_get_returns_value_before_expiry(layer: CacheLayer, clock: FakeClock) -> None:
    layer.set("classes", ["a", "b"])
    clock.advance(299)
    assert layer.get("classes") == ["a", "b"]


def test_expired_value_is_never_returned_even_before_sweep(layer: CacheLayer, clock: FakeClock) -> None:
    layer.set("teacher_1", {"name": "x"}, ttl=10)
    clock.advance(11)
    assert layer.get("teacher_1") is None
    assert "teacher_1" not in layer.keys()


def test_zero_ttl_never_expires(layer: CacheLayer, clock: FakeClock) -> None:
    layer.set("pinned", 1, ttl=0)
    clock.advance(10**9)
    assert layer.get("pinned") == 1


def test_get_returns_default_on_miss(layer: CacheLayer) -> None:
    sentinel = object()
    assert layer.get("missing", sentinel) is sentinel


def test_delete_reports_removed_count(layer: CacheLayer) -> None:
    layer.set("k", 1)
    assert layer.delete("k") == 1
    assert layer.delete("k") == 0


def test_delete_by_prefix_leaves_other_keys(layer: CacheLayer) -> None:
    layer.set("classes", 1)
    layer.set("classes_active", 2)
    layer.set("teacher_1", 3)

    removed = layer.delete_by_prefix("classes")

    assert removed == 2
    assert layer.keys() == ["teacher_1"]


def test_list_keys_share_a_namespace_prefix(layer: CacheLayer) -> None:
    layer.set(CacheKeys.list_key(CacheKeys.TOPICS), [])
    layer.set(CacheKeys.list_key(CacheKeys.TOPICS, "f1"), [])
    layer.set(CacheKeys.item_key(CacheKeys.TOPICS, "t1"), {})
    layer.set(CacheKeys.list_key(CacheKeys.POSTS), [])

    assert layer.delete_by_prefix(CacheKeys.list_prefix(CacheKeys.TOPICS)) == 2
    assert sorted(layer.keys()) == ["posts:list:all", "topics:item:t1"]


def test_flush_all_empties_cache_and_resets_stats(layer: CacheLayer) -> None:
    layer.set("a", 1)
    layer.get("a")
    layer.get("b")
    assert layer.stats() == {"hits": 1, "misses": 1, "keys": 1}

    layer.flush_all()

    assert layer.keys() == []
    assert layer.stats() == {"hits": 0, "misses": 0, "keys": 0}


def test_sweep_evicts_expired_entries(layer: CacheLayer, clock: FakeClock) -> None:
    layer.set("short", 1, ttl=5)
    layer.set("long", 2, ttl=500)
    clock.advance(10)

    assert layer.sweep() == 1
    assert layer.keys() == ["long"]


@pytest.mark.asyncio
async def test_with_cache_calls_producer_once_per_miss(layer: CacheLayer, clock: FakeClock) -> None:
    calls = []

    async def producer():
        calls.append(1)
        return len(calls)

    assert await layer.with_cache("k", producer, ttl=60) == 1
    assert await layer.with_cache("k", producer, ttl=60) == 1
    assert len(calls) == 1

    clock.advance(61)
    assert await layer.with_cache("k", producer, ttl=60) == 2
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_with_cache_caches_falsy_results(layer: CacheLayer) -> None:
    calls = []

    async def producer():
        calls.append(1)
        return []

    await layer.with_cache("empty", producer)
    await layer.with_cache("empty", producer)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_with_cache_does_not_store_when_producer_fails(layer: CacheLayer) -> None:
    async def producer():
        raise RuntimeError("store down")

    with pytest.raises(RuntimeError):
        await layer.with_cache("k", producer)
    assert layer.keys() == []


class BrokenStore:
    def get(self, key, default=None):
        raise ConnectionError("backend gone")

    def __setitem__(self, key, value):
        raise ConnectionError("backend gone")

    def pop(self, key, default=None):
        raise ConnectionError("backend gone")

    def keys(self):
        raise ConnectionError("backend gone")

    def clear(self):
        raise ConnectionError("backend gone")


@pytest.mark.asyncio
async def test_backend_failure_degrades_to_store_reads(layer: CacheLayer) -> None:
    layer._store = BrokenStore()

    async def producer():
        return "fresh"

    assert layer.get("k") is None
    assert layer.set("k", 1) is False
    assert layer.delete("k") == 0
    assert layer.delete_by_prefix("k") == 0
    assert layer.keys() == []
    layer.flush_all()
    assert await layer.with_cache("k", producer) == "fresh"
