"""
Run: python3 -m pytest client/__tests__/test_cache_and_debounce.py -v
"""
import asyncio

from client.cache import QueryCache, make_key
from client.debounce import Debouncer


class TestMakeKey:

    def test_param_order_irrelevant(self):
        assert make_key("/api/jobs", {"page": 1, "search": "a"}) == make_key("/api/jobs", {"search": "a", "page": 1})

    def test_none_params_dropped(self):
        assert make_key("/api/jobs", {"page": 1, "search": None}) == make_key("/api/jobs", {"page": 1})


class TestQueryCache:

    def test_fetches_once(self):
        cache = QueryCache()
        calls = []

        async def fetch():
            calls.append(1)
            return {"total": 3}

        async def scenario():
            first = await cache.get_or_fetch(make_key("/api/stats"), fetch)
            second = await cache.get_or_fetch(make_key("/api/stats"), fetch)
            return first, second

        assert asyncio.run(scenario()) == ({"total": 3}, {"total": 3})
        assert len(calls) == 1

    def test_invalidate_by_prefix(self):
        cache = QueryCache()

        async def value():
            return 1

        async def fill():
            await cache.get_or_fetch(make_key("/api/jobs", {"page": 1}), value)
            await cache.get_or_fetch(make_key("/api/jobs/3"), value)
            await cache.get_or_fetch(make_key("/api/stats"), value)

        asyncio.run(fill())
        cache.invalidate("/api/jobs")

        assert len(cache) == 1
        assert make_key("/api/stats") in cache

        cache.invalidate_all()
        assert len(cache) == 0


class TestDebouncer:

    def test_runs_last_call_only(self):
        calls = []

        async def record(term):
            calls.append(term)
            return term

        async def scenario():
            debouncer = Debouncer(record, delay=0.02)
            debouncer.trigger("a")
            debouncer.trigger("ab")
            result = await debouncer.trigger("abc")
            return result, debouncer.pending

        assert asyncio.run(scenario()) == ("abc", False)
        assert calls == ["abc"]

    def test_separate_bursts_each_run(self):
        calls = []

        async def record(term):
            calls.append(term)

        async def scenario():
            debouncer = Debouncer(record, delay=0.01)
            await debouncer.trigger("first")
            await debouncer.trigger("second")

        asyncio.run(scenario())

        assert calls == ["first", "second"]

    def test_cancel(self):
        calls = []

        async def record(term):
            calls.append(term)

        async def scenario():
            debouncer = Debouncer(record, delay=0.02)
            debouncer.trigger("a")
            assert debouncer.pending
            debouncer.cancel()
            await asyncio.sleep(0.05)
            return debouncer.pending

        assert asyncio.run(scenario()) is False
        assert calls == []
