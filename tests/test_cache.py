import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from ensmeta.core.cache import CacheState, MetadataCache
from ensmeta.core.errors import DataAccessError
from ensmeta.core.index import MetadataIndex


class _Loader:
    def __init__(self, failures: int = 0, delay: float = 0.0):
        self.calls = 0
        self.failures = failures
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self) -> MetadataIndex:
        with self._lock:
            self.calls += 1
            calls = self.calls
        if self.delay:
            time.sleep(self.delay)
        if calls <= self.failures:
            raise DataAccessError("server unavailable")
        return MetadataIndex(taxon_ids={9606: "homo sapiens"})


def test_cache_is_lazy():
    loader = _Loader()
    cache = MetadataCache(loader)

    assert loader.calls == 0
    assert cache.state is CacheState.EMPTY
    assert cache.is_populated is False


def test_ensure_populated_loads_once():
    loader = _Loader()
    cache = MetadataCache(loader)

    first = cache.ensure_populated()
    second = cache.ensure_populated()

    assert first is second
    assert loader.calls == 1
    assert cache.state is CacheState.POPULATED
    assert cache.get() is first


def test_get_before_population_fails():
    cache = MetadataCache(_Loader())

    with pytest.raises(RuntimeError, match="not populated"):
        cache.get()


def test_failed_population_can_be_retried():
    loader = _Loader(failures=1)
    cache = MetadataCache(loader)

    with pytest.raises(DataAccessError):
        cache.ensure_populated()
    assert cache.state is CacheState.FAILED
    assert cache.is_populated is False

    index = cache.ensure_populated()

    assert index.taxon_ids == {9606: "homo sapiens"}
    assert loader.calls == 2
    assert cache.state is CacheState.POPULATED


def test_concurrent_callers_trigger_a_single_load():
    loader = _Loader(delay=0.05)
    cache = MetadataCache(loader)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.ensure_populated(), range(16)))

    assert loader.calls == 1
    assert all(r is results[0] for r in results)
