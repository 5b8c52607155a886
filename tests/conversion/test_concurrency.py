"""Multi-threaded access to a shared registry.

These tests can't prove the absence of races, but they exercise the lock
ordering between registration, resolution and the unsolvable cache and
would hang or fail on the obvious mistakes.
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest

from typeless.conversion.exceptions import NotSupportedError
from typeless.conversion.registry import ConverterRegistry

pytestmark = pytest.mark.concurrency

N_THREADS = 8


def _make_converter(n: int):
    # distinct shapes, so every registration in the batch is accepted
    tp = type(f"Marker{n}", (), {})

    def to_marker(s: str) -> tp:  # ty:ignore[invalid-type-form]
        return tp()

    return to_marker


def test_concurrent_resolution_synthesizes_one_descriptor(registry: ConverterRegistry) -> None:
    barrier = Barrier(N_THREADS)

    def worker(i: int) -> int:
        barrier.wait()
        return registry.convert(int, str(i), "0")

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        results = list(pool.map(worker, range(N_THREADS)))

    assert results == [i * 10 for i in range(N_THREADS)]
    assert registry.keys().count("func(str, str) int") == 1


def test_concurrent_registration_and_resolution(registry: ConverterRegistry) -> None:
    barrier = Barrier(N_THREADS * 2)

    def register(i: int) -> list[str]:
        barrier.wait()
        return registry.register(_make_converter(i))

    def resolve(i: int) -> object:
        barrier.wait()
        return registry.convert(int, str(i), "1")

    with ThreadPoolExecutor(max_workers=N_THREADS * 2) as pool:
        registered = [pool.submit(register, i) for i in range(N_THREADS)]
        resolved = [pool.submit(resolve, i) for i in range(N_THREADS)]
        keys = [key for it in registered for key in it.result()]
        results = [it.result() for it in resolved]

    assert results == [int(f"{i}1") for i in range(N_THREADS)]
    assert all(key in registry for key in keys)
    assert registry.keys() == sorted(registry.keys())


def test_concurrent_unsolvable_requests(registry: ConverterRegistry) -> None:
    barrier = Barrier(N_THREADS)

    def worker(_: int) -> bool:
        barrier.wait()
        with pytest.raises(NotSupportedError):
            registry.convert(bytes, "abc")
        return registry.is_unsolvable("func(str) bytes")

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        assert all(pool.map(worker, range(N_THREADS)))

    assert list(registry.unsolvable) == ["func(str) bytes"]


def test_fork_during_registration(registry: ConverterRegistry) -> None:
    barrier = Barrier(N_THREADS)

    def worker(i: int) -> int:
        barrier.wait()
        if i % 2:
            registry.register(_make_converter(100 + i))
            return -1
        return len(registry.fork())

    with ThreadPoolExecutor(max_workers=N_THREADS) as pool:
        sizes = [it for it in pool.map(worker, range(N_THREADS)) if it >= 0]

    assert all(size >= 27 for size in sizes)
    assert len(registry) == 27 + N_THREADS // 2
