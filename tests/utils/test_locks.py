import threading
import time

import pytest

from typeless.utils.locks import ReadWriteLock


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    barrier = threading.Barrier(3, timeout=5)
    inside = []

    def reader() -> None:
        with lock.read():
            inside.append(threading.get_ident())
            # all three readers must be inside at once to pass the barrier
            barrier.wait()

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(inside) == 3
    assert not barrier.broken


def test_writer_excludes_readers() -> None:
    lock = ReadWriteLock()
    events = []
    writer_in = threading.Event()

    def writer() -> None:
        with lock.write():
            writer_in.set()
            time.sleep(0.05)
            events.append("writer done")

    def reader() -> None:
        writer_in.wait(timeout=5)
        with lock.read():
            events.append("reader")

    threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert events == ["writer done", "reader"]


def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    events = []
    lock.acquire_read()

    def writer() -> None:
        with lock.write():
            events.append("writer")

    def late_reader() -> None:
        with lock.read():
            events.append("late reader")

    w = threading.Thread(target=writer)
    w.start()
    # give the writer time to start waiting
    time.sleep(0.05)
    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)

    assert events == []
    lock.release_read()
    w.join(timeout=5)
    r.join(timeout=5)

    assert events == ["writer", "late reader"]


def test_lock_is_released_on_error() -> None:
    lock = ReadWriteLock()

    with pytest.raises(RuntimeError), lock.write():
        raise RuntimeError("boom")

    acquired = threading.Event()

    def reader() -> None:
        with lock.read():
            acquired.set()

    t = threading.Thread(target=reader)
    t.start()
    t.join(timeout=5)

    assert acquired.is_set()
