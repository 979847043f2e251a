"""Tests for ReadWriteLock: shared readers, exclusive writers."""
import threading
import time

from reqstats.monitoring.rwlock import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=2)

    def reader():
        with lock.read_locked():
            # Both readers must be inside at once for the barrier to release
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=3)
    assert not inside.broken


def test_writer_waits_for_reader():
    lock = ReadWriteLock()
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_locked():
            events.append("write")

    t = threading.Thread(target=writer)
    t.start()
    time.sleep(0.05)
    events.append("read_done")
    lock.release_read()
    t.join(timeout=2)
    assert events == ["read_done", "write"]


def test_reader_waits_for_writer():
    lock = ReadWriteLock()
    events = []
    lock.acquire_write()

    def reader():
        with lock.read_locked():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.05)
    events.append("write_done")
    lock.release_write()
    t.join(timeout=2)
    assert events == ["write_done", "read"]


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    events = []
    lock.acquire_read()

    def writer():
        with lock.write_locked():
            events.append("write")

    def late_reader():
        with lock.read_locked():
            events.append("late_read")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.05)
    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)
    assert events == []
    lock.release_read()
    w.join(timeout=2)
    r.join(timeout=2)
    assert events == ["write", "late_read"]


def test_write_lock_released_on_error():
    lock = ReadWriteLock()
    try:
        with lock.write_locked():
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    with lock.read_locked():
        pass
