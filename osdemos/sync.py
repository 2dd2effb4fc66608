"""Synchronisation primitives built from locks and condition variables."""

import sys
import threading


class Zemaphore:
    """A counting semaphore built from a mutex and a condition variable."""

    def __init__(self, value=0):
        self._value = value
        self._cond = threading.Condition(threading.Lock())

    def wait(self):
        """Block until the count is positive, then decrement it."""
        with self._cond:
            while self._value <= 0:
                self._cond.wait()
            self._value -= 1

    def post(self):
        """Increment the count and wake one waiter."""
        with self._cond:
            self._value += 1
            self._cond.notify()

    @property
    def value(self):
        with self._cond:
            return self._value


class Synchronizer:
    """A one-shot signal that resets itself after each wait."""

    def __init__(self):
        self._done = False
        self._cond = threading.Condition(threading.Lock())

    def signal(self):
        with self._cond:
            self._done = True
            self._cond.notify()

    def wait(self):
        with self._cond:
            while not self._done:
                self._cond.wait()
            self._done = False


class RWLock:
    """A reader-writer lock: many readers or a single writer."""

    def __init__(self):
        self._readers = 0
        self._writer = False
        self._lock = Zemaphore(1)
        self._writelock = Zemaphore(1)

    def acquire_readlock(self):
        self._lock.wait()
        try:
            self._readers += 1
            if self._readers == 1:
                self._writelock.wait()
        finally:
            self._lock.post()

    def release_readlock(self):
        self._lock.wait()
        try:
            if self._readers <= 0:
                raise RuntimeError("read lock released without being held")
            self._readers -= 1
            if self._readers == 0:
                self._writelock.post()
        finally:
            self._lock.post()

    def acquire_writelock(self):
        self._writelock.wait()
        self._writer = True

    def release_writelock(self):
        if not self._writer:
            raise RuntimeError("write lock released without being held")
        self._writer = False
        self._writelock.post()

    @property
    def read_locked(self):
        self._lock.wait()
        try:
            return self._readers > 0
        finally:
            self._lock.post()

    @property
    def write_locked(self):
        return self._writer


class AtomicInt:
    """An integer cell supporting an atomic compare-and-swap."""

    def __init__(self, value=0):
        self._value = value
        self._lock = threading.Lock()

    def compare_and_swap(self, old, new):
        """Store ``new`` if the cell holds ``old``; return whether it did."""
        with self._lock:
            if self._value == old:
                self._value = new
                return True
            return False

    @property
    def value(self):
        with self._lock:
            return self._value


def cas_demo(out=None):
    """Show one successful and one failing compare-and-swap; return the final value."""
    out = sys.stdout if out is None else out
    cell = AtomicInt(0)
    print(f"before successful cas: {cell.value}", file=out)
    success = cell.compare_and_swap(0, 100)
    print(f"after successful cas: {cell.value} (success: {int(success)})", file=out)
    print(f"before failing cas: {cell.value}", file=out)
    success = cell.compare_and_swap(0, 200)
    print(f"after failing cas: {cell.value} (old: {int(success)})", file=out)
    return cell.value