"""Bounded buffers shared by producer and consumer threads."""

import enum
import sys
import threading

from osdemos.sync import Zemaphore

CMAX = 10
END_OF_PRODUCTION = -1


class Mode(enum.Enum):
    """How the bounded buffer is synchronised."""

    COND_VAR = "cv"
    SINGLE_CV = "single-cv"
    SEMAPHORE = "semaphore"


class RingBuffer:
    """A fixed-size FIFO of slots reused in a circle; not thread-safe."""

    def __init__(self, size):
        if size < 1:
            raise ValueError(f"buffer size must be at least 1, got {size}")
        self.size = size
        self._slots = [0] * size
        self._use_ptr = 0
        self._fill_ptr = 0
        self._count = 0

    def fill(self, value):
        if self._count == self.size:
            raise IndexError("fill of full buffer")
        self._slots[self._fill_ptr] = value
        self._fill_ptr = (self._fill_ptr + 1) % self.size
        self._count += 1

    def get(self):
        if self._count == 0:
            raise IndexError("get from empty buffer")
        value = self._slots[self._use_ptr]
        self._use_ptr = (self._use_ptr + 1) % self.size
        self._count -= 1
        return value

    def __len__(self):
        return self._count


class CondVarBuffer:
    """A bounded buffer guarded by a mutex and one or two condition variables.

    With a single condition variable and several consumers, a consumer may
    wake another consumer instead of the producer and all can sleep forever.
    """

    def __init__(self, size, single_cv=False):
        self._ring = RingBuffer(size)
        self._mutex = threading.Lock()
        self._empty = threading.Condition(self._mutex)
        self._fill = self._empty if single_cv else threading.Condition(self._mutex)

    def put(self, value):
        with self._mutex:
            while len(self._ring) == self._ring.size:
                self._empty.wait()
            self._ring.fill(value)
            self._fill.notify()

    def take(self):
        with self._mutex:
            while len(self._ring) == 0:
                self._fill.wait()
            value = self._ring.get()
            self._empty.notify()
            return value


class SemaphoreBuffer:
    """A bounded buffer guarded by empty, full and mutex semaphores."""

    def __init__(self, size):
        self._ring = RingBuffer(size)
        self._empty = Zemaphore(size)
        self._full = Zemaphore(0)
        self._mutex = Zemaphore(1)

    def put(self, value):
        self._empty.wait()
        self._mutex.wait()
        try:
            self._ring.fill(value)
        finally:
            self._mutex.post()
        self._full.post()

    def take(self):
        self._full.wait()
        self._mutex.wait()
        try:
            value = self._ring.get()
        finally:
            self._mutex.post()
        self._empty.post()
        return value


def run_producer_consumer(buffer_size, loops, consumers=1, mode=Mode.COND_VAR, out=None):
    """Produce 0..loops-1, then one end marker per consumer, through a bounded buffer.

    Returns, for each consumer, the values it received before its end marker.
    With semaphores each consumer prints "<id> <value>" for every value taken.
    """
    mode = Mode(mode)
    out = sys.stdout if out is None else out
    if consumers < 1:
        raise ValueError(f"need at least one consumer, got {consumers}")
    if mode is Mode.SEMAPHORE and consumers > CMAX:
        raise ValueError(f"at most {CMAX} consumers, got {consumers}")
    if loops < 0:
        raise ValueError(f"loops must not be negative, got {loops}")

    if mode is Mode.SEMAPHORE:
        buffer = SemaphoreBuffer(buffer_size)
    else:
        buffer = CondVarBuffer(buffer_size, single_cv=mode is Mode.SINGLE_CV)
    verbose = mode is Mode.SEMAPHORE
    received = [[] for _ in range(consumers)]

    def producer():
        for i in range(loops):
            buffer.put(i)
        for _ in range(consumers):
            buffer.put(END_OF_PRODUCTION)

    def consumer(cid):
        values = received[cid]
        while True:
            value = buffer.take()
            if verbose:
                out.write(f"{cid} {value}\n")
            if value == END_OF_PRODUCTION:
                return
            values.append(value)

    threads = [threading.Thread(target=producer, daemon=True)]
    threads += [
        threading.Thread(target=consumer, args=(cid,), daemon=True)
        for cid in range(consumers)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return received