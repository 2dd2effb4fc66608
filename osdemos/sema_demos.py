"""Semaphore demonstrations: mutual exclusion, joining, throttling, reader-writer locks."""

import sys
import threading
import time

from osdemos.sync import RWLock, Zemaphore


def binary_counter(loops=10_000_000, threads=2):
    """Have ``threads`` threads bump a counter ``loops`` times under a binary semaphore.

    Returns the final count, always ``loops * threads``.
    """
    mutex = Zemaphore(1)
    counter = 0

    def child():
        nonlocal counter
        for _ in range(loops):
            mutex.wait()
            counter += 1
            mutex.post()

    workers = [threading.Thread(target=child) for _ in range(threads)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    return counter


def _join_with(semaphore, wait, post, delay, out):
    def child():
        time.sleep(delay)
        out.write("child\n")
        post()

    out.write("parent: begin\n")
    worker = threading.Thread(target=child)
    worker.start()
    wait()
    out.write("parent: end\n")
    worker.join()


def semaphore_join(delay=2.0, out=None):
    """Parent waits on a semaphore the child posts once it is done."""
    out = sys.stdout if out is None else out
    sem = threading.Semaphore(0)
    _join_with(sem, sem.acquire, sem.release, delay, out)


def zemaphore_join(delay=4.0, out=None):
    """As semaphore_join, using a semaphore built from a lock and condition variable."""
    out = sys.stdout if out is None else out
    zem = Zemaphore(0)
    _join_with(zem, zem.wait, zem.post, delay, out)


def throttle(num_threads, sem_value, delay=1.0, out=None):
    """Run ``num_threads`` children, at most ``sem_value`` at a time.

    Returns the largest number of children seen running together.
    """
    out = sys.stdout if out is None else out
    if num_threads < 0:
        raise ValueError(f"number of threads must not be negative, got {num_threads}")
    sem = threading.Semaphore(sem_value)
    lock = threading.Lock()
    active = 0
    peak = 0

    def child(i):
        nonlocal active, peak
        with sem:
            with lock:
                active += 1
                peak = max(peak, active)
                out.write(f"child {i}\n")
            time.sleep(delay)
            with lock:
                active -= 1

    out.write("parent: begin\n")
    children = [threading.Thread(target=child, args=(i,)) for i in range(num_threads)]
    for c in children:
        c.start()
    for c in children:
        c.join()
    out.write("parent: end\n")
    return peak


def rwlock_demo(read_loops, write_loops, out=None):
    """One reader and one writer share a counter under a reader-writer lock.

    Returns the final counter, equal to ``write_loops``.
    """
    out = sys.stdout if out is None else out
    lock = RWLock()
    counter = 0

    def reader():
        local = 0
        for _ in range(read_loops):
            lock.acquire_readlock()
            local = counter
            lock.release_readlock()
            out.write(f"read {local}\n")
        out.write(f"read done: {local}\n")

    def writer():
        nonlocal counter
        for _ in range(write_loops):
            lock.acquire_writelock()
            counter += 1
            lock.release_writelock()
        out.write("write done\n")

    workers = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    out.write("all done\n")
    return counter