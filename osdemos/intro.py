"""Introductory demonstrations: CPU, memory, I/O, threads and address layout."""

import os
import sys
import threading
from itertools import count

from osdemos.timing import spin

DEFAULT_IO_PATH = "/tmp/file"
HEAP_ALLOCATION = 100_000_000


def _iterations(limit):
    return count() if limit is None else range(limit)


def cpu_loop(text, iterations=None, out=None):
    """Print ``text`` once a second, forever or ``iterations`` times; return the count."""
    out = sys.stdout if out is None else out
    printed = 0
    for _ in _iterations(iterations):
        print(text, file=out)
        out.flush()
        spin(1)
        printed += 1
    return printed


def write_hello(path=DEFAULT_IO_PATH):
    """Write the greeting, with its terminating NUL, to ``path``; return bytes written."""
    data = b"hello world\n\0"
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        written = os.write(fd, data)
    finally:
        os.close(fd)
    if written != len(data):
        raise OSError(f"short write: {written} of {len(data)} bytes")
    return written


class _Cell:
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value


def mem_loop(iterations=None, out=None):
    """Increment a heap cell once a second, printing it; return its final value."""
    out = sys.stdout if out is None else out
    pid = os.getpid()
    cell = _Cell(0)
    print(f"({pid}) addr pointed to by p: {id(cell):#x}", file=out)
    for _ in _iterations(iterations):
        spin(1)
        cell.value += 1
        print(f"({pid}) value of p: {cell.value}", file=out)
        out.flush()
    return cell.value


def threaded_counter(loops, out=None):
    """Have two threads each increment an unguarded counter ``loops`` times.

    Returns the final count, which races may leave below ``2 * loops``.
    """
    out = sys.stdout if out is None else out
    counter = _Cell(0)

    def worker():
        for _ in range(loops):
            counter.value += 1

    print(f"Initial value : {counter.value}", file=out)
    threads = [threading.Thread(target=worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    print(f"Final value   : {counter.value}", file=out)
    return counter.value


def address_layout(out=None):
    """Print where code, heap and stack objects live; return the addresses by name."""
    out = sys.stdout if out is None else out
    heap = bytearray(HEAP_ALLOCATION)
    x = 3
    layout = {
        "code": id(address_layout.__code__),
        "heap": id(heap),
        "stack": id(x),
    }
    print(f"location of code : {layout['code']:#x}", file=out)
    print(f"location of heap : {layout['heap']:#x}", file=out)
    print(f"location of stack: {layout['stack']:#x}", file=out)
    return layout