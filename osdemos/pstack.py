"""A stack of integers kept in a memory-mapped file, persisting across runs."""

import mmap
import os
import re
import struct
import sys
from pathlib import Path

_HEADER = struct.Struct("<Q")
_ITEM = struct.Struct("<i")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_NUMBER = re.compile(r"\s*([+-]?\d+)")

DEFAULT_IMAGE = "ps.img"


def _atoi(text):
    match = _NUMBER.match(text)
    if not match:
        return 0
    value = int(match.group(1))
    return (value - _INT_MIN) % 2**32 + _INT_MIN


class PersistentStack:
    """A stack whose item count and items live in a mapped backing file."""

    def __init__(self, path):
        self._file = open(path, "r+b")
        try:
            size = os.fstat(self._file.fileno()).st_size
            if size < _HEADER.size or size % _ITEM.size:
                raise ValueError(f"unusable stack image size: {size}")
            self._map = mmap.mmap(self._file.fileno(), size)
        except BaseException:
            self._file.close()
            raise
        self._size = size
        if len(self) > self.capacity:
            self.close()
            raise ValueError("stack image holds a corrupt item count")

    def _set_len(self, n):
        _HEADER.pack_into(self._map, 0, n)

    def push(self, value):
        if not _INT_MIN <= value <= _INT_MAX:
            raise OverflowError(f"{value} does not fit in a 32-bit integer")
        n = len(self)
        if n >= self.capacity:
            raise IndexError("push onto full stack")
        _ITEM.pack_into(self._map, _HEADER.size + n * _ITEM.size, value)
        self._set_len(n + 1)

    def pop(self):
        n = len(self)
        if n == 0:
            raise IndexError("pop from empty stack")
        n -= 1
        self._set_len(n)
        return _ITEM.unpack_from(self._map, _HEADER.size + n * _ITEM.size)[0]

    def __len__(self):
        return _HEADER.unpack_from(self._map, 0)[0]

    @property
    def capacity(self):
        return (self._size - _HEADER.size) // _ITEM.size

    def close(self):
        if not self._map.closed:
            self._map.flush()
            self._map.close()
        self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def create_image(path, size=4096):
    """Create (or reset) an empty zero-filled backing file of ``size`` bytes."""
    path = Path(path)
    with open(path, "wb") as f:
        f.truncate(size)
    return path


def run_commands(path, commands, out=None):
    """Apply 'pop' or push commands, printing popped values; return them."""
    out = sys.stdout if out is None else out
    popped = []
    with PersistentStack(path) as stack:
        for command in commands:
            if command == "pop":
                if len(stack):
                    value = stack.pop()
                    print(value, file=out)
                    popped.append(value)
            elif len(stack) < stack.capacity:
                stack.push(_atoi(command))
    return popped


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        run_commands(DEFAULT_IMAGE, args)
    except (OSError, ValueError) as exc:
        print(f"pstack: {exc}", file=sys.stderr)
        return 1
    return 0