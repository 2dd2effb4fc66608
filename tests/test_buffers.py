import io
import threading

import pytest

from osdemos.buffers import (
    CMAX,
    CondVarBuffer,
    Mode,
    RingBuffer,
    SemaphoreBuffer,
    run_producer_consumer,
)


def test_ring_buffer_is_fifo_across_wraparound():
    ring = RingBuffer(3)
    ring.fill(1)
    ring.fill(2)
    assert ring.get() == 1
    ring.fill(3)
    ring.fill(4)
    assert len(ring) == 3
    assert [ring.get() for _ in range(3)] == [2, 3, 4]
    assert len(ring) == 0


def test_ring_buffer_rejects_overfill_and_underflow():
    ring = RingBuffer(1)
    with pytest.raises(IndexError):
        ring.get()
    ring.fill(7)
    with pytest.raises(IndexError):
        ring.fill(8)
    assert ring.get() == 7


def test_ring_buffer_needs_a_slot():
    with pytest.raises(ValueError):
        RingBuffer(0)


@pytest.mark.parametrize("single_cv", [False, True])
def test_cond_var_buffer_keeps_order(single_cv):
    buffer = CondVarBuffer(4, single_cv)
    for value in (5, 6, 7):
        buffer.put(value)
    assert [buffer.take() for _ in range(3)] == [5, 6, 7]


def test_semaphore_buffer_keeps_order():
    buffer = SemaphoreBuffer(2)
    buffer.put(9)
    buffer.put(8)
    assert [buffer.take(), buffer.take()] == [9, 8]


def test_take_blocks_until_put():
    buffer = CondVarBuffer(1)
    producer = threading.Timer(0.05, buffer.put, args=(42,))
    producer.start()
    value = buffer.take()
    producer.join(timeout=5)
    assert value == 42


@pytest.mark.parametrize(
    "mode, consumers",
    [(Mode.COND_VAR, 3), (Mode.SINGLE_CV, 1), (Mode.SEMAPHORE, 3)],
)
def test_every_value_consumed_exactly_once(mode, consumers):
    received = run_producer_consumer(2, 200, consumers, mode, io.StringIO())
    assert len(received) == consumers
    assert sorted(v for values in received for v in values) == list(range(200))
    for values in received:
        assert values == sorted(values)


def test_semaphore_consumers_print_each_value_and_marker():
    out = io.StringIO()
    received = run_producer_consumer(3, 10, 2, "semaphore", out)
    lines = out.getvalue().splitlines()
    assert len(lines) == 12
    assert sorted(line.split()[0] for line in lines if line.endswith(" -1")) == ["0", "1"]
    for cid, values in enumerate(received):
        printed = [int(line.split()[1]) for line in lines
                   if line.split()[0] == str(cid) and not line.endswith(" -1")]
        assert printed == values


def test_cond_var_mode_prints_nothing():
    out = io.StringIO()
    run_producer_consumer(1, 5, 1, Mode.COND_VAR, out)
    assert out.getvalue() == ""


def test_semaphore_mode_limits_consumers():
    with pytest.raises(ValueError):
        run_producer_consumer(1, 1, CMAX + 1, Mode.SEMAPHORE, io.StringIO())


def test_needs_a_consumer():
    with pytest.raises(ValueError):
        run_producer_consumer(1, 1, 0, Mode.COND_VAR, io.StringIO())


def test_rejects_unknown_mode():
    with pytest.raises(ValueError):
        run_producer_consumer(1, 1, 1, "spinlock", io.StringIO())