# osdemos

Short, runnable programs that show how an operating system behaves:
creating processes, running threads, racing on shared data, and the
locks, condition variables and semaphores that put such races right.
Each demonstration is a plain Python function. Most of them write what
they do to a text stream (`out`, standard output by default) and return
a value, so they can be run at a prompt or checked in a test.

The package has no dependencies beyond the standard library. The
process demonstrations use `os.fork` and run `wc`, so they need a POSIX
system with `wc` on the `PATH`.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Commands

### `osdemos`

One command with a subcommand per demonstration:

```
osdemos throttle <num_threads> <sem_value> [--delay SECONDS]
osdemos binary [--loops N] [--threads N]
osdemos sema-join [--delay SECONDS]
osdemos zemaphore [--delay SECONDS]
osdemos rwlock <read_loops> <write_loops>
osdemos dining <num_loops> [--avoid-deadlock] [--verbose] [--timeout SECONDS]
osdemos pc <buffer_size> <loops> <consumers> [--mode cv|single-cv|semaphore]
osdemos lottery <seed> <loops>
osdemos pstack [commands ...] [--image PATH]
osdemos cas
osdemos threads <loops>
```

- `throttle` starts the children and lets at most `sem_value` of them
  into a section that sleeps for `--delay` seconds (default 1).
- `binary` has threads increment a counter under a binary semaphore
  and prints `result: N (should be M)`.
- `sema-join` and `zemaphore` have a parent wait for a child thread,
  the first with a standard semaphore, the second with `Zemaphore`.
- `rwlock` runs one reader and one writer on a counter guarded by
  `RWLock`.
- `dining` runs five philosophers. Without `--avoid-deadlock` they can
  deadlock; without `--timeout` a deadlock blocks forever. With a
  timeout, a philosopher that gives up reports it and the command exits
  with status 1.
- `pc` runs a producer and consumers over a bounded buffer. In
  `semaphore` mode each consumer prints `<id> <value>` for every value
  it takes, and at most 10 consumers are allowed.
- `lottery`, `pstack`, `cas` and `threads` run the demonstrations
  described below.

An `OSError` or `ValueError` is reported on standard error and the
command exits with status 1.

### `osdemos-lottery`

A lottery scheduler with three jobs holding 50, 100 and 25 tickets.
Each round draws a winning ticket from a generator seeded with `seed`
and prints the job list and the winner:

```
osdemos-lottery <seed> <loops>
```

### `osdemos-pstack`

A stack of 32-bit integers kept in a memory-mapped file, `ps.img`, in
the current directory. Each argument is either a number, which is
pushed, or the word `pop`, which pops and prints the top item. Pops of
an empty stack and pushes onto a full one are ignored, and the stack
keeps its contents between runs:

```
osdemos-pstack 7 13 47 pop
osdemos-pstack pop pop 99
```

The image must exist first; make it with
`osdemos.pstack.create_image("ps.img", 4096)`. The first 8 bytes hold
the item count and the rest hold the items.

### `osdemos-udp-server` and `osdemos-udp-client`

A UDP server that answers every message with `goodbye world`, and a
client that sends `hello world` to it and prints the reply. Messages
are 1000-byte, NUL-padded buffers.

```
osdemos-udp-server [port]
osdemos-udp-client [host [port]]
```

The server listens on port 10000 by default and runs until interrupted.
The client sends from port 20000 to `localhost:10000` by default.

## Using the library

```python
import io
import sys

from osdemos.lottery import LotteryScheduler
from osdemos.pstack import PersistentStack, create_image
from osdemos.sync import AtomicInt, RWLock, Zemaphore
from osdemos.buffers import Mode, run_producer_consumer
from osdemos.philosophers import dine

# Lottery scheduling
sched = LotteryScheduler()
sched.insert(50)
sched.insert(100)
sched.insert(25)
print(sched.format_list())   # List: [25] [100] [50]
print(sched.pick(30))        # 100

# A persistent stack
create_image("ps.img", 4096)
with PersistentStack("ps.img") as stack:
    stack.push(7)
    stack.push(13)
    print(stack.pop())       # 13

# Compare-and-swap
cell = AtomicInt(0)
cell.compare_and_swap(0, 100)   # True
cell.compare_and_swap(0, 200)   # False; cell.value stays 100

# Producer and consumers over a bounded buffer
received = run_producer_consumer(4, 10, 2, Mode.SEMAPHORE, sys.stdout)

# Dining philosophers, taking forks in an order that cannot deadlock
dine(100, True, False, io.StringIO(), 10.0)
```

The modules:

- `osdemos.timing` — `get_time()` and `spin(howlong)`, a busy wait.
- `osdemos.sync` — `Zemaphore` (a semaphore built from a lock and a
  condition variable), `Synchronizer` (a self-resetting one-shot
  signal), `RWLock`, `AtomicInt` and `cas_demo`.
- `osdemos.lottery` — `LotteryScheduler`, `run_lottery` and the
  `osdemos-lottery` command.
- `osdemos.pstack` — `PersistentStack`, `create_image`,
  `run_commands` and the `osdemos-pstack` command.
- `osdemos.udp` — `UdpSocket` and `resolve_address`.
- `osdemos.netdemo` — `run_client`, `serve` (which can stop after
  `max_messages`) and the client and server commands.
- `osdemos.processes` — `fork_hello`, `fork_wait`, `fork_exec_wc` and
  `fork_redirect_wc`: fork, wait, exec and output redirection.
- `osdemos.intro` — `cpu_loop`, `write_hello`, `mem_loop`,
  `threaded_counter` and `address_layout`.
- `osdemos.threading_demos` — passing arguments to threads and getting
  results back, `shared_counter`, the atomicity, ordering and deadlock
  bugs (`atomicity_demo`, `ordering_demo`, `deadlock_demo`, each with a
  fixed form or a timeout), and `join_demo` with the ways of joining a
  thread listed in `JoinVariant`.
- `osdemos.buffers` — `RingBuffer`, `CondVarBuffer`,
  `SemaphoreBuffer`, `Mode` and `run_producer_consumer`.
- `osdemos.philosophers` — `left`, `right`, `fork_order` and `dine`.
- `osdemos.sema_demos` — `binary_counter`, `semaphore_join`,
  `zemaphore_join`, `throttle` and `rwlock_demo`.

## What it does not do

Not every demonstration has a command. The process demonstrations
(`osdemos.processes`), the timing helpers, the functions in
`osdemos.intro` other than `threaded_counter`, and everything in
`osdemos.threading_demos` are available only by calling them from
Python. The "addresses" printed by `address_layout`, `mem_loop` and
`shared_counter` are Python object identities, not machine addresses.