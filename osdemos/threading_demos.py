"""Thread creation, shared-state races and the classic concurrency bugs."""

import enum
import sys
import threading
import time
from dataclasses import dataclass

from osdemos.sync import Synchronizer

PR_STATE_INIT = 0


class JoinVariant(enum.Enum):
    """Ways for a parent thread to wait for a child."""

    JOIN = "join"
    MODULAR = "modular"
    NO_LOCK = "no-lock"
    NO_STATE_VAR = "no-state-var"
    SPIN = "spin"


_DEFAULT_JOIN_DELAY = {
    JoinVariant.JOIN: 1.0,
    JoinVariant.MODULAR: 1.0,
    JoinVariant.NO_LOCK: 1.0,
    JoinVariant.NO_STATE_VAR: 1.0,
    JoinVariant.SPIN: 5.0,
}


def _say(out, text):
    out.write(text + "\n")


class _Task(threading.Thread):
    """A thread that keeps its target's result or the exception it raised."""

    def __init__(self, target, *args):
        super().__init__(target=target, args=args, daemon=True)
        self.result = None
        self.error = None

    def run(self):
        try:
            self.result = self._target(*self._args)
        except BaseException as exc:
            self.error = exc

    def outcome(self):
        """Join, then return the result or raise what the target raised."""
        self.join()
        if self.error is not None:
            raise self.error
        return self.result


def _start(target, *args):
    task = _Task(target, *args)
    task.start()
    return task


def thread_with_args(a, b, out=None):
    """Hand two values to a thread that prints them."""
    out = sys.stdout if out is None else out

    def mythread(args):
        first, second = args
        _say(out, f"{first} {second}")

    _start(mythread, (a, b)).outcome()
    _say(out, "done")


def thread_with_simple_arg(value, out=None):
    """Pass one value to a thread, which returns it plus one; return that."""
    out = sys.stdout if out is None else out

    def mythread(arg):
        _say(out, str(arg))
        return arg + 1

    rvalue = _start(mythread, value).outcome()
    _say(out, f"returned {rvalue}")
    return rvalue


def thread_with_return(a, b, out=None):
    """Run a thread that prints its arguments and returns a pair; return the pair."""
    out = sys.stdout if out is None else out

    def mythread(first, second):
        _say(out, f"args {first} {second}")
        return 1, 2

    x, y = _start(mythread, a, b).outcome()
    _say(out, f"returned {x} {y}")
    return x, y


def hello_threads(out=None):
    """Start two threads that print a letter each; return the letters in print order."""
    out = sys.stdout if out is None else out
    printed = []
    order_lock = threading.Lock()

    def mythread(letter):
        with order_lock:
            _say(out, letter)
            printed.append(letter)

    _say(out, "main: begin")
    tasks = [_start(mythread, letter) for letter in ("A", "B")]
    for task in tasks:
        task.outcome()
    _say(out, "main: end")
    return printed


@dataclass
class _Counter:
    value: int = 0


def shared_counter(loops, out=None):
    """Two threads bump one unguarded counter ``loops`` times each; return the total."""
    out = sys.stdout if out is None else out
    counter = _Counter()

    def mythread(letter):
        i = object()
        _say(out, f"{letter}: begin [addr of i: {id(i):#x}]")
        for _ in range(loops):
            counter.value = counter.value + 1
        _say(out, f"{letter}: done")

    _say(out, f"main: begin [counter = {counter.value}] [{id(counter):x}]")
    tasks = [_start(mythread, letter) for letter in ("A", "B")]
    for task in tasks:
        task.outcome()
    _say(out, f"main: done\n [counter: {counter.value}]\n [should: {loops * 2}]")
    return counter.value


@dataclass
class _Proc:
    pid: int


@dataclass
class _ThreadInfo:
    proc_info: _Proc | None


def atomicity_demo(fixed=False, out=None, check_delay=2.0, clear_delay=1.0):
    """Race a check-then-use against a clear of the same field.

    Returns the pid the first thread used, or None if it found the field
    already cleared. Without the lock, a clear between check and use makes
    the use fail, and that error is raised here.
    """
    out = sys.stdout if out is None else out
    thd = _ThreadInfo(_Proc(pid=100))
    proc_info_lock = threading.Lock()
    t2_indent = " " * 17

    def check_and_use():
        if thd.proc_info:
            _say(out, "t1: after check")
            time.sleep(check_delay)
            _say(out, "t1: use!")
            pid = thd.proc_info.pid
            _say(out, str(pid))
            return pid
        return None

    def thread1():
        _say(out, "t1: before check")
        if fixed:
            with proc_info_lock:
                return check_and_use()
        return check_and_use()

    def clear():
        _say(out, f"{t2_indent}t2: set to NULL")
        thd.proc_info = None

    def thread2():
        _say(out, f"{t2_indent}t2: begin")
        time.sleep(clear_delay)
        if fixed:
            with proc_info_lock:
                clear()
        else:
            clear()

    _say(out, "main: begin")
    p1 = _start(thread1)
    p2 = _start(thread2)
    p1.join()
    p2.join()
    pid = p1.outcome()
    p2.outcome()
    _say(out, "main: end")
    return pid


def deadlock_demo(out=None, timeout=1.0):
    """Two threads take two locks in opposite orders.

    A thread that cannot get its second lock within ``timeout`` seconds
    reports the deadlock and backs off. Returns whether that happened.
    """
    out = sys.stdout if out is None else out
    l1 = threading.Lock()
    l2 = threading.Lock()
    stuck = []

    def worker(name, indent, first, first_name, second, second_name):
        prefix = f"{indent}{name}"
        _say(out, f"{prefix}: begin")
        _say(out, f"{prefix}: try to acquire {first_name}...")
        with first:
            _say(out, f"{prefix}: {first_name} acquired")
            _say(out, f"{prefix}: try to acquire {second_name}...")
            if not second.acquire(timeout=timeout):
                _say(out, f"{prefix}: gave up on {second_name} (deadlock)")
                stuck.append(name)
                return
            _say(out, f"{prefix}: {second_name} acquired")
            second.release()

    _say(out, "main: begin")
    tasks = [
        _start(worker, "t1", "", l1, "L1", l2, "L2"),
        _start(worker, "t2", " " * 27, l2, "L2", l1, "L1"),
    ]
    for task in tasks:
        task.outcome()
    _say(out, "main: end")
    return bool(stuck)


@dataclass
class _PRThread:
    task: _Task | None = None
    state: int = PR_STATE_INIT


def ordering_demo(fixed=False, out=None, create_delay=1.0):
    """Start a thread that reads the handle its creator has not yet stored.

    Returns the state the thread read. Without the fix the handle is still
    unset when read, and that error is raised here.
    """
    out = sys.stdout if out is None else out
    shared = {"m_thread": None, "init": False}
    mt_cond = threading.Condition(threading.Lock())

    def create_thread(start_routine):
        p = _PRThread()
        p.task = _start(start_routine)
        time.sleep(create_delay)
        return p

    def m_main():
        _say(out, "mMain: begin")
        if fixed:
            with mt_cond:
                while not shared["init"]:
                    mt_cond.wait()
        m_state = shared["m_thread"].state
        _say(out, f"mMain: state is {m_state}")
        return m_state

    _say(out, "ordering: begin")
    m_thread = create_thread(m_main)
    shared["m_thread"] = m_thread
    if fixed:
        with mt_cond:
            shared["init"] = True
            mt_cond.notify()
    state = m_thread.task.outcome()
    _say(out, "ordering: end")
    return state


def join_demo(variant=JoinVariant.JOIN, out=None, delay=None):
    """Have a parent wait for a child in the chosen way.

    Returns True when the parent's waits all ended by the child's signal,
    False when a signal was lost and the parent had to give up waiting.
    """
    variant = JoinVariant(variant)
    out = sys.stdout if out is None else out
    delay = _DEFAULT_JOIN_DELAY[variant] if delay is None else delay
    runners = {
        JoinVariant.JOIN: _join_cond,
        JoinVariant.MODULAR: _join_modular,
        JoinVariant.NO_LOCK: _join_no_lock,
        JoinVariant.NO_STATE_VAR: _join_no_state_var,
        JoinVariant.SPIN: _join_spin,
    }
    _say(out, "parent: begin")
    woken = runners[variant](out, delay)
    _say(out, "parent: end")
    return woken


def _join_cond(out, delay):
    cond = threading.Condition(threading.Lock())
    done = []

    def child():
        _say(out, "child")
        time.sleep(delay)
        with cond:
            done.append(True)
            cond.notify()

    task = _start(child)
    with cond:
        while not done:
            cond.wait()
    task.outcome()
    return True


def _join_modular(out, delay):
    sync = Synchronizer()

    def child():
        _say(out, "child")
        time.sleep(delay)
        sync.signal()

    task = _start(child)
    sync.wait()
    task.outcome()
    return True


def _join_no_lock(out, delay):
    cond = threading.Condition(threading.Lock())
    done = []

    def child():
        _say(out, "child: begin")
        time.sleep(delay)
        done.append(True)
        _say(out, "child: signal")
        # Signalling without taking the mutex: if the parent holds it, nobody
        # is waiting and the signal is lost.
        if cond.acquire(blocking=False):
            try:
                cond.notify()
            finally:
                cond.release()

    task = _start(child)
    woken = True
    with cond:
        _say(out, "parent: check condition")
        while not done:
            time.sleep(2 * delay)
            _say(out, "parent: wait to be signalled...")
            if not cond.wait(timeout=2 * delay):
                woken = False
                _say(out, "parent: signal lost, gave up waiting")
    task.outcome()
    return woken


def _join_no_state_var(out, delay):
    cond = threading.Condition(threading.Lock())

    def child():
        _say(out, "child: begin")
        with cond:
            _say(out, "child: signal")
            cond.notify()

    task = _start(child)
    time.sleep(2 * delay)
    _say(out, "parent: wait to be signalled...")
    with cond:
        woken = cond.wait(timeout=2 * delay)
    if not woken:
        _say(out, "parent: signal lost, gave up waiting")
    task.outcome()
    return woken


def _join_spin(out, delay):
    done = _Counter()

    def child():
        _say(out, "child")
        time.sleep(delay)
        done.value = 1

    task = _start(child)
    while done.value == 0:
        pass
    task.outcome()
    return True